"""
Application-wide constants for the AI Interview Generator.
Centralizes endpoint paths, export formats and user-facing messages.
"""
from typing import NamedTuple


# --- Validation ---

EXPERIENCE_RANGE_PATTERN = r'^[0-9]+-[0-9]+$'
COMPANY_SIZE_PATTERN = r'^[0-9]+-[0-9]+$'


# --- API Endpoints ---

CHECKOUT_ENDPOINT = "/api/checkout"
TABLES_ENDPOINT = "/api/tables"
START_INTERVIEWS_ENDPOINT = "/api/v1/ideation/start-interviews"
INTERVIEW_STATUS_ENDPOINT = "/api/v1/ideation/interview-status"


# --- Checkout Defaults (used when form fields are blank) ---

DEFAULT_ROLE = "Software Engineer"
DEFAULT_INDUSTRY = "Technology, Information and Internet"
DEFAULT_EXPERIENCE_RANGE = "2-7"
DEFAULT_COMPANY_SIZE_RANGE = "100-1000"


# --- Export ---

INTERVIEWS_TABLE = "interviews"
VALID_TABLES = (INTERVIEWS_TABLE,)
EXPORT_DISPLAY_NAME = "Interviews"  # File stem and sheet title
DEFAULT_EXPORT_FILENAME = "Interview"


class ExportFormat(NamedTuple):
    label: str
    format: str
    new_tab: bool

    @property
    def path(self) -> str:
        return f"{TABLES_ENDPOINT}/{INTERVIEWS_TABLE}?format={self.format}"


EXPORT_FORMATS = (
    ExportFormat("TXT", "txt", new_tab=False),
    ExportFormat("CSV", "csv", new_tab=False),
    ExportFormat("XLSX", "xlsx", new_tab=False),
    ExportFormat("JSON", "json", new_tab=True),
    ExportFormat("HTML", "html", new_tab=True),
)


def get_export_format(name: str) -> ExportFormat:
    """Look up an export format by label or format name (case-insensitive)."""
    key = name.lower()
    for export_format in EXPORT_FORMATS:
        if key in (export_format.format, export_format.label.lower()):
            return export_format
    raise ValueError(
        f"Unsupported format '{name}'. Supported formats: "
        f"{', '.join(f.format for f in EXPORT_FORMATS)}"
    )


# --- Notification Messages ---

SUCCESS_TITLE = "Success!"
SUCCESS_DESCRIPTION = "Your interviews have been generated."
ERROR_TITLE = "Error"
EXPORT_ERROR_TITLE = "Export Error"
CHECKOUT_ERROR_TITLE = "Checkout Error"
START_FAILED_MESSAGE = "Failed to start interview generation"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
