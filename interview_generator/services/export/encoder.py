"""
Export encoding for interview tables.

Turns a validated list of records into one of the supported encodings
(txt, csv, xlsx, json, html) together with its content type and, for
download formats, a suggested file name.
"""
import csv
import html
import io
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from openpyxl import Workbook

from interview_generator.core.constants import EXPORT_DISPLAY_NAME, EXPORT_FORMATS, VALID_TABLES
from interview_generator.core.exceptions import ExportValidationError
from interview_generator.core.logger import log_execution_time

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "html"

CONTENT_TYPES = {
    "csv": "text/csv",
    "txt": "text/plain",
    "xlsx": "application/vnd.ms-excel",
    "json": "application/json",
    "html": "text/html",
}

# Formats returned with Content-Disposition: attachment
DOWNLOAD_FORMATS = {"csv", "txt", "xlsx"}


@dataclass(frozen=True)
class EncodedExport:
    content: bytes
    media_type: str
    filename: Optional[str] = None

    @property
    def headers(self) -> Dict[str, str]:
        if self.filename is None:
            return {}
        return {"Content-Disposition": f'attachment; filename="{self.filename}"'}


class ExportEncoder:
    """
    Validates export requests and encodes record lists.

    Only formatting lives here; the route handles HTTP concerns.
    """

    @staticmethod
    def validate_table(table: str) -> str:
        if not table:
            raise ExportValidationError("Table name is required")
        if table not in VALID_TABLES:
            raise ExportValidationError(
                f"Table '{table}' not found. Supported tables: {', '.join(VALID_TABLES)}"
            )
        return table

    @staticmethod
    def validate_format(export_format: Optional[str]) -> str:
        """An absent format means HTML; an unrecognised one is an error."""
        if not export_format:
            return DEFAULT_FORMAT
        valid_formats = [f.format for f in EXPORT_FORMATS]
        if export_format not in valid_formats:
            raise ExportValidationError(
                f"Unsupported format '{export_format}'. Supported formats: {', '.join(valid_formats)}"
            )
        return export_format

    @staticmethod
    def validate_records(body: Any) -> List[Dict[str, Any]]:
        """
        Validate the request body and return its interview records.

        Raises:
            ExportValidationError: body missing, not an object, or interviews
                missing, not a list, empty, or holding non-objects
        """
        if not body or not isinstance(body, dict):
            raise ExportValidationError("Request body is required")

        interviews = body.get("interviews")
        if interviews is None:
            raise ExportValidationError("No interview data provided")
        if not isinstance(interviews, list):
            raise ExportValidationError("Interview data must be an array")
        if len(interviews) == 0:
            raise ExportValidationError("At least one interview is required for export")
        if not all(isinstance(record, dict) for record in interviews):
            raise ExportValidationError("Each interview must be an object")

        return interviews

    @classmethod
    @log_execution_time
    def encode(cls, records: List[Dict[str, Any]], export_format: Optional[str] = None) -> EncodedExport:
        """Encode validated records in the requested format (HTML when absent)."""
        export_format = cls.validate_format(export_format)
        if not records:
            raise ExportValidationError("At least one interview is required for export")

        columns = cls._columns(records)
        rows = [[cls._cell(record.get(column)) for column in columns] for record in records]

        if export_format == "csv":
            content = cls._delimited(columns, rows, delimiter=",")
        elif export_format == "txt":
            content = cls._delimited(columns, rows, delimiter="\t")
        elif export_format == "xlsx":
            content = cls._xlsx(columns, rows)
        elif export_format == "json":
            content = json.dumps(records, ensure_ascii=False).encode("utf-8")
        else:
            content = cls._html(columns, rows)

        filename = f"{EXPORT_DISPLAY_NAME}.{export_format}" if export_format in DOWNLOAD_FORMATS else None
        logger.info(f"Encoded {len(records)} record(s) as {export_format} ({len(content)} bytes)")
        return EncodedExport(content=content, media_type=CONTENT_TYPES[export_format], filename=filename)

    @staticmethod
    def _columns(records: List[Dict[str, Any]]) -> List[str]:
        """Union of record keys in first-seen order."""
        columns: List[str] = []
        for record in records:
            for key in record:
                if key not in columns:
                    columns.append(key)
        return columns

    @staticmethod
    def _cell(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return str(value)

    @staticmethod
    def _delimited(columns: List[str], rows: List[List[str]], delimiter: str) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=delimiter, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(columns)
        writer.writerows(rows)
        return buffer.getvalue().encode("utf-8")

    @staticmethod
    def _xlsx(columns: List[str], rows: List[List[str]]) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = EXPORT_DISPLAY_NAME
        ws.append(columns)
        for row in rows:
            ws.append(row)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def _html(columns: List[str], rows: List[List[str]]) -> bytes:
        lines = [
            "<!DOCTYPE html>",
            '<html><head><meta charset="utf-8"/>',
            f"<title>{EXPORT_DISPLAY_NAME}</title></head><body>",
            "<table>",
            "<tr>" + "".join(f"<td>{html.escape(column)}</td>" for column in columns) + "</tr>",
        ]
        for row in rows:
            lines.append("<tr>" + "".join(f"<td>{html.escape(cell)}</td>" for cell in row) + "</tr>")
        lines.append("</table>")
        lines.append("</body></html>")
        return "\n".join(lines).encode("utf-8")
