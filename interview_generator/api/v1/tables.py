import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from interview_generator.api.deps import get_export_encoder
from interview_generator.core.exceptions import ExportValidationError
from interview_generator.services.export.encoder import ExportEncoder

logger = logging.getLogger(__name__)

tables_router = APIRouter()


@tables_router.post("/tables/{table}")
async def export_table(
    table: str,
    request: Request,
    format: Optional[str] = Query(default=None),
    encoder: ExportEncoder = Depends(get_export_encoder),
):
    """
    Export interview records as txt, csv, xlsx, json or html.

    Flow:
    1. Validate table name and format (absent format means HTML)
    2. Parse and validate the {"interviews": [...]} body
    3. Encode and return, as an attachment for download formats
    """
    encoder.validate_table(table)
    export_format = encoder.validate_format(format)

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ExportValidationError("Request body must be valid JSON")

    records = encoder.validate_records(body)
    export = encoder.encode(records, export_format)

    logger.info(f"Exporting {len(records)} {table} record(s) as {export_format}")
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers=export.headers,
    )
