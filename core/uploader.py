# core/uploader.py
# -------------------------------------------------------------------
# Submit a result CSV to the backend's bulk import endpoint.
# The raw file is sent as-is; the backend parses it again and its
# inserted count is what gets reported to the admin.
# -------------------------------------------------------------------
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core import upload_history
from core.api_client import REQUEST_FAILED
from core.csv_ingest import ParseReport
from core.errors import ApiError
from core.resources import ResourceApi
from core.result_columns import GAET_RESULT_FORMAT, RESULT_FORMAT, ResultFormat

logger = logging.getLogger(__name__)

_FORMATS = {RESULT_FORMAT.key: RESULT_FORMAT, GAET_RESULT_FORMAT.key: GAET_RESULT_FORMAT}


@dataclass(frozen=True)
class UploadOutcome:
    inserted_count: int
    message: str


def format_for(api: ResourceApi) -> ResultFormat:
    try:
        return _FORMATS[api.spec.key]
    except KeyError:
        raise ValueError(f"{api.spec.title} does not accept CSV uploads") from None


def submit_results_csv(
    api: ResourceApi,
    file_name: str,
    content: bytes,
    uploaded_by: Optional[str] = None,
    engine=None,
    client_rows: Optional[ParseReport] = None,
) -> UploadOutcome:
    """
    Upload `content` as multipart field `csvFile`.

    Raises ApiError with the backend message (or "Upload failed"). Every
    attempt is written to upload_history when an engine is given.
    """
    fmt = format_for(api)
    extra = {"uploadedBy": uploaded_by or "admin"} if fmt.sends_uploader else {}
    parsed = client_rows.parsed_count if client_rows is not None else None
    dropped = client_rows.dropped_rows if client_rows is not None else None

    try:
        data = api.upload_csv(file_name, content, extra)
    except ApiError as e:
        message = e.message if e.message and e.message != REQUEST_FAILED else "Upload failed"
        logger.error("%s upload of %s failed: %s", fmt.key, file_name, e)
        if engine is not None:
            upload_history.record(engine, fmt.key, file_name, "failed", message,
                                  client_rows=parsed, client_dropped=dropped, uploaded_by=uploaded_by)
        raise type(e)(message, status_code=e.status_code, payload=e.payload) from e

    inserted = data.get("insertedCount")
    if inserted is None:
        inserted = data.get("totalRows")
    inserted = int(inserted or 0)
    message = f"Successfully uploaded {inserted} results!"
    logger.info("%s upload of %s: backend inserted %d (client parsed %s)",
                fmt.key, file_name, inserted, parsed)

    if engine is not None:
        upload_history.record(engine, fmt.key, file_name, "success", message,
                              client_rows=parsed, client_dropped=dropped,
                              inserted_count=inserted, uploaded_by=uploaded_by)
    return UploadOutcome(inserted_count=inserted, message=message)
