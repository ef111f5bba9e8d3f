from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.dependencies import LogRepository, TrackingOptions
from app.schemas.log_entry import LogEntry, LogsResponse
from app.schemas.pagination import PaginationParams
from app.services.pipeline import extract_log_levels, extract_packet_ids, run_pipeline


router = APIRouter(prefix="/logs", tags=["logs"])


def _matches(
    entry: LogEntry,
    level: Optional[str],
    file_name: Optional[str],
    packet_id: Optional[str],
    keyword: Optional[str],
) -> bool:
    if level is not None and entry.level != level:
        return False
    if file_name is not None and entry.file_name != file_name:
        return False
    if packet_id is not None and entry.packet_id != packet_id:
        return False
    if keyword is not None and keyword.lower() not in entry.message.lower():
        return False
    return True


@router.get("", response_model=LogsResponse)
def get_logs(
    repo: LogRepository,
    options: TrackingOptions,
    pagination: PaginationParams = Depends(),
    level: Optional[str] = Query(None, description="Exact log level (e.g. ERROR, WARN)"),
    file_name: Optional[str] = Query(None, description="Only entries from this file"),
    packet_id: Optional[str] = Query(None, description="Only entries of this packet"),
    keyword: Optional[str] = Query(None, description="Case-insensitive search in message"),
):
    files = repo.read_log_files()
    if not files:
        return LogsResponse(
            settings=options,
            error="No log files found",
            message="No log files found",
        )

    result = run_pipeline(files, options)
    entries = result.entries
    filtered = [e for e in entries if _matches(e, level, file_name, packet_id, keyword)]

    return LogsResponse(
        logs=pagination.apply(filtered),
        total_entries=len(filtered),
        files=[f.name for f in files],
        packets=extract_packet_ids(entries),
        levels=extract_log_levels(entries),
        settings=options,
        warnings=result.warnings,
    )
