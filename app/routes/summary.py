from fastapi import APIRouter

from app.core.dependencies import LogRepository, TrackingOptions
from app.schemas.summary import SummaryResponse
from app.services.colors import get_packet_color_map
from app.services.pipeline import extract_packet_ids, run_pipeline
from app.services.summary import build_log_summary

router = APIRouter(prefix="/summary", tags=["summary"])


@router.get("", response_model=SummaryResponse)
def get_summary(repo: LogRepository, options: TrackingOptions):
    files = repo.read_log_files()
    if not files:
        return SummaryResponse(
            error="No log files found",
            details="Place .log files in the logs/ directory.",
        )

    result = run_pipeline(files, options)
    return SummaryResponse(
        summary=build_log_summary(result.entries),
        packet_colors=get_packet_color_map(extract_packet_ids(result.entries)),
        warnings=result.warnings,
    )
