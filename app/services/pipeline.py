import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from app.schemas.log_entry import LogEntry, LogFileContent, PacketTrackingOptions, ParseResult
from app.services.correlation import apply_packet_tracking
from app.services.parsers import parse_log_file, parse_timestamp

logger = logging.getLogger(__name__)


def _sort_key(entry: LogEntry) -> Tuple[bool, datetime]:
    # Unparsable timestamps go last; sorted() is stable so ties keep input order
    ts = parse_timestamp(entry.timestamp)
    return (ts is None, ts or datetime.min)


def sort_log_entries(entries: Iterable[LogEntry]) -> List[LogEntry]:
    return sorted(entries, key=_sort_key)


def merge_log_files(files: Iterable[LogFileContent]) -> List[LogEntry]:
    """Reconstruct every file and return one timestamp-ordered sequence."""
    all_entries: List[LogEntry] = []
    for file in files:
        all_entries.extend(parse_log_file(file))
    return sort_log_entries(all_entries)


def run_pipeline(
    files: Iterable[LogFileContent],
    options: Optional[PacketTrackingOptions] = None,
) -> ParseResult:
    """Parse, merge, sort and correlate. Warnings carry non-fatal configuration problems."""
    files = list(files)
    entries = merge_log_files(files)

    warnings: List[str] = []
    if options is not None and options.enable_packets:
        warnings = apply_packet_tracking(entries, options)

    logger.info(
        "Parsed %d entries from %d files",
        len(entries), len(files),
        extra={
            "file_count": len(files),
            "entry_count": len(entries),
            "packet_count": len(extract_packet_ids(entries)),
        },
    )
    return ParseResult(entries=entries, warnings=warnings)


def parse_log_files(
    files: Iterable[LogFileContent],
    options: Optional[PacketTrackingOptions] = None,
) -> List[LogEntry]:
    return run_pipeline(files, options).entries


def extract_packet_ids(entries: Iterable[LogEntry]) -> List[str]:
    return sorted({e.packet_id for e in entries if e.packet_id})


def extract_log_levels(entries: Iterable[LogEntry]) -> List[str]:
    return sorted({e.level for e in entries})
