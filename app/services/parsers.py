import re
from datetime import datetime, timedelta
from typing import List, Optional, Pattern

from app.schemas.log_entry import LogEntry, LogFileContent


# --- Pipe-delimited app log header ---
# Example:
# 2025-12-31 12:15:41,120 | ERROR | billing.worker | Payment failed | retrying
# The module never contains "|"; the message keeps every "|" after the third one.
LOG_LINE_REGEX = re.compile(
    r"^(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2},\d{3})\s*\|\s*(\w+)\s*\|\s*"
    r"([^|]+?)\s*\|\s*(.+)$"
)

EXTRACT_MODE_REGEX = re.compile(r"routed to extract mode:\s*([a-zA-Z0-9_-]+)", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")
_ONE_MS = timedelta(milliseconds=1)


def parse_timestamp(ts: str) -> Optional[datetime]:
    # Example: 2025-12-31 12:15:41,120
    try:
        normalized = _WHITESPACE.sub(" ", ts.strip()).replace(",", ".")
        return datetime.fromisoformat(normalized)
    except (ValueError, TypeError):
        return None


def format_timestamp(dt: datetime) -> str:
    """Render a datetime back into the canonical YYYY-MM-DD HH:MM:SS,mmm form."""
    return f"{dt.strftime('%Y-%m-%d %H:%M:%S')},{dt.microsecond // 1000:03d}"


def duration_ms(start: datetime, end: datetime) -> int:
    """Whole milliseconds from start to end, floored at zero."""
    return max(0, (end - start) // _ONE_MS)


def extract_extract_mode(message: str) -> Optional[str]:
    m = EXTRACT_MODE_REGEX.search(message)
    return m.group(1) if m else None


def extract_job_id(message: str, id_regex: Pattern[str]) -> Optional[str]:
    """
    First capture group of id_regex found in message, or the whole match
    when the pattern has no groups. Empty captures count as no identifier.
    """
    m = id_regex.search(message)
    if not m:
        return None
    value = m.group(1) if id_regex.groups else m.group(0)
    return value or None


def parse_line(line: str, file_name: str, line_number: int) -> Optional[LogEntry]:
    """
    Returns a LogEntry for a header line, None for anything else.
    Never raises.
    """
    m = LOG_LINE_REGEX.match(line)
    if not m:
        return None

    message = m.group(4).strip()
    return LogEntry(
        timestamp=m.group(1).strip(),
        level=m.group(2).strip(),
        module=m.group(3).strip(),
        message=message,
        file_name=file_name,
        line_number=line_number,
        raw_line=line,
        extract_mode=extract_extract_mode(message),
    )


def parse_log_file(file: LogFileContent) -> List[LogEntry]:
    """
    Rebuild the logical entries of one file.

    Lines that are not headers (stack traces, wrapped payloads) are folded into
    the preceding entry. Anything before the first header has nowhere to go and
    is dropped. Blank lines are skipped but still count towards line numbers.
    """
    entries: List[LogEntry] = []
    current: Optional[LogEntry] = None

    for line_number, raw_line in enumerate(file.content.split("\n"), start=1):
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue

        parsed = parse_line(line, file.name, line_number)
        if parsed is not None:
            if current is not None:
                entries.append(current)
            current = parsed
        elif current is not None:
            current.message += "\n" + line
            current.raw_line += "\n" + line

    if current is not None:
        entries.append(current)

    return entries
