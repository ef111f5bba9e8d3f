"""
Packet correlation: groups the entries of one unit of work under a shared packet id.

Two strategies share the same entry annotations (packet_id, is_packet_start,
is_packet_end) and differ only in where the id comes from:

- counter: a start-pattern match opens packet "packet_<n>_<timestamp>" for its
  file; following entries of that file join it until the end pattern matches.
- job_id: the id is mined from each message with the identifier pattern and
  carried forward to later entries of the same file until the end pattern matches.

All state is per file and lives in a CorrelationState owned by a single run.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Pattern

from app.schemas.log_entry import (
    DEFAULT_PACKET_ID_PATTERN,
    LogEntry,
    PacketStrategy,
    PacketTrackingOptions,
)
from app.services.parsers import duration_ms, extract_job_id, parse_timestamp

logger = logging.getLogger(__name__)


class PacketPatternError(ValueError):
    """A configured packet pattern does not compile."""

    def __init__(self, label: str, pattern: str, error: re.error):
        self.label = label
        self.pattern = pattern
        super().__init__(f"Invalid regex pattern for packet {label} {pattern!r}: {error}")


@dataclass
class FilePacketState:
    current_packet_id: Optional[str] = None
    counter: int = 0
    packet_start_time: Optional[datetime] = None


@dataclass
class CorrelationState:
    files: Dict[str, FilePacketState] = field(default_factory=dict)

    def for_file(self, file_name: str) -> FilePacketState:
        return self.files.setdefault(file_name, FilePacketState())


@dataclass(frozen=True)
class PacketPatterns:
    start: Optional[Pattern[str]]
    end: Optional[Pattern[str]]
    packet_id: Optional[Pattern[str]] = None


def _compile(label: str, pattern: Optional[str], flags: int = 0) -> Optional[Pattern[str]]:
    if not pattern:
        return None
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise PacketPatternError(label, pattern, e) from e


def compile_patterns(options: PacketTrackingOptions) -> PacketPatterns:
    """Compile the patterns the selected strategy needs. Raises PacketPatternError."""
    start = _compile("start", options.packet_start_pattern)
    end = _compile("end", options.packet_end_pattern)
    if options.strategy is PacketStrategy.counter:
        return PacketPatterns(start=start, end=end)

    id_pattern = (options.packet_id_pattern or "").strip() or DEFAULT_PACKET_ID_PATTERN
    return PacketPatterns(start=start, end=end, packet_id=_compile("id", id_pattern, re.IGNORECASE))


def _apply_counter(entries: Iterable[LogEntry], patterns: PacketPatterns, state: CorrelationState) -> None:
    for entry in entries:
        fs = state.for_file(entry.file_name)

        if patterns.start.search(entry.message):
            # An open packet for this file is abandoned without an end marker
            fs.counter += 1
            fs.current_packet_id = f"packet_{fs.counter}_{entry.timestamp}"
            fs.packet_start_time = parse_timestamp(entry.timestamp)
            entry.packet_id = fs.current_packet_id
            entry.is_packet_start = True
        elif fs.current_packet_id is not None:
            entry.packet_id = fs.current_packet_id
            if patterns.end.search(entry.message):
                entry.is_packet_end = True
                end_time = parse_timestamp(entry.timestamp)
                if fs.packet_start_time is not None and end_time is not None:
                    entry.duration_ms = duration_ms(fs.packet_start_time, end_time)
                fs.current_packet_id = None
                fs.packet_start_time = None


def _apply_job_id(entries: Iterable[LogEntry], patterns: PacketPatterns, state: CorrelationState) -> None:
    for entry in entries:
        fs = state.for_file(entry.file_name)
        job_id = extract_job_id(entry.message, patterns.packet_id)

        if job_id:
            fs.current_packet_id = job_id
            entry.packet_id = job_id
            if patterns.start is not None and patterns.start.search(entry.message):
                entry.is_packet_start = True
        elif fs.current_packet_id is not None:
            entry.packet_id = fs.current_packet_id

        if entry.packet_id and patterns.end is not None and patterns.end.search(entry.message):
            entry.is_packet_end = True
            fs.current_packet_id = None


def apply_packet_tracking(
    entries: List[LogEntry],
    options: PacketTrackingOptions,
    state: Optional[CorrelationState] = None,
) -> List[str]:
    """
    Annotate entries in place, scanning them in the given order.

    Returns warnings instead of raising: a pattern that does not compile, or a
    counter run without both start and end patterns, leaves every entry
    without a packet id.
    """
    if not options.enable_packets:
        return []

    try:
        patterns = compile_patterns(options)
    except PacketPatternError as e:
        logger.warning("Packet tracking disabled: %s", e, extra={"strategy": options.strategy.value})
        return [f"{e}; packet tracking disabled"]

    if state is None:
        state = CorrelationState()

    if options.strategy is PacketStrategy.counter:
        if patterns.start is None or patterns.end is None:
            message = "Packet start and end patterns are required; packet tracking disabled"
            logger.warning(message, extra={"strategy": options.strategy.value})
            return [message]
        _apply_counter(entries, patterns, state)
    else:
        _apply_job_id(entries, patterns, state)

    return []
