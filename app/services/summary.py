import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from app.schemas.log_entry import LogEntry
from app.schemas.summary import (
    LogSummary,
    PacketDurationSummary,
    PacketSummaryStats,
    SummaryCount,
    TimeRangeSummary,
)
from app.services.parsers import duration_ms, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


def _to_counts(counts: Dict[str, int]) -> List[SummaryCount]:
    # Stable sort: equal counts stay in first-seen order
    ordered = sorted(counts.items(), key=lambda item: -item[1])
    return [SummaryCount(label=label, count=count) for label, count in ordered]


def _build_time_range(start: Optional[datetime], end: Optional[datetime]) -> Optional[TimeRangeSummary]:
    if start is None or end is None:
        return None
    return TimeRangeSummary(
        start=format_timestamp(start),
        end=format_timestamp(end),
        duration_ms=duration_ms(start, end),
    )


def _build_packet_stats(total_packets: int, durations: List[PacketDurationSummary]) -> PacketSummaryStats:
    if not durations:
        return PacketSummaryStats(total_packets=total_packets, packets_with_duration=0)

    values = np.array([d.duration_ms for d in durations], dtype=np.int64)
    return PacketSummaryStats(
        total_packets=total_packets,
        packets_with_duration=len(durations),
        min_duration_ms=int(values.min()),
        max_duration_ms=int(values.max()),
        avg_duration_ms=float(values.mean()),
    )


def build_log_summary(entries: Iterable[LogEntry]) -> LogSummary:
    """
    Single pass over the final entry sequence.

    Packet durations pair explicit flags: per (file, packet id) the most recent
    unmatched start is closed by the next end. Only the first closed pair of a
    packet id is reported; packets that never close count towards
    total_packets and nothing else.
    """
    total_entries = 0
    level_counts: Dict[str, int] = {}
    file_counts: Dict[str, int] = {}
    earliest: Optional[datetime] = None
    latest: Optional[datetime] = None

    packet_order: Dict[str, None] = {}
    packet_tags: Dict[str, Set[str]] = {}
    pending_starts: Dict[Tuple[str, str], Tuple[LogEntry, Optional[datetime]]] = {}
    closed: Dict[str, Tuple[LogEntry, LogEntry, int]] = {}

    for entry in entries:
        total_entries += 1
        level_counts[entry.level] = level_counts.get(entry.level, 0) + 1
        file_counts[entry.file_name] = file_counts.get(entry.file_name, 0) + 1

        entry_time = parse_timestamp(entry.timestamp)
        if entry_time is not None:
            if earliest is None or entry_time < earliest:
                earliest = entry_time
            if latest is None or entry_time > latest:
                latest = entry_time

        packet_id = entry.packet_id
        if not packet_id:
            continue

        packet_order.setdefault(packet_id, None)
        if entry.extract_mode:
            packet_tags.setdefault(packet_id, set()).add(entry.extract_mode)

        key = (entry.file_name, packet_id)
        if entry.is_packet_start:
            pending_starts[key] = (entry, entry_time)
        if entry.is_packet_end and key in pending_starts:
            start_entry, start_time = pending_starts.pop(key)
            if packet_id not in closed and start_time is not None and entry_time is not None:
                closed[packet_id] = (start_entry, entry, duration_ms(start_time, entry_time))

    packet_durations: List[PacketDurationSummary] = []
    for packet_id in packet_order:
        if packet_id not in closed:
            continue
        start_entry, end_entry, ms = closed[packet_id]
        packet_durations.append(
            PacketDurationSummary(
                packet_id=packet_id,
                start_timestamp=start_entry.timestamp,
                end_timestamp=end_entry.timestamp,
                duration_ms=ms,
                file_name=start_entry.file_name,
                tags=sorted(packet_tags.get(packet_id, set())),
            )
        )

    logger.debug(
        "Summary built: %d entries, %d packets, %d closed",
        total_entries, len(packet_order), len(packet_durations),
    )

    return LogSummary(
        total_entries=total_entries,
        total_files=len(file_counts),
        time_range=_build_time_range(earliest, latest),
        levels=_to_counts(level_counts),
        files=_to_counts(file_counts),
        packet_stats=_build_packet_stats(len(packet_order), packet_durations),
        packet_durations=packet_durations,
    )
