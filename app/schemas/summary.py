from typing import Dict, List, Optional
from pydantic import BaseModel


class SummaryCount(BaseModel):
    label: str
    count: int


class TimeRangeSummary(BaseModel):
    start: str
    end: str
    duration_ms: int


class PacketDurationSummary(BaseModel):
    packet_id: str
    start_timestamp: str
    end_timestamp: str
    duration_ms: int
    file_name: Optional[str] = None
    tags: List[str] = []


class PacketSummaryStats(BaseModel):
    total_packets: int
    packets_with_duration: int
    min_duration_ms: Optional[int] = None
    max_duration_ms: Optional[int] = None
    avg_duration_ms: Optional[float] = None


class LogSummary(BaseModel):
    total_entries: int
    total_files: int
    time_range: Optional[TimeRangeSummary] = None
    levels: List[SummaryCount]
    files: List[SummaryCount]
    packet_stats: PacketSummaryStats
    packet_durations: List[PacketDurationSummary]


class SummaryResponse(BaseModel):
    summary: Optional[LogSummary] = None
    packet_colors: Dict[str, str] = {}
    warnings: List[str] = []
    error: Optional[str] = None
    details: Optional[str] = None
