import enum
from typing import List, Optional
from pydantic import BaseModel


DEFAULT_PACKET_ID_PATTERN = "job_id=([a-zA-Z0-9_-]+)"


class PacketStrategy(str, enum.Enum):
    counter = "counter"
    job_id = "job_id"


class LogFileContent(BaseModel):
    name: str
    content: str


class LogEntry(BaseModel):
    timestamp: str
    level: str
    module: str
    message: str
    file_name: str
    line_number: int
    raw_line: str

    # Set by packet correlation
    packet_id: Optional[str] = None
    is_packet_start: Optional[bool] = None
    is_packet_end: Optional[bool] = None
    duration_ms: Optional[int] = None

    extract_mode: Optional[str] = None


class PacketTrackingOptions(BaseModel):
    enable_packets: bool = False
    packet_start_pattern: str = ""
    packet_end_pattern: str = ""
    packet_id_pattern: str = DEFAULT_PACKET_ID_PATTERN
    strategy: PacketStrategy = PacketStrategy.counter


class ParseResult(BaseModel):
    entries: List[LogEntry]
    warnings: List[str] = []


class LogsResponse(BaseModel):
    logs: List[LogEntry] = []
    total_entries: int = 0
    files: List[str] = []
    packets: List[str] = []
    levels: List[str] = []
    settings: Optional[PacketTrackingOptions] = None
    warnings: List[str] = []
    error: Optional[str] = None
    message: Optional[str] = None
