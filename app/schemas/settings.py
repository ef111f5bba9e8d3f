from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from app.schemas.log_entry import PacketStrategy


class SettingsResponse(BaseModel):
    id: int
    enable_packets: bool
    packet_start_pattern: str
    packet_end_pattern: str
    packet_id_pattern: str
    packet_strategy: PacketStrategy
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SettingsUpdate(BaseModel):
    enable_packets: Optional[bool] = None
    packet_start_pattern: Optional[str] = None
    packet_end_pattern: Optional[str] = None
    packet_id_pattern: Optional[str] = None
    packet_strategy: Optional[PacketStrategy] = None


class SettingsEnvelope(BaseModel):
    settings: SettingsResponse
    message: Optional[str] = None
