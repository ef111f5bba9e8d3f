from datetime import datetime

from sqlalchemy import Integer, String, DateTime, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class PacketSettings(Base):
    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    enable_packets: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # User-supplied regular expressions, stored as entered
    packet_start_pattern: Mapped[str] = mapped_column(Text, nullable=False)
    packet_end_pattern: Mapped[str] = mapped_column(Text, nullable=False)
    packet_id_pattern: Mapped[str] = mapped_column(Text, nullable=False)

    packet_strategy: Mapped[str] = mapped_column(String(16), nullable=False, default="counter")

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
