import logging
import re
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings as app_settings
from app.models.packet_settings import PacketSettings
from app.schemas.log_entry import PacketStrategy, PacketTrackingOptions
from app.schemas.settings import SettingsUpdate

logger = logging.getLogger(__name__)


def create_default_settings() -> PacketSettings:
    return PacketSettings(
        enable_packets=app_settings.DEFAULT_ENABLE_PACKETS,
        packet_start_pattern=app_settings.DEFAULT_PACKET_START_PATTERN,
        packet_end_pattern=app_settings.DEFAULT_PACKET_END_PATTERN,
        packet_id_pattern=app_settings.DEFAULT_PACKET_ID_PATTERN,
        packet_strategy=PacketStrategy(app_settings.DEFAULT_PACKET_STRATEGY).value,
    )


def get_settings(db: Session) -> PacketSettings:
    """Latest settings row, seeding the defaults into an empty store."""
    row = db.execute(
        select(PacketSettings).order_by(PacketSettings.id.desc()).limit(1)
    ).scalar_one_or_none()
    if row is not None:
        return row

    row = create_default_settings()
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Seeded default packet settings (id=%d)", row.id)
    return row


def _check_pattern(pattern: str, label: str, errors: List[str], allow_empty: bool = False) -> None:
    if not pattern.strip():
        if not allow_empty:
            errors.append(f"Packet {label} pattern cannot be empty")
        return
    try:
        re.compile(pattern)
    except re.error:
        errors.append(f"Invalid regex pattern for packet {label}")


def validate_settings(update: SettingsUpdate) -> List[str]:
    """Returns validation errors; an empty list means the update is acceptable."""
    errors: List[str] = []
    if update.packet_start_pattern is not None:
        _check_pattern(update.packet_start_pattern, "start", errors)
    if update.packet_end_pattern is not None:
        _check_pattern(update.packet_end_pattern, "end", errors)
    if update.packet_id_pattern is not None:
        # Blank falls back to the default identifier pattern
        _check_pattern(update.packet_id_pattern, "id", errors, allow_empty=True)
    return errors


def update_settings(db: Session, update: SettingsUpdate) -> PacketSettings:
    row = get_settings(db)

    changes = update.model_dump(exclude_none=True)
    for field, value in changes.items():
        if isinstance(value, PacketStrategy):
            value = value.value
        setattr(row, field, value)
    row.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(row)
    logger.info("Packet settings updated: %s", sorted(changes))
    return row


def to_tracking_options(row: PacketSettings) -> PacketTrackingOptions:
    return PacketTrackingOptions(
        enable_packets=bool(row.enable_packets),
        packet_start_pattern=row.packet_start_pattern,
        packet_end_pattern=row.packet_end_pattern,
        packet_id_pattern=row.packet_id_pattern,
        strategy=PacketStrategy(row.packet_strategy),
    )
