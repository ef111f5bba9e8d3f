from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.log_entry import PacketTrackingOptions
from app.services.log_files import LogFileRepository, get_log_file_repository
from app.services.settings import get_settings, to_tracking_options


def _existing_log_repository(
    repo: LogFileRepository = Depends(get_log_file_repository),
) -> LogFileRepository:
    if not repo.directory_exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Logs directory not found")
    return repo


def _tracking_options(db: Session = Depends(get_db)) -> PacketTrackingOptions:
    return to_tracking_options(get_settings(db))


DbSession = Annotated[Session, Depends(get_db)]
LogRepository = Annotated[LogFileRepository, Depends(_existing_log_repository)]
TrackingOptions = Annotated[PacketTrackingOptions, Depends(_tracking_options)]
