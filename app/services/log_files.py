import logging
from pathlib import Path
from typing import Iterable, List, Optional

from app.core.config import settings
from app.schemas.log_entry import LogFileContent

logger = logging.getLogger(__name__)


class LogFileRepository:
    """Reads log files from a single directory on disk."""

    def __init__(self, logs_dir: str | Path, extensions: Optional[Iterable[str]] = None):
        path = Path(logs_dir)
        # If logs_dir is relative, resolve it from the working directory
        if not path.is_absolute():
            path = (Path.cwd() / path).resolve()
        self.logs_dir = path
        self.extensions = {ext.lower().lstrip(".") for ext in (extensions or settings.LOG_FILE_EXTENSIONS)}

    def directory_exists(self) -> bool:
        return self.logs_dir.is_dir()

    def get_log_file_names(self) -> List[str]:
        names = [
            p.name
            for p in self.logs_dir.iterdir()
            if p.is_file() and p.suffix.lower().lstrip(".") in self.extensions
        ]
        return sorted(names)

    def read_log_file(self, file_name: str) -> LogFileContent:
        path = self.logs_dir / file_name
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return LogFileContent(name=file_name, content=f.read())

    def read_log_files(self) -> List[LogFileContent]:
        files = [self.read_log_file(name) for name in self.get_log_file_names()]
        logger.debug("Read %d log files from %s", len(files), self.logs_dir, extra={"file_count": len(files)})
        return files


def get_log_file_repository() -> LogFileRepository:
    return LogFileRepository(settings.LOGS_DIR)
