import logging
from pathlib import Path
import sys

from .config import BASE_DIR, Settings, get_settings
from .observability import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(correlation_id)s] %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE_PATH:
        log_path = Path(settings.LOG_FILE_PATH)
        if not log_path.is_absolute():
            log_path = BASE_DIR / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    correlation_filter = CorrelationIdFilter()
    for handler in handlers:
        handler.addFilter(correlation_filter)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
