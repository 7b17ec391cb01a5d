from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from storefront.services.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_NAME = "upload"


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def safe_file_name(file_name: str | None) -> str:
    return Path(file_name or "").name


class ImageStore:
    """Stores uploaded files verbatim under ``<epoch-ms>-<original name>``."""

    def __init__(
        self,
        root: Path,
        clock: Callable[[], int] = epoch_millis,
    ):
        self.root = Path(root)
        self.clock = clock

    def ensure_root(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Upload directory %s is not available: %s", self.root, exc)
            raise StorageUnavailable("Upload directory is not available") from exc

    def store(self, contents: bytes, original_name: str | None) -> str:
        self.ensure_root()
        base_name = safe_file_name(original_name) or DEFAULT_UPLOAD_NAME
        timestamp = self.clock()
        while True:
            file_name = f"{timestamp}-{base_name}"
            try:
                with (self.root / file_name).open("xb") as buffer:
                    buffer.write(contents)
            except FileExistsError:
                timestamp += 1
                continue
            except OSError as exc:
                logger.error("Failed to write upload %s: %s", file_name, exc)
                raise StorageUnavailable("Failed to store uploaded file") from exc
            logger.info("Stored upload %s (%d bytes)", file_name, len(contents))
            return file_name

    def path_for(self, file_name: str) -> Path:
        return self.root / safe_file_name(file_name)

    def discard(self, file_name: str) -> None:
        try:
            self.path_for(file_name).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to remove upload %s: %s", file_name, exc)
