"""
JSON File Persistence Gateway

DESIGN DECISION: Each logical key is one `<key>.json` file in a data
directory. Files are small (a personal ledger), so the whole file is
rewritten on every save.

Writes are atomic: content goes to a temp file next to the target and is
moved into place with os.replace, so a crash mid-write leaves the previous
file intact. Transient OS errors are retried.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lumina.services.storage.interface import PersistenceError, PersistenceGateway


class JsonFileGateway(PersistenceGateway):
    """
    Stores each key as a UTF-8 JSON file under `data_dir`.

    The directory is created on first save, not on construction.
    """

    FILE_SUFFIX = ".json"

    def __init__(
        self,
        data_dir: Union[str, Path],
        retry_attempts: int = 3,
        retry_wait_max: float = 2.0,
    ):
        self._data_dir = Path(data_dir)
        self._retry_attempts = retry_attempts
        self._retry_wait_max = retry_wait_max
        self._logger = structlog.get_logger("lumina.storage")

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File path backing a key."""
        if not key or "/" in key or "\\" in key:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}{self.FILE_SUFFIX}"

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            # Unreadable state is treated as "no saved state"
            self._logger.warning(
                "storage_load_failed",
                key=key,
                path=str(path),
                error=str(e),
            )
            return None

    def save(self, key: str, text: str) -> None:
        path = self.path_for(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    self._atomic_write(path, text)
        except OSError as e:
            raise PersistenceError(f"Failed to save '{key}': {e}", key=key) from e

    def discard(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to discard '{key}': {e}", key=key) from e

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.1, max=self._retry_wait_max),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def _atomic_write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file in the same directory so the rename stays on one filesystem
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=path.name + "-",
            suffix=".tmp",
            delete=False,
        ) as tf:
            temp_name = tf.name
            try:
                tf.write(text)
                tf.flush()
                os.fsync(tf.fileno())
            except OSError:
                self._remove_temp(temp_name)
                raise

        try:
            os.replace(temp_name, path)
        except OSError:
            self._remove_temp(temp_name)
            raise

        self._logger.debug("storage_saved", path=str(path), size=len(text))

    def _remove_temp(self, temp_name: str) -> None:
        try:
            os.unlink(temp_name)
        except OSError:
            self._logger.warning("storage_temp_cleanup_failed", path=temp_name)
