"""
Cart Persistence

Key-value storage backends and the adapter that reads and writes cart
snapshots through them.
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote

from ..models.cart import CartSnapshot, CartState

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Durable string key-value store"""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """In-process key-value storage"""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """
    Key-value storage backed by one JSON file per key.

    Keys are percent-encoded into file names, so distinct keys never share a
    file. Writes go to a temporary file unique to the writer that is then
    renamed over the target, so a reader never sees a half-written snapshot.
    Several processes sharing the directory get last-write-wins per key.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.directory,
            prefix=f".{path.stem}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp.write(value)
        try:
            os.replace(tmp.name, path)
        except OSError:
            os.unlink(tmp.name)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def create_storage(backend: str, directory: Optional[str] = None) -> KeyValueStorage:
    """Create a storage backend by name"""
    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        if not directory:
            raise ValueError("File storage requires a directory")
        return FileStorage(directory)
    raise ValueError(f"Unknown cart storage backend: {backend}")


class CartPersistence:
    """
    Reads and writes the durable snapshot of one cart under a single key.

    Only items, discounts, shipping and summary are stored; the error string
    and the loading/initialized flags never reach storage.
    """

    def __init__(self, storage: KeyValueStorage, key: str):
        self.storage = storage
        self.key = key

    def load(self) -> Optional[CartState]:
        """
        Load the stored cart.

        Returns:
            The stored cart, or None if nothing is stored under the key

        Raises:
            OSError: If the storage cannot be read
            ValueError: If the stored snapshot cannot be decoded
        """
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        snapshot = CartSnapshot.model_validate_json(raw)
        return CartState.from_snapshot(snapshot)

    def save(self, state: CartState) -> None:
        """Write the durable part of the cart state"""
        self.storage.set(self.key, state.to_snapshot().model_dump_json())
        logger.debug(f"Saved cart snapshot under {self.key}")

    def delete(self) -> None:
        """Remove the stored cart"""
        self.storage.delete(self.key)
