"""
Durable cart handle storage

Stores only the remote cart's identifier, never its contents,
as JSON under a single key: {"cartId": "<handle>"}.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def encode_handle(handle: str) -> str:
    return json.dumps({"cartId": handle})


def decode_handle(raw: str) -> Optional[str]:
    """Parse a stored value; raises ValueError on corrupt data"""
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Stored cart handle is not an object")
    handle = parsed.get("cartId")
    if handle is not None and not isinstance(handle, str):
        raise ValueError("Stored cartId is not a string")
    return handle or None


class HandleStore(ABC):
    """Key-value persistence for the cart handle"""

    @abstractmethod
    def save(self, handle: str) -> None:
        ...

    @abstractmethod
    def load(self) -> Optional[str]:
        """Return the stored handle, None when absent or unreadable"""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemoryHandleStore(HandleStore):
    """In-process store, shaped like browser localStorage"""

    def __init__(self, key: str = "storefront_cart", storage: Optional[dict[str, str]] = None):
        self.key = key
        self.storage = storage if storage is not None else {}

    def save(self, handle: str) -> None:
        self.storage[self.key] = encode_handle(handle)

    def load(self) -> Optional[str]:
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        try:
            return decode_handle(raw)
        except ValueError:
            logger.warning(f"Discarding corrupt cart handle under {self.key}")
            self.storage.pop(self.key, None)
            return None

    def clear(self) -> None:
        self.storage.pop(self.key, None)


class FileHandleStore(HandleStore):
    """Store backed by one JSON file; survives process restarts"""

    def __init__(self, directory: str, key: str = "storefront_cart"):
        self.path = Path(directory) / f"{key}.json"

    def save(self, handle: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(encode_handle(handle), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def load(self) -> Optional[str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read cart handle from {self.path}: {e}")
            return None

        try:
            return decode_handle(raw)
        except ValueError:
            logger.warning(f"Discarding corrupt cart handle file {self.path}")
            self.clear()
            return None

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
