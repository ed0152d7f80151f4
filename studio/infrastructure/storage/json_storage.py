"""JSON file storage with Result-based error handling.

Provides a thin wrapper around file I/O for JSON data, returning Result
types instead of raising exceptions, and a key-value store built on it.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from studio.domain.shared import StorageFailure
from studio.domain.shared.result import Err, Ok, Result

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonStorage:
    """Low-level JSON file I/O with Result-based error handling.

    Example:
        storage = JsonStorage()
        result = storage.load_json(Path("workspaces.json"))
        if isinstance(result, Ok):
            data = result.value
        else:
            print(f"Error: {result.error}")
    """

    def load_json(self, path: Path) -> Result[Any, str]:
        """Load JSON data from a file.

        Args:
            path: Path to the JSON file to read.

        Returns:
            Ok(value) if successful, Err(str) with error message if failed.
        """
        try:
            if not path.exists():
                return Err(f"File not found: {path}")

            content = path.read_text(encoding="utf-8")
            return Ok(json.loads(content))

        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")
        except PermissionError:
            return Err(f"Permission denied reading {path}")
        except OSError as e:
            return Err(f"Error reading {path}: {e}")

    def save_json(self, path: Path, data: Any, indent: int = 2) -> Result[None, str]:
        """Save JSON data to a file.

        The file is written next to its destination first and then moved
        into place, so a failed write leaves the previous content intact.

        Returns:
            Ok(None) if successful, Err(str) with error message if failed.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            content = json.dumps(data, indent=indent)
            staging = path.with_suffix(path.suffix + ".tmp")
            staging.write_text(content, encoding="utf-8")
            staging.replace(path)
            return Ok(None)

        except TypeError as e:
            return Err(f"Data not JSON serializable: {e}")
        except PermissionError:
            return Err(f"Permission denied writing {path}")
        except OSError as e:
            return Err(f"Error writing {path}: {e}")


class JsonFileStore:
    """Key-value store keeping one JSON file per key in a directory.

    A missing key loads as None. An unreadable file is logged and also
    loads as None, so callers fall back to defaults.
    """

    def __init__(self, directory: Path, storage: JsonStorage | None = None) -> None:
        self._directory = directory
        self._storage = storage or JsonStorage()

    def path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def load(self, key: str) -> Any | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        result = self._storage.load_json(path)
        if isinstance(result, Err):
            logger.warning(f"Could not load '{key}': {result.error}")
            return None
        return result.value

    def save(self, key: str, value: Any) -> Result[None, StorageFailure]:
        result = self._storage.save_json(self.path_for(key), value)
        if isinstance(result, Err):
            return Err(StorageFailure(result.error))
        return Ok(None)


class MemoryStore:
    """In-memory key-value store. Values are copied through JSON on save."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, value: Any) -> Result[None, StorageFailure]:
        try:
            self._data[key] = json.dumps(value)
        except TypeError as e:
            return Err(StorageFailure(f"Data not JSON serializable: {e}"))
        return Ok(None)
