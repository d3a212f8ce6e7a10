"""JSON file helpers for the persisted index and job cache."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from alumni_search.core.errors import PersistenceError


def dump_json_atomic(path: str | Path, data: Any) -> None:
    """Write data as JSON, replacing the target only once the write succeeded.

    The parent directory is created if absent.

    Raises:
        PersistenceError: If the file cannot be written
    """
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(f"failed to write {target}: {e}") from e


def load_json_list(path: str | Path) -> list[Any]:
    """Read a JSON array from disk.

    A missing file reads as an empty list.

    Raises:
        PersistenceError: If the file is unreadable, not JSON, or not an array
    """
    source = Path(path)
    if not source.exists():
        return []
    try:
        raw = source.read_text(encoding="utf-8")
        data = json.loads(raw or "[]")
    except (OSError, json.JSONDecodeError) as e:
        raise PersistenceError(f"failed to read {source}: {e}") from e
    if not isinstance(data, list):
        raise PersistenceError(
            f"expected a JSON array in {source}, got {type(data).__name__}"
        )
    return data


def remove_file(path: str | Path) -> bool:
    """Delete a file if present. Returns True if something was removed."""
    target = Path(path)
    try:
        target.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        raise PersistenceError(f"failed to remove {target}: {e}") from e
