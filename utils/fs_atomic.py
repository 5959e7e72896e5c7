from __future__ import annotations

import json
import os
import uuid
from pathlib import Path
from typing import Any, Union

Pathish = Union[str, Path]

__all__ = ["fsync_dir", "atomic_write_text", "atomic_write_json", "read_json"]


def fsync_dir(dir_path: Pathish) -> None:
    """
    Fsync a directory to persist metadata updates (e.g., renames).
    Safe no-op if the directory doesn't exist or can't be opened (Windows).
    """
    d = Path(dir_path)
    if not d.exists():
        return
    try:
        fd = os.open(str(d), os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError:
        pass
    finally:
        os.close(fd)


def _write_tmp_and_replace(dst_path: Path, data: bytes) -> None:
    """
    Internal helper:
      - create a temp file in dst directory
      - write data, fsync temp
      - os.replace -> dst
      - fsync directory
    """
    dst_dir = dst_path.parent
    dst_dir.mkdir(parents=True, exist_ok=True)
    tmp_name = f".{dst_path.name}.tmp-{os.getpid()}-{uuid.uuid4().hex[:8]}"
    tmp_path = dst_dir / tmp_name

    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, dst_path)
        fsync_dir(dst_dir)
    except Exception:
        # Best-effort cleanup
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass
        raise


def atomic_write_text(dst: Pathish, text: str) -> None:
    """Atomically write UTF-8 text to dst (same-dir temp + replace + fsync)."""
    _write_tmp_and_replace(Path(dst).expanduser(), text.encode("utf-8"))


def atomic_write_json(dst: Pathish, obj: Any) -> None:
    """Atomically write obj as pretty-printed JSON."""
    atomic_write_text(dst, json.dumps(obj, indent=2, ensure_ascii=False))


def read_json(p: Pathish, default: Any) -> Any:
    """
    Read JSON from p. Missing file returns default; malformed JSON raises ValueError.
    """
    path = Path(p).expanduser()
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON in {path}: {e}") from e
