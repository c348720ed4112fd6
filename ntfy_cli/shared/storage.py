"""JSON persistence utilities."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def load_json(path: Path, default: Any) -> Any:
    """
    Load JSON payload from disk.

    Args:
        path: Source path.
        default: Default value when file is missing.

    Returns:
        Loaded payload.

    Raises:
        ValueError: File exists but does not contain valid JSON.
    """
    if not path.exists():
        return default
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def save_json_atomic(path: Path, payload: Any, mode: int | None = None) -> None:
    """
    Save JSON payload atomically.

    Args:
        path: Output path.
        payload: Payload object.
        mode: Optional file permission bits applied before the rename.

    Returns:
        None.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp")
    with open(temp_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
        handle.write("\n")
    if mode is not None:
        os.chmod(temp_path, mode)
    temp_path.replace(path)
