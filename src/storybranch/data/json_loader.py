"""Low-level JSON helpers for the story store."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError


def load_json(path: Path, *, label: str = "story file") -> object:
    """Parse a JSON document, raising DataLoadError for any read or decode failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"{label.capitalize()} not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Unable to read {label}: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {label} {path.name}: {exc.msg} (line {exc.lineno})") from exc


def write_json(path: Path, payload: object) -> None:
    """Write pretty, key-sorted JSON next to ``path`` and swap it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_suffix(path.suffix + ".tmp")
    try:
        staging.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        staging.replace(path)
    except (OSError, TypeError, ValueError):
        staging.unlink(missing_ok=True)
        raise
