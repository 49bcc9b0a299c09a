"""JSON artifact I/O shared by the tag and link indexes.

Every artifact is a JSON object mapping strings to arrays of strings.
Writes go to ``<name>.tmp`` beside the destination and are renamed over
it, so readers see either the previous artifact or the new one.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from kbase.errors import IndexCorruptError, IndexWriteError

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def dump_mapping(mapping: Mapping[str, list[str]]) -> str:
    """Serialize deterministically: sorted keys, two-space indent, final newline."""
    return json.dumps(mapping, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def write_json_atomic(path: Path, mapping: Mapping[str, list[str]]) -> None:
    """Write *mapping* to *path* via write-then-rename.

    Raises:
        IndexWriteError: If the directory, temporary file, or rename fails.
    """
    tmp_path = path.with_name(path.name + TMP_SUFFIX)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(dump_mapping(mapping), encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise IndexWriteError(path, str(exc)) from exc
    logger.debug("Wrote %s (%d keys)", path, len(mapping))


def read_json_mapping(path: Path) -> dict[str, list[str]] | None:
    """Load an artifact, or None when it has not been written yet.

    Raises:
        IndexCorruptError: If the file exists but is not a string-to-string-list
            JSON object, or cannot be read.
    """
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise IndexCorruptError(path, f"unreadable: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise IndexCorruptError(path, f"invalid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise IndexCorruptError(path, "expected a JSON object")
    for key, value in raw.items():
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise IndexCorruptError(path, f"entry {key!r} is not a list of strings")
    return raw
