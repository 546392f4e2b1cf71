"""Read and write the bpm lockfile."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bpm.core.exceptions.errors import LockfileError
from bpm.models.lockfile import DependencyEntry, Lockfile

LOCKFILE_NAME = "bpm.json"
LOCKFILE_INDENT = 2

# Optional entry fields, left out of the document when empty
_OPTIONAL_FIELDS = ("url", "branch", "commit")


def encode_lockfile(lockfile: Lockfile) -> str:
    """Serialize a lockfile to its JSON document.

    Empty ``url``, ``branch`` and ``commit`` fields are omitted; dependency
    maps are always written and sorted by identifier.

    Args:
        lockfile: Lockfile to serialize.

    Returns:
        JSON text with a trailing newline.
    """
    document = {
        "package": lockfile.package,
        "dependencies": _encode_dependencies(lockfile.dependencies),
    }
    return json.dumps(document, indent=LOCKFILE_INDENT) + "\n"


def _encode_dependencies(dependencies: dict[str, DependencyEntry]) -> dict[str, Any]:
    return {
        identifier: _encode_entry(dependencies[identifier])
        for identifier in sorted(dependencies)
    }


def _encode_entry(entry: DependencyEntry) -> dict[str, Any]:
    document: dict[str, Any] = {}
    for name in _OPTIONAL_FIELDS:
        value = getattr(entry, name)
        if value:
            document[name] = value
    document["dependencies"] = _encode_dependencies(entry.dependencies)
    return document


def decode_lockfile(text: str, source: str | None = None) -> Lockfile:
    """Parse a lockfile document.

    Args:
        text: JSON text.
        source: Path used in error messages.

    Returns:
        A validated Lockfile instance.

    Raises:
        LockfileError: If the text is not valid JSON or does not match the schema.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LockfileError(
            f"Invalid JSON in lockfile: {exc}",
            lockfile_path=source,
        ) from exc

    if not isinstance(data, dict):
        raise LockfileError("Lockfile must contain a JSON object", lockfile_path=source)

    try:
        return Lockfile.model_validate(data)
    except ValidationError as exc:
        raise LockfileError(
            f"Invalid lockfile: {exc}",
            lockfile_path=source,
        ) from exc


def load_lockfile(path: Path) -> Lockfile:
    """Load and validate the lockfile from disk.

    Args:
        path: Path to the lockfile.

    Returns:
        A validated Lockfile instance.

    Raises:
        LockfileError: If the file cannot be read or is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LockfileError(f"Cannot read lockfile '{path}': {exc}", lockfile_path=str(path)) from exc

    return decode_lockfile(text, source=str(path))


def save_lockfile(lockfile: Lockfile, path: Path) -> None:
    """Write the lockfile to disk, replacing any previous content.

    Args:
        lockfile: The lockfile to serialize.
        path: Destination path.

    Raises:
        LockfileError: If the file cannot be written.
    """
    try:
        path.write_text(encode_lockfile(lockfile), encoding="utf-8")
    except OSError as exc:
        raise LockfileError(f"Cannot write lockfile '{path}': {exc}", lockfile_path=str(path)) from exc


def find_lockfile_dir(start: Path, lockfile_name: str = LOCKFILE_NAME) -> Path | None:
    """Find the nearest directory, from start upwards, holding a lockfile.

    Args:
        start: Directory to start from.
        lockfile_name: Lockfile name to look for.

    Returns:
        Directory containing the lockfile, or None.
    """
    current = start.resolve()
    for directory in (current, *current.parents):
        if (directory / lockfile_name).is_file():
            return directory
    return None
