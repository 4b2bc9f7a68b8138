from __future__ import annotations

import re
import uuid
from pathlib import Path


def _sanitize_filename(filename: str) -> str:
    """Return filename with spaces replaced by underscores and special chars removed.

    Args:
        filename: Original filename string.

    Returns:
        Sanitized filename safe for filesystem storage.
    """
    name = filename.replace(" ", "_")
    name = re.sub(r"[^\w.\-]", "", name)
    return name


def save_upload(
    raw_bytes: bytes,
    filename: str,
    uploads_dir: Path,
    procedimiento_id: int,
) -> Path:
    """Save raw bytes under the procedure's own subdirectory.

    The destination path follows the pattern::

        uploads_dir/{procedimiento_id}/{uuid4}_{sanitized_filename}

    Args:
        raw_bytes: File contents to persist.
        filename: Original filename supplied by the uploader.
        uploads_dir: Root directory for all stored photos.
        procedimiento_id: Owning procedure (used as subfolder).

    Returns:
        Absolute Path to the saved file.
    """
    dest_dir = uploads_dir / str(procedimiento_id)
    dest_dir.mkdir(parents=True, exist_ok=True)

    safe_name = _sanitize_filename(filename) or "foto"
    dest_path = dest_dir / f"{uuid.uuid4().hex}_{safe_name}"
    dest_path.write_bytes(raw_bytes)
    return dest_path


def get_upload_relative_path(full_path: Path, uploads_dir: Path) -> str:
    """Return the path of full_path relative to uploads_dir as a forward-slash string.

    e.g. ``"42/3f2a..._rodilla.jpg"``.
    """
    return full_path.relative_to(uploads_dir).as_posix()


def resolve_upload(relative_path: str, uploads_dir: Path) -> Path:
    """Map a stored relative path back to an absolute path inside uploads_dir.

    Raises:
        ValueError: If the path escapes ``uploads_dir``.
    """
    root = uploads_dir.resolve()
    full_path = (root / relative_path).resolve()
    if root != full_path and root not in full_path.parents:
        raise ValueError(f"Ruta fuera del directorio de fotos: {relative_path}")
    return full_path


def delete_upload(relative_path: str, uploads_dir: Path) -> bool:
    """Remove a stored file; a file that is already gone is not an error.

    Returns:
        ``True`` if a file was removed.
    """
    full_path = resolve_upload(relative_path, uploads_dir)
    try:
        full_path.unlink()
    except FileNotFoundError:
        return False
    return True
