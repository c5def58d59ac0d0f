"""Team logo storage on the local filesystem."""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"

# Ids become file names, so only allow characters that are safe there
_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_SAFE_EXT_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


class LogoTooLarge(Exception):
    """Uploaded file exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Logo is {size} bytes; the limit is {limit} bytes")
        self.size = size
        self.limit = limit


def logo_filename(team_id: str, original_filename: str | None) -> str:
    """
    Build the stored file name: the team id plus the uploaded file's extension.

    Raises:
        ValueError: If the team id can't be used as a file name
    """
    if not _SAFE_ID_RE.match(team_id):
        raise ValueError(f"Team id '{team_id}' cannot be used as a file name")
    ext = Path(original_filename or "").suffix.lower()
    if not _SAFE_EXT_RE.match(ext):
        ext = ""
    return f"{team_id}{ext}"


def save_team_logo(
    upload_dir: str | Path,
    team_id: str,
    original_filename: str | None,
    content: bytes,
    max_bytes: int,
) -> str:
    """
    Write a logo into ``upload_dir`` and return its public URL.

    An existing logo for the same team and extension is overwritten.

    Raises:
        LogoTooLarge: If content is bigger than max_bytes
        ValueError: If the team id can't be used as a file name
    """
    if len(content) > max_bytes:
        raise LogoTooLarge(len(content), max_bytes)

    filename = logo_filename(team_id, original_filename)
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    (directory / filename).write_bytes(content)

    logger.info("Saved logo for team %s (%d bytes) as %s", team_id, len(content), filename)
    return f"{UPLOADS_URL_PREFIX}{filename}"
