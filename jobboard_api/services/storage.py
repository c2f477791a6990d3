"""Local disk storage for job media uploads.

Files land in ``<UPLOAD_DIR>/jobs/`` and are served back through the static
``/uploads`` mount, so a stored file's public URL is
``<base_url>uploads/jobs/<name>``.
"""

import os
import time
import uuid
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from fastapi import UploadFile

from ..config import settings
from ..errors import InvalidInput
from ..logging_config import get_logger

logger = get_logger(__name__)

MEDIA_SUBDIR = "jobs"
URL_PREFIX = "/uploads/"
CHUNK_SIZE = 64 * 1024

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".pdf", ".doc", ".docx"}
ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def media_dir() -> Path:
    return Path(settings.UPLOAD_DIR) / MEDIA_SUBDIR


def _stored_name(original: str) -> str:
    # drop any client supplied directories before building the name
    name = Path(original or "upload").name.replace(" ", "_")
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{name}"


def validate_upload(upload: UploadFile) -> None:
    ext = Path(upload.filename or "").suffix.lower()
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if ext not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidInput("Only image and document files are allowed!")


def _write_capped(upload: UploadFile, dest: Path) -> None:
    written = 0
    with open(dest, "xb") as fh:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > settings.MAX_UPLOAD_BYTES:
                raise InvalidInput(f"File too large: {upload.filename}")
            fh.write(chunk)


def save_uploads(uploads: Optional[Iterable[UploadFile]], base_url: str) -> List[str]:
    """Validate and store uploaded files, returning their public URLs.

    Either every file is stored or none is: a rejected file removes the ones
    already written by this call.
    """
    files = [u for u in (uploads or []) if u is not None and u.filename]
    if not files:
        return []
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise InvalidInput(f"At most {settings.MAX_UPLOAD_FILES} files may be uploaded")
    for upload in files:
        validate_upload(upload)

    target = media_dir()
    target.mkdir(parents=True, exist_ok=True)
    stored: List[Path] = []
    try:
        for upload in files:
            dest = target / _stored_name(upload.filename)
            stored.append(dest)
            _write_capped(upload, dest)
    except (InvalidInput, OSError):
        for path in stored:
            path.unlink(missing_ok=True)
        raise

    root = base_url if base_url.endswith("/") else base_url + "/"
    return [f"{root}uploads/{MEDIA_SUBDIR}/{p.name}" for p in stored]


def path_for_url(url: str) -> Optional[Path]:
    """Map a media URL back to its file, or None if it is not one of ours."""
    path = urlsplit(url).path
    if not path.startswith(URL_PREFIX):
        return None
    upload_root = Path(settings.UPLOAD_DIR).resolve()
    candidate = (upload_root / path[len(URL_PREFIX):]).resolve()
    if upload_root not in candidate.parents:
        return None
    return candidate


def delete_media(urls: Iterable[str]) -> int:
    """Best-effort removal of stored media. Failures are logged, never raised."""
    removed = 0
    for url in urls or []:
        path = path_for_url(url)
        if path is None:
            logger.warning("skipping media outside upload dir: %s", url)
            continue
        try:
            if path.exists():
                os.remove(path)
                removed += 1
        except OSError as e:
            logger.warning("Error deleting file %s: %s", path, e)
    return removed
