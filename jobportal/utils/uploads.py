"""Disk storage for resume and avatar uploads."""

import random
import time
from pathlib import Path

from jobportal.config import settings

URL_PREFIX = "/uploads"

# Upload kind -> (sub directory, allowed extensions, filter error message)
UPLOAD_KINDS = {
    "resume": ("resumes", {".pdf", ".doc", ".docx"}, "Only PDF, DOC, DOCX files are allowed for resume"),
    "avatar": ("avatars", {".jpg", ".jpeg", ".png", ".gif"}, "Only JPG, PNG, GIF files are allowed for avatar"),
}


class UploadRejected(ValueError):
    """Raised when an upload fails the extension or size filter."""


def upload_root() -> Path:
    return Path(settings.upload_dir)


def ensure_upload_dirs() -> None:
    for sub_dir, _, _ in UPLOAD_KINDS.values():
        (upload_root() / sub_dir).mkdir(parents=True, exist_ok=True)


def check_upload(kind: str, filename: str, size: int) -> str:
    """Validate an upload and return its lowercased extension."""
    _, allowed, message = UPLOAD_KINDS[kind]
    ext = Path(filename).suffix.lower()
    if ext not in allowed:
        raise UploadRejected(message)
    if size > settings.max_upload_size:
        limit_mb = settings.max_upload_size // (1024 * 1024)
        raise UploadRejected(f"File too large. Maximum size is {limit_mb}MB")
    return ext


def save_upload(kind: str, user_id: str, filename: str, content: bytes) -> str:
    """Write an upload to disk and return its public URL path.

    Stored names are <user_id>-<epoch millis>-<random><ext>, so repeated
    uploads by the same user never collide.
    """
    ext = check_upload(kind, filename, len(content))
    sub_dir = UPLOAD_KINDS[kind][0]
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    stored_name = f"{user_id}-{unique_suffix}{ext}"

    target_dir = upload_root() / sub_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / stored_name).write_bytes(content)
    return f"{URL_PREFIX}/{sub_dir}/{stored_name}"


def path_for_url(url: str) -> Path | None:
    """Map a stored /uploads/... URL back to its file on disk."""
    if not url or not url.startswith(URL_PREFIX + "/"):
        return None
    relative = url[len(URL_PREFIX) + 1 :]
    root = upload_root().resolve()
    path = (root / relative).resolve()
    if root not in path.parents:
        return None
    return path


def delete_upload(url: str | None) -> bool:
    """Remove an uploaded file if it still exists. Returns True if a file was removed."""
    if not url:
        return False
    path = path_for_url(url)
    if path is None or not path.is_file():
        return False
    path.unlink()
    return True
