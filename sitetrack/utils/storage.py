"""
Local file storage for uploads (avatars, logos, documents, photos, note
attachments). Files live under settings.storage_dir and are served back
by the app under settings.public_media_url.
"""
import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from sitetrack.core.config import settings

logger = logging.getLogger(__name__)


def _root() -> Path:
    return Path(settings.storage_dir)


def upload(file: UploadFile, folder: str) -> str:
    """
    Store an uploaded file under a random name and return its public URL.

    The original extension is kept; the name is not.
    """
    suffix = Path(file.filename or "").suffix.lower()
    safe_folder = "/".join(part for part in Path(folder).parts if part not in ("..", "/", ""))
    target_dir = _root() / safe_folder
    target_dir.mkdir(parents=True, exist_ok=True)

    name = f"{uuid.uuid4().hex}{suffix}"
    with open(target_dir / name, "wb") as out:
        shutil.copyfileobj(file.file, out)

    logger.info("Stored upload %s in %s", file.filename, safe_folder)
    return f"{settings.public_media_url.rstrip('/')}/{safe_folder}/{name}"


def path_for(url: str) -> Optional[Path]:
    prefix = settings.public_media_url.rstrip("/") + "/"
    if not url or not url.startswith(prefix):
        return None
    relative = url[len(prefix):]
    if ".." in Path(relative).parts:
        return None
    return _root() / relative


def delete(url: Optional[str]) -> bool:
    """Remove a stored file by its public URL. Unknown or foreign URLs are ignored."""
    path = path_for(url or "")
    if path is None or not path.exists():
        return False
    try:
        path.unlink()
    except OSError as e:
        logger.warning("Could not delete stored file %s: %s", path, e)
        return False
    return True
