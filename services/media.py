import logging
import secrets
import time
from pathlib import Path
from typing import Iterable, List, Optional

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from core.config import settings
from core.exceptions import ValidationError
from core.messages import get_message

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".mkv", ".webm"}
LOGO_SIZE = (400, 400)
CHUNK_SIZE = 1024 * 1024

IMAGE = "image"
VIDEO = "video"


def get_upload_dir() -> Path:
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def _extension(file: UploadFile) -> str:
    return Path(file.filename or "").suffix.lower()


def media_kind(file: UploadFile) -> str:
    """Classify an upload as image or video; both extension and MIME type must agree."""
    ext = _extension(file)
    content_type = (file.content_type or "").lower()
    if ext in IMAGE_EXTENSIONS and content_type.startswith("image/"):
        return IMAGE
    if ext in VIDEO_EXTENSIONS and content_type.startswith("video/"):
        return VIDEO
    raise ValidationError(get_message("media.unsupported_type"), field=file.filename)


def unique_filename(extension: str) -> str:
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}{extension}"


def _write_limited(file: UploadFile, destination: Path) -> None:
    limit = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    written = 0
    with open(destination, "wb") as buffer:
        while True:
            chunk = file.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > limit:
                break
            buffer.write(chunk)
    if written > limit:
        destination.unlink(missing_ok=True)
        raise ValidationError(get_message("media.too_large", limit=settings.MAX_UPLOAD_SIZE_MB))


def save_upload(file: UploadFile, expected_kind: str) -> str:
    """Store an image or video upload and return its filename."""
    kind = media_kind(file)
    if kind != expected_kind:
        raise ValidationError(get_message("media.unsupported_type"), field=file.filename)

    filename = unique_filename(_extension(file))
    _write_limited(file, get_upload_dir() / filename)
    logger.info(f"Stored {kind} upload {file.filename!r} as {filename}")
    return filename


def save_uploads(files: Optional[List[UploadFile]], expected_kind: str) -> List[str]:
    """Store several uploads; on failure the ones already written are removed."""
    saved: List[str] = []
    try:
        for file in files or []:
            saved.append(save_upload(file, expected_kind))
    except Exception:
        remove_files(saved)
        raise
    return saved


def save_logo(file: UploadFile) -> str:
    """Normalise a vendor logo to a square RGB JPEG and return its filename."""
    if media_kind(file) != IMAGE:
        raise ValidationError(get_message("media.invalid_image"), field="logo")

    filename = unique_filename(".jpg")
    upload_dir = get_upload_dir()
    temp_path = upload_dir / f"temp_{filename}"
    try:
        _write_limited(file, temp_path)
        with Image.open(temp_path) as img:
            if img.mode != "RGB":
                img = img.convert("RGB")
            size = min(img.size)
            left = (img.width - size) // 2
            top = (img.height - size) // 2
            img = img.crop((left, top, left + size, top + size))
            img = img.resize(LOGO_SIZE, Image.Resampling.LANCZOS)
            img.save(upload_dir / filename, format="JPEG", quality=85, optimize=True)
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Rejected logo upload {file.filename!r}: {str(e)}")
        raise ValidationError(get_message("media.invalid_image"), field="logo")
    finally:
        temp_path.unlink(missing_ok=True)

    logger.info(f"Stored logo {file.filename!r} as {filename}")
    return filename


def remove_files(filenames: Iterable[Optional[str]]) -> None:
    """Delete stored uploads. Failures are logged and never raised."""
    upload_dir = Path(settings.UPLOAD_DIR)
    for name in filenames:
        if not name:
            continue
        path = upload_dir / Path(name).name
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete upload {path}: {str(e)}")

