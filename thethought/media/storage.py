import logging
import os
import shutil
import uuid
from typing import Tuple

from fastapi import UploadFile

from thethought.core.config import settings
from thethought.core.errors import ValidationError

log = logging.getLogger("uvicorn")

REELS_SUBDIR = "reels"
AVATARS_SUBDIR = "avatars"

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
# extensión por mimetype cuando el nombre original no trae una
VIDEO_EXT_BY_MIME = {
    "video/mp4": ".mp4",
    "video/avi": ".avi",
    "video/mov": ".mov",
    "video/wmv": ".wmv",
    "video/webm": ".webm",
}

CHUNK_SIZE = 1024 * 1024


def media_root() -> str:
    # se lee en cada llamada para respetar cambios de settings (tests)
    return settings.MEDIA_DIR


def abs_path(rel: str) -> str:
    return os.path.join(media_root(), rel.lstrip("/"))


def _new_rel(subdir: str, ext: str) -> Tuple[str, str]:
    """
    Devuelve (relativa, absoluta) para un archivo nuevo con extensión ext.
    """
    name = f"{uuid.uuid4().hex}{ext}"
    rel = f"{subdir}/{name}"
    dst = abs_path(rel)
    os.makedirs(os.path.dirname(dst), exist_ok=True)
    return rel, dst


def _copy_limited(upload: UploadFile, dst: str, max_bytes: int) -> int:
    """
    Copia por bloques cortando en `max_bytes`. Si se pasa, borra el
    parcial y lanza ValidationError.
    """
    written = 0
    with open(dst, "wb") as out:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                break
            out.write(chunk)

    if written > max_bytes:
        delete_media(os.path.relpath(dst, media_root()))
        raise ValidationError("Video file too large")
    return written


def save_reel_video(file: UploadFile) -> str:
    """
    Guarda el video de un reel en /media/reels tal cual llega.
    Valida mimetype contra la lista permitida y tamaño (REEL_MAX_BYTES).
    Devuelve la ruta relativa (p. ej. 'reels/xxxx.mp4').
    """
    mimetype = (file.content_type or "").lower()
    if mimetype not in settings.reel_mimetypes:
        raise ValidationError("Invalid file type. Only video files are allowed.")

    ext = os.path.splitext(file.filename or "")[1].lower()
    if not ext:
        ext = VIDEO_EXT_BY_MIME.get(mimetype, ".mp4")

    rel, dst = _new_rel(REELS_SUBDIR, ext)
    _copy_limited(file, dst, settings.REEL_MAX_BYTES)
    return rel


def save_avatar(file: UploadFile) -> str:
    """
    Copia tal cual una imagen de perfil en /media/avatars.
    """
    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext not in IMAGE_EXTS:
        raise ValidationError("Invalid file type. Only images are allowed.")
    rel, dst = _new_rel(AVATARS_SUBDIR, ext)
    with open(dst, "wb") as out:
        shutil.copyfileobj(file.file, out)
    return rel


def delete_media(rel: str | None) -> bool:
    """
    Borra un archivo de /media. Best-effort: nunca lanza, solo loguea.
    Devuelve True si el archivo existía y se borró.
    """
    if not rel:
        return False
    path = abs_path(rel)
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        log.warning(f"⚠️ media ya no existe: {rel}")
    except OSError as e:
        log.warning(f"⚠️ no se pudo borrar {rel}: {e!r}")
    return False


def media_url(rel: str | None) -> str | None:
    if not rel:
        return None
    return f"/media/{rel}"
