"""Filesystem object storage for product images.

Objects live under ``STORAGE_ROOT/<bucket>/<seller_id>/<name>`` and are
served by the app at ``STORAGE_PUBLIC_BASE/<bucket>/...``.
"""
import logging
import os
import secrets
import time

from flask import current_app
from werkzeug.utils import secure_filename

from app.exceptions import AppError

logger = logging.getLogger(__name__)

PRODUCT_IMAGES = "product-images"
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}
IMAGE_MIMETYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


class StorageError(AppError):
    pass


def _root():
    return current_app.config["STORAGE_ROOT"]


def bucket_dir(bucket: str = PRODUCT_IMAGES) -> str:
    return os.path.join(_root(), bucket)


def public_url(path: str, bucket: str = PRODUCT_IMAGES) -> str:
    base = current_app.config.get("STORAGE_PUBLIC_BASE", "/storage").rstrip("/")
    return f"{base}/{bucket}/{path}"


def object_path(url: str, bucket: str = PRODUCT_IMAGES):
    """Return the object path of ``url`` inside ``bucket`` or None."""
    if not url:
        return None
    marker = f"/{bucket}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    path = url[idx + len(marker):].split("?", 1)[0]
    parts = [p for p in path.split("/") if p]
    if not parts or any(p in (".", "..") for p in parts):
        return None
    return "/".join(parts)


def _extension(filename: str) -> str:
    name = secure_filename(filename or "")
    return name.rsplit(".", 1)[1].lower() if "." in name else ""


def _object_name(filename: str) -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{_extension(filename)}"


def validate_image(file_storage):
    mimetype = file_storage.mimetype or ""
    if not mimetype.startswith("image/"):
        raise StorageError(f"{file_storage.filename} is not an image")
    if mimetype not in IMAGE_MIMETYPES or _extension(file_storage.filename) not in IMAGE_EXTENSIONS:
        raise StorageError(f"{file_storage.filename} must be a JPEG, PNG, WebP or GIF image")
    file_storage.stream.seek(0, os.SEEK_END)
    size = file_storage.stream.tell()
    file_storage.stream.seek(0)
    limit = current_app.config["MAX_IMAGE_BYTES"]
    if size > limit:
        raise StorageError(f"{file_storage.filename} is larger than {limit // (1024 * 1024)}MB")
    return size


def put_image(seller_id: int, file_storage, bucket: str = PRODUCT_IMAGES) -> str:
    """Store an uploaded image and return its public URL."""
    validate_image(file_storage)
    path = f"{seller_id}/{_object_name(file_storage.filename)}"
    target = os.path.join(bucket_dir(bucket), *path.split("/"))
    os.makedirs(os.path.dirname(target), exist_ok=True)
    file_storage.save(target)
    logger.info("Stored image %s for seller %s", path, seller_id)
    return public_url(path, bucket)


def remove(url: str, seller_id: int, bucket: str = PRODUCT_IMAGES) -> bool:
    """Delete the object behind ``url`` if it is one of the seller's images."""
    path = object_path(url, bucket)
    if path is None:
        return False
    if path.split("/", 1)[0] != str(seller_id):
        raise StorageError("Image does not belong to you", status=403)
    target = os.path.join(bucket_dir(bucket), *path.split("/"))
    try:
        os.remove(target)
    except FileNotFoundError:
        return False
    return True
