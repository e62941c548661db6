from __future__ import annotations

import base64
import binascii
import hashlib
import io
import os
from dataclasses import dataclass
from typing import Optional

from flask import current_app
from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from ..constants import UPLOAD_ROOT
from ..shared.storage import upload_dir, write_atomic

ALLOWED_FORMATS = {"PNG": "png", "JPEG": "jpg", "WEBP": "webp", "GIF": "gif"}
MAX_BYTES = 8 * 1024 * 1024
MAX_DIMENSION = 6000
FILE_ID_LENGTH = 24
UPLOAD_URL_PREFIX = "/certificates/templates/uploads"


@dataclass
class UploadResult:
    status: str
    file_url: str = ""
    file_id: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict:
        data = {"status": self.status, "fileUrl": self.file_url}
        if self.file_id:
            data["fileId"] = self.file_id
        if self.message:
            data["message"] = self.message
        return data


class UploadError(ValueError):
    pass


def _decode_payload(payload: str) -> bytes:
    if not payload:
        raise UploadError("Empty upload.")
    raw = payload.strip()
    if raw.startswith("data:"):
        _, _, raw = raw.partition(",")
    try:
        return base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        raise UploadError("Upload is not valid base64 data.")


def _validate_image_bytes(raw: bytes) -> str:
    if len(raw) > MAX_BYTES:
        raise UploadError("Image is larger than 8 MB.")
    try:
        image = Image.open(io.BytesIO(raw))
        image.verify()
        image = Image.open(io.BytesIO(raw))
    except Image.DecompressionBombError:
        raise UploadError("Image dimensions are too large.")
    except (UnidentifiedImageError, OSError):
        raise UploadError("Upload must be a valid image.")
    extension = ALLOWED_FORMATS.get(image.format or "")
    if not extension:
        raise UploadError("Only PNG, JPEG, WEBP and GIF images are allowed.")
    width, height = image.size
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise UploadError("Image dimensions are too large.")
    return extension


def ingest_image(payload: str, filename: str) -> UploadResult:
    """Store an already cropped image and return a reference to it.

    Never raises for bad input; failures come back as ``status="error"``
    so the editor keeps its in-memory template and can retry.
    """

    try:
        safe_name = secure_filename(filename or "")
        if not safe_name:
            raise UploadError("Invalid file name.")
        data = _decode_payload(payload)
        extension = _validate_image_bytes(data)
    except UploadError as exc:
        current_app.logger.warning(
            "[CERT-UPLOAD] rejected file=%s reason=%s", filename, exc
        )
        return UploadResult(status="error", message=str(exc))

    file_id = hashlib.sha256(data).hexdigest()[:FILE_ID_LENGTH]
    stored_name = f"{file_id}.{extension}"
    site_root = current_app.config.get("SITE_ROOT", "/srv")
    target = os.path.join(upload_dir(site_root, UPLOAD_ROOT), stored_name)
    try:
        if not os.path.exists(target):
            write_atomic(target, data)
    except OSError as exc:
        current_app.logger.exception("[CERT-UPLOAD] write failed file=%s", safe_name)
        return UploadResult(status="error", message=f"Could not store image: {exc}")

    current_app.logger.info(
        "[CERT-UPLOAD] stored file=%s id=%s bytes=%d", safe_name, file_id, len(data)
    )
    return UploadResult(
        status="success",
        file_url=f"{UPLOAD_URL_PREFIX}/{stored_name}",
        file_id=file_id,
    )
