import logging

from fastapi import APIRouter, Depends, File, UploadFile

from ..backend import BackendClient, get_backend
from ..schemas import ActionResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["Upload"])

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
FILE_TOO_LARGE = "File too large (max 10MB)"
UPLOAD_CHUNK_BYTES = 1024 * 1024

# Allowed types for avatars, portfolio photos and business documents
ALLOWED_UPLOAD_TYPES = [
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
    "image/heic",
    "image/heif",
    "image/avif",
    "application/pdf",
]


def is_allowed_type(content_type: str) -> bool:
    return (content_type or "").lower() in ALLOWED_UPLOAD_TYPES


async def read_limited(file: UploadFile) -> bytes | None:
    """Read the upload in chunks, giving up once it passes MAX_UPLOAD_BYTES"""
    if file.size is not None and file.size > MAX_UPLOAD_BYTES:
        return None

    chunks = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_UPLOAD_BYTES:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("", response_model=ActionResult)
async def upload_file(file: UploadFile = File(...), backend: BackendClient = Depends(get_backend)):
    """Forward one file to the backend file store.

    Returns the stored file ``{_id, url, originalName, mimeType, size, provider}``.
    """
    content_type = file.content_type or ""
    if not is_allowed_type(content_type):
        logger.warning(f"⚠️ Rejected upload {file.filename}: {content_type}")
        return ActionResult.fail("Invalid file type. Allowed: images and PDF")

    content = await read_limited(file)
    if content is None:
        logger.warning(f"⚠️ Rejected upload {file.filename}: over {MAX_UPLOAD_BYTES} bytes")
        return ActionResult.fail(FILE_TOO_LARGE)

    logger.info(f"📤 Uploading {file.filename} ({len(content)} bytes)")
    result = await backend.post(
        "/uploads",
        files={"file": (file.filename or "upload", content, content_type)},
        error_messages={413: FILE_TOO_LARGE},
        default_error="Failed to upload file",
    )
    if result.success:
        logger.info(f"✅ Uploaded {file.filename}")
    return result
