import uuid
from typing import List, Optional

from fastapi import HTTPException, UploadFile

from .config import MAX_UPLOAD_BYTES, MAX_UPLOAD_MB
from .errors import TooManyFiles


def _http_413(msg: str):
    raise HTTPException(status_code=413, detail=msg)


def _is_blank(file: Optional[UploadFile]) -> bool:
    # An untouched <input type="file"> still posts a part with an empty filename.
    return file is None or not getattr(file, "filename", None)


async def read_upload_limited(file: UploadFile, max_bytes: Optional[int] = None) -> bytes:
    """
    Read an UploadFile into memory, enforcing max size while reading.
    """
    max_bytes = max_bytes or MAX_UPLOAD_BYTES
    chunks = []
    total = 0
    try:
        while True:
            chunk = await file.read(1024 * 1024)  # 1MB chunks
            if not chunk:
                break
            total += len(chunk)
            if total > max_bytes:
                _http_413(f"File too large. Max allowed is {MAX_UPLOAD_MB}MB.")
            chunks.append(chunk)
    finally:
        await file.close()
    return b"".join(chunks)


async def read_upload(file: Optional[UploadFile]) -> Optional[bytes]:
    if _is_blank(file):
        return None
    return await read_upload_limited(file)


async def read_uploads(files: Optional[List[UploadFile]], max_files: int) -> List[bytes]:
    """Read the non-blank uploads in order, rejecting more than ``max_files``."""
    picked = [f for f in (files or []) if not _is_blank(f)]
    if len(picked) > max_files:
        raise TooManyFiles(f"Too many files. Max allowed is {max_files}.")
    return [await read_upload_limited(f) for f in picked]


def output_filename(operation: str) -> str:
    return f"{operation}-{uuid.uuid4().hex[:8]}.pdf"
