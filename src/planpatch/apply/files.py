"""File reading and writing helpers.

Reads decode UTF-8 first, then a confidently detected encoding. Lossy
decoding is opt-in for callers that never write the text back.
"""

from __future__ import annotations

import os
from pathlib import Path

import chardet

from planpatch.core.errors import ApplyError
from planpatch.core.logging import get_logger

logger = get_logger("apply.files")

# Map some common chardet names to Python codec names
_ENCODING_MAP = {
    "ascii": "utf-8",  # ASCII is subset of UTF-8
    "iso-8859-1": "latin-1",
    "windows-1252": "cp1252",
}

# Below this confidence a detected non-UTF-8 encoding is not trusted
MIN_CONFIDENCE = 0.5


def detect_encoding(raw_data: bytes) -> tuple[str, float]:
    """Detect the encoding of raw file bytes.

    Args:
        raw_data: File content.

    Returns:
        Tuple of (encoding, confidence). Falls back to UTF-8.
    """
    if not raw_data:
        return "utf-8", 1.0

    # chardet sometimes misses BOMs
    if raw_data.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig", 1.0
    if raw_data.startswith(b"\xff\xfe"):
        return "utf-16-le", 1.0
    if raw_data.startswith(b"\xfe\xff"):
        return "utf-16-be", 1.0

    try:
        raw_data.decode("utf-8")
        return "utf-8", 1.0
    except UnicodeDecodeError:
        pass

    result = chardet.detect(raw_data)
    encoding = result.get("encoding")
    confidence = result.get("confidence") or 0.0

    if encoding:
        encoding = encoding.lower()
        return _ENCODING_MAP.get(encoding, encoding), confidence

    return "utf-8", 0.0


def decode_text(
    raw_data: bytes, detect: bool = True, lossy: bool = False
) -> tuple[str, str]:
    """Decode bytes to text.

    Args:
        raw_data: File content.
        detect: Try a detected encoding when the bytes are not UTF-8.
        lossy: Replace undecodable bytes instead of failing.

    Returns:
        Tuple of (text, encoding used for a faithful write-back).

    Raises:
        UnicodeDecodeError: If no trusted encoding decodes the bytes and
            lossy is False.
    """
    if detect:
        encoding, confidence = detect_encoding(raw_data)
        if encoding.startswith("utf") or confidence >= MIN_CONFIDENCE:
            try:
                return raw_data.decode(encoding), encoding
            except (UnicodeDecodeError, LookupError):
                logger.debug("Detected encoding %s failed to decode", encoding)

    if lossy:
        return raw_data.decode("utf-8", errors="replace"), "utf-8"
    return raw_data.decode("utf-8"), "utf-8"


def read_text_with_encoding(
    path: str | Path, detect: bool = True, lossy: bool = False
) -> tuple[str, str]:
    """Read a file as text, returning the content and its encoding.

    Raises:
        ApplyError: If the path is missing, not a file, unreadable, or
            cannot be decoded without loss.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise ApplyError(f"File does not exist: {path}", str(path))
    if not file_path.is_file():
        raise ApplyError(f"Path is not a file: {path}", str(path))

    try:
        raw_data = file_path.read_bytes()
    except OSError as e:
        raise ApplyError(f"Failed to read file {path}: {e}", str(path)) from e

    try:
        return decode_text(raw_data, detect=detect, lossy=lossy)
    except UnicodeDecodeError as e:
        raise ApplyError(f"Failed to decode file {path}: {e}", str(path)) from e


def read_text(path: str | Path, detect: bool = True, lossy: bool = False) -> str:
    """Read a file as text.

    Raises:
        ApplyError: If the path is missing, not a file, unreadable, or
            cannot be decoded without loss.
    """
    content, _ = read_text_with_encoding(path, detect=detect, lossy=lossy)
    return content


def write_text(path: str | Path, content: str, encoding: str = "utf-8") -> int:
    """Write text to a file, creating parent directories if needed.

    Args:
        path: Destination file.
        content: Full file content.
        encoding: Codec for the written bytes.

    Returns:
        Number of bytes written.

    Raises:
        ApplyError: On any I/O failure.
    """
    file_path = Path(path)

    try:
        data = content.encode(encoding)
    except (UnicodeEncodeError, LookupError):
        logger.warning("Cannot encode %s as %s, writing UTF-8", path, encoding)
        data = content.encode("utf-8")

    try:
        parent = file_path.parent
        if not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)
    except PermissionError as e:
        raise ApplyError(f"Permission denied: {path}", str(path)) from e
    except OSError as e:
        raise ApplyError(f"Failed to write to file {path}: {e}", str(path)) from e

    return len(data)


def delete_file(path: str | Path) -> None:
    """Remove a file.

    Raises:
        ApplyError: If the file is missing or cannot be removed.
    """
    if not os.path.lexists(path):
        raise ApplyError(f"File does not exist: {path}", str(path))

    try:
        os.remove(path)
    except OSError as e:
        raise ApplyError(f"Failed to delete file {path}: {e}", str(path)) from e
