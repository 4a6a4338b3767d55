#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/utils/encoding.py
"""Character encoding detection for Org sources.

Org files are nearly always UTF-8, but files written by older Emacs
configurations may use a legacy coding system. Bytes are decoded with the
encoding chardet reports, falling back to a fixed list of encodings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

import chardet

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1")


def detect_encoding(data: bytes, sample_size: int = 8192, confidence_threshold: float = 0.7) -> str | None:
    """Detect the character encoding of ``data`` using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of leading bytes to sample
    confidence_threshold : float, default 0.7
        Minimum confidence required to trust the detection

    Returns
    -------
    str | None
        Detected encoding name, or None when detection is not confident

    """
    sample = data[:sample_size]
    result = chardet.detect(sample)
    if not result or not result.get("encoding"):
        logger.debug("chardet: No encoding detected")
        return None

    encoding = result["encoding"]
    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")
    if confidence >= confidence_threshold:
        return encoding
    return None


def read_text_with_encoding_detection(data: bytes, fallback_encodings: tuple[str, ...] | None = None) -> str:
    """Decode ``data``, trying the detected encoding then each fallback.

    Parameters
    ----------
    data : bytes
        Binary data to decode
    fallback_encodings : tuple of str, optional
        Encodings to try in order; defaults to utf-8, utf-8-sig, latin-1

    Returns
    -------
    str
        Decoded text

    """
    if not data:
        return ""
    detected = detect_encoding(data)
    candidates = ((detected,) if detected else ()) + (fallback_encodings or DEFAULT_FALLBACK_ENCODINGS)
    for encoding in candidates:
        try:
            text = data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with {encoding}: {e}")
            continue
        logger.debug(f"Successfully decoded with encoding: {encoding}")
        return text

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace")


def load_text(input_data: Union[str, Path, IO[bytes], IO[str], bytes]) -> str:
    """Load Org text from a path, bytes, a stream or a string.

    A ``str`` naming an existing file is read from disk; any other
    ``str`` is taken as the document itself.

    """
    if isinstance(input_data, bytes):
        return read_text_with_encoding_detection(input_data)
    if isinstance(input_data, Path):
        return read_text_with_encoding_detection(input_data.read_bytes())
    if isinstance(input_data, str):
        # Linux limits path components to 255 characters
        if len(input_data) <= 260 and "\n" not in input_data:
            try:
                path = Path(input_data)
                if path.is_file():
                    return read_text_with_encoding_detection(path.read_bytes())
            except OSError:
                pass
        return input_data
    content = input_data.read()
    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content)
    return content


__all__ = ["detect_encoding", "read_text_with_encoding_detection", "load_text"]
