"""Binary content sniffing for dump-dir.

A file is classified from its first 8 KiB. Known magic-byte signatures are
checked first; when none applies, a null byte anywhere in the sample marks
the file as binary.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SNIFF_SIZE = 8192  # Bytes read for binary detection

# (offset, signature, media type). Checked in order, first match wins, so
# longer signatures sharing a prefix come before shorter ones.
MAGIC_SIGNATURES: tuple[tuple[int, bytes, str], ...] = (
    # Unicode byte-order marks
    (0, b"\xff\xfe\x00\x00", "text/plain; charset=utf-32le"),
    (0, b"\x00\x00\xfe\xff", "text/plain; charset=utf-32be"),
    (0, b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
    (0, b"\xff\xfe", "text/plain; charset=utf-16le"),
    (0, b"\xfe\xff", "text/plain; charset=utf-16be"),
    # Images
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"II*\x00", "image/tiff"),
    (0, b"MM\x00*", "image/tiff"),
    (0, b"\x00\x00\x01\x00", "image/vnd.microsoft.icon"),
    (8, b"WEBP", "image/webp"),
    # Documents
    (0, b"%PDF-", "application/pdf"),
    (0, b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", "application/x-ole-storage"),
    # Archives and compression
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"PK\x05\x06", "application/zip"),
    (0, b"\x1f\x8b", "application/gzip"),
    (0, b"BZh", "application/x-bzip2"),
    (0, b"\xfd7zXZ\x00", "application/x-xz"),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (0, b"Rar!\x1a\x07", "application/vnd.rar"),
    (0, b"\x28\xb5\x2f\xfd", "application/zstd"),
    (257, b"ustar", "application/x-tar"),
    # Executables and bytecode
    (0, b"\x7fELF", "application/x-executable"),
    (0, b"MZ", "application/vnd.microsoft.portable-executable"),
    (0, b"\xfe\xed\xfa\xce", "application/x-mach-binary"),
    (0, b"\xfe\xed\xfa\xcf", "application/x-mach-binary"),
    (0, b"\xce\xfa\xed\xfe", "application/x-mach-binary"),
    (0, b"\xcf\xfa\xed\xfe", "application/x-mach-binary"),
    (0, b"\xca\xfe\xba\xbe", "application/java-vm"),
    (0, b"\x00asm", "application/wasm"),
    # Databases
    (0, b"SQLite format 3\x00", "application/vnd.sqlite3"),
    # Audio and video
    (0, b"ID3", "audio/mpeg"),
    (0, b"OggS", "audio/ogg"),
    (0, b"fLaC", "audio/flac"),
    (4, b"ftyp", "video/mp4"),
    (0, b"\x1a\x45\xdf\xa3", "video/webm"),
    # Fonts
    (0, b"wOFF", "font/woff"),
    (0, b"wOF2", "font/woff2"),
    (0, b"\x00\x01\x00\x00\x00", "font/ttf"),
    (0, b"OTTO", "font/otf"),
)

# Encodings whose text legitimately contains null bytes.
_WIDE_TEXT_CHARSETS = ("utf-16le", "utf-16be", "utf-32le", "utf-32be")


def sniff_media_type(data: bytes) -> str | None:
    """Return the media type of the first matching magic signature, if any."""
    for offset, signature, media_type in MAGIC_SIGNATURES:
        if data[offset : offset + len(signature)] == signature:
            return media_type
    return None


def is_binary_content(data: bytes) -> bool:
    """Classify a byte sample as binary (True) or text (False).

    Precedence:
    1. A signature with a non-``text/`` media type means binary.
    2. A UTF-16/UTF-32 byte-order mark means text, null bytes included.
    3. Otherwise a null byte anywhere in the sample means binary.
    """
    if not data:
        return False

    media_type = sniff_media_type(data)
    if media_type is not None:
        if not media_type.startswith("text/"):
            return True
        if media_type.endswith(_WIDE_TEXT_CHARSETS):
            return False

    return b"\x00" in data


def is_binary(path: Path) -> bool:
    """Sniff the first 8 KiB of ``path`` to detect binary content.

    A file that cannot be opened or read is reported as text so that the
    printer surfaces the read failure instead of it being dropped here.
    """
    try:
        with open(path, "rb") as f:
            sample = f.read(SNIFF_SIZE)
    except OSError as e:
        logger.debug(f"Could not read {path} for binary detection: {e}")
        return False

    return is_binary_content(sample)
