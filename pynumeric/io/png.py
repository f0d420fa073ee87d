"""Minimal PNG writer producing ``data:`` URIs.

The image data is wrapped in a zlib stream made of stored (uncompressed)
DEFLATE blocks, so no compressor is involved; only the CRC-32 of each chunk
and the Adler-32 of the zlib stream are computed.
"""

from __future__ import annotations

import base64
import struct
import zlib

import numpy as np

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
MAX_STORED_BLOCK = 65535


def _chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def _stored_zlib(raw: bytes) -> bytes:
    out = bytearray(b"\x78\x01")
    if not raw:
        out += b"\x01\x00\x00\xff\xff"
    for start in range(0, len(raw), MAX_STORED_BLOCK):
        block = raw[start:start + MAX_STORED_BLOCK]
        final = 1 if start + MAX_STORED_BLOCK >= len(raw) else 0
        out.append(final)
        out += struct.pack("<HH", len(block), len(block) ^ 0xFFFF)
        out += block
    out += struct.pack(">I", zlib.adler32(raw) & 0xFFFFFFFF)
    return bytes(out)


def encode_png(img) -> bytes:
    """
    Encode an image as PNG bytes.

    Parameters
    ----------
    img : array_like
        Channel-first array of shape ``(3, h, w)`` (RGB) or ``(4, h, w)``
        (RGBA). Values are rounded and clipped to ``0..255``.

    Returns
    -------
    bytes
        Complete PNG file contents.
    """
    arr = np.asarray(img, dtype=float)
    if arr.ndim != 3 or arr.shape[0] not in (3, 4):
        raise ValueError(f"Expected an image of shape (3, h, w) or (4, h, w), got {arr.shape}")
    channels, height, width = arr.shape
    pixels = np.clip(np.rint(arr), 0, 255).astype(np.uint8)
    rows = np.transpose(pixels, (1, 2, 0)).reshape(height, width * channels)
    # Filter type 0 (None) before every scanline.
    raw = np.hstack([np.zeros((height, 1), dtype=np.uint8), rows]).tobytes()
    color_type = 2 if channels == 3 else 6
    header = struct.pack(">IIBBBBB", width, height, 8, color_type, 0, 0, 0)
    return (
        PNG_SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", _stored_zlib(raw))
        + _chunk(b"IEND", b"")
    )


def image_url(img) -> str:
    """Encode ``img`` (see :func:`encode_png`) as a base64 PNG data URI."""
    return "data:image/png;base64," + base64.b64encode(encode_png(img)).decode("ascii")


__all__ = ["encode_png", "image_url"]
