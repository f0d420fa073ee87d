"""Tests for the stored-block PNG writer."""

import base64
import struct
import zlib

import numpy as np
import pytest

from pynumeric.io import encode_png, image_url


def _chunks(data):
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    pos = 8
    out = []
    while pos < len(data):
        (length,) = struct.unpack(">I", data[pos:pos + 4])
        kind = data[pos + 4:pos + 8]
        body = data[pos + 8:pos + 8 + length]
        (crc,) = struct.unpack(">I", data[pos + 8 + length:pos + 12 + length])
        assert crc == zlib.crc32(kind + body) & 0xFFFFFFFF
        out.append((kind, body))
        pos += 12 + length
    return out


def test_single_rgb_pixel():
    img = np.array([[[255.0]], [[0.0]], [[0.0]]])
    chunks = _chunks(encode_png(img))
    assert [kind for kind, _ in chunks] == [b"IHDR", b"IDAT", b"IEND"]
    width, height, depth, color, _, _, _ = struct.unpack(">IIBBBBB", chunks[0][1])
    assert (width, height, depth, color) == (1, 1, 8, 2)
    assert zlib.decompress(chunks[1][1]) == b"\x00\xff\x00\x00"


def test_rgba_values_are_rounded_and_clipped():
    img = np.zeros((4, 2, 3))
    img[0] = 300.0
    img[1] = -5.0
    img[2] = 127.6
    img[3] = 255.0
    chunks = _chunks(encode_png(img))
    assert struct.unpack(">IIBBBBB", chunks[0][1])[:4] == (3, 2, 8, 6)
    raw = zlib.decompress(chunks[1][1])
    assert raw == (b"\x00" + b"\xff\x00\x80\xff" * 3) * 2


def test_large_image_uses_multiple_stored_blocks(rng):
    img = rng.integers(0, 256, size=(3, 200, 200)).astype(float)
    chunks = _chunks(encode_png(img))
    raw = zlib.decompress(chunks[1][1])
    rows = np.frombuffer(raw, dtype=np.uint8).reshape(200, 601)
    assert np.all(rows[:, 0] == 0)
    np.testing.assert_array_equal(
        rows[:, 1:].reshape(200, 200, 3).transpose(2, 0, 1), img.astype(np.uint8)
    )


def test_image_url_wraps_png_bytes():
    img = np.zeros((3, 2, 2))
    url = image_url(img)
    assert url.startswith("data:image/png;base64,")
    assert base64.b64decode(url.split(",", 1)[1]) == encode_png(img)


def test_invalid_shape():
    with pytest.raises(ValueError):
        encode_png(np.zeros((2, 2, 2)))
    with pytest.raises(ValueError):
        encode_png(np.zeros((3, 2)))
