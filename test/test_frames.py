# test/test_frames.py
import numpy as np
import pytest

from visuaid.utils.frames import (
    PixelBuffer, decode_frame, downscale, extract_center_roi, from_bgr_image, to_rgb,
)


def _buffer(pixels_rgba, fmt="RGBA", pad=0, orientation="up"):
    """pixels_rgba: array (alto, ancho, 4) uint8 en orden RGBA."""
    h, w = pixels_rgba.shape[:2]
    px = pixels_rgba if fmt == "RGBA" else pixels_rgba[:, :, [2, 1, 0, 3]]
    rows = [np.concatenate([row.reshape(-1), np.zeros(pad, np.uint8)]) for row in px]
    return PixelBuffer(np.concatenate(rows).tobytes(), w, h, stride=w * 4 + pad,
                       pixel_format=fmt, orientation=orientation)


def _sample():
    px = np.zeros((2, 3, 4), dtype=np.uint8)
    px[0, 0] = (255, 0, 0, 255)
    px[0, 2] = (0, 255, 0, 255)
    px[1, 1] = (0, 0, 255, 255)
    return px


@pytest.mark.parametrize("fmt", ["RGBA", "BGRA"])
def test_decode_with_stride_padding(fmt):
    rgb = decode_frame(_buffer(_sample(), fmt=fmt, pad=4))
    assert rgb.shape == (2, 3, 3)
    assert rgb.dtype == np.float32
    assert tuple(rgb[0, 0]) == (1.0, 0.0, 0.0)
    assert tuple(rgb[0, 2]) == (0.0, 1.0, 0.0)
    assert tuple(rgb[1, 1]) == (0.0, 0.0, 1.0)


def test_decode_accepts_unpadded_last_row():
    buf = _buffer(_sample(), pad=4)
    trimmed = PixelBuffer(buf.data[:-4], buf.width, buf.height, buf.stride, buf.pixel_format)
    assert decode_frame(trimmed) is not None


def test_decode_rotates_by_orientation():
    rgb = decode_frame(_buffer(_sample(), orientation="right"))
    assert rgb.shape == (3, 2, 3)
    assert tuple(rgb[0, 1]) == (1.0, 0.0, 0.0)


@pytest.mark.parametrize("buf", [
    PixelBuffer(b"\x00" * 10, 3, 2),                           # truncado
    PixelBuffer(b"\x00" * 24, 3, 2, pixel_format="YUV420"),    # formato desconocido
    PixelBuffer(b"", 0, 2),                                    # sin área
    PixelBuffer(b"\x00" * 24, 3, 2, stride=8),                 # stride menor que la fila
    PixelBuffer(b"\x00" * 24, 3, 2, orientation="sideways"),
    PixelBuffer(None, 3, 2),
])
def test_unreadable_buffers_return_none(buf):
    assert decode_frame(buf) is None


def test_to_rgb_accepts_arrays():
    u8 = np.full((4, 4, 3), 255, dtype=np.uint8)
    assert to_rgb(u8).max() == 1.0
    assert to_rgb(np.full((4, 4, 4), 2.0)).shape == (4, 4, 3)
    assert to_rgb(np.zeros((0, 4, 3))) is None
    assert to_rgb("not a frame") is None


def test_from_bgr_image_swaps_channels():
    bgr = np.zeros((2, 2, 3), dtype=np.uint8)
    bgr[:, :] = (255, 0, 0)
    assert tuple(from_bgr_image(bgr)[0, 0]) == (0.0, 0.0, 1.0)


def test_center_roi_is_read_only_view():
    frame = np.zeros((200, 300, 3), dtype=np.float32)
    frame[90:110, 140:160] = 1.0
    roi = extract_center_roi(frame, 20)
    assert roi.shape == (20, 20, 3)
    assert roi.min() == 1.0
    assert not roi.flags.writeable
    assert np.shares_memory(roi, frame)


def test_center_roi_degenerate():
    frame = np.zeros((100, 100, 3), dtype=np.float32)
    assert extract_center_roi(frame, 120) is None
    assert extract_center_roi(frame, 0) is None
    assert extract_center_roi(None, 10) is None


def test_downscale_long_side_and_no_upscale():
    img = np.zeros((120, 60, 3), dtype=np.float32)
    assert downscale(img, 64).shape == (64, 32, 3)
    assert downscale(img, 200).shape == (120, 60, 3)
