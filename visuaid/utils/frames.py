# visuaid/utils/frames.py
# Lectura de buffers de píxeles (RGBA/BGRA 8 bits con stride) y extracción de
# la región de interés. El resto del pipeline sólo ve arrays RGB float en [0,1]
# de forma (alto, ancho, 3); cualquier librería de bitmaps puede producirlos.
from dataclasses import dataclass

import cv2
import numpy as np

BYTES_PER_PIXEL = 4

# Offsets de canal (R, G, B) dentro de cada píxel de 4 bytes
CHANNEL_OFFSETS = {
    "RGBA": (0, 1, 2),
    "BGRA": (2, 1, 0),
}

# Rotación necesaria para dejar el contenido "de pie"
ROTATIONS = {
    "up": None,
    "right": cv2.ROTATE_90_CLOCKWISE,
    "down": cv2.ROTATE_180,
    "left": cv2.ROTATE_90_COUNTERCLOCKWISE,
}


@dataclass(frozen=True)
class PixelBuffer:
    data: bytes
    width: int
    height: int
    stride: int = 0              # bytes por fila; 0 => width * 4
    pixel_format: str = "BGRA"   # formato por defecto de la cámara
    orientation: str = "up"

    @property
    def row_bytes(self):
        return self.stride or self.width * BYTES_PER_PIXEL


def decode_frame(buf: PixelBuffer):
    """
    Devuelve un array RGB float32 (alto, ancho, 3) en [0,1], ya orientado,
    o None si el buffer no se puede leer (tamaños inválidos, formato
    desconocido, datos truncados).
    """
    offsets = CHANNEL_OFFSETS.get(str(buf.pixel_format).upper())
    if offsets is None or buf.orientation not in ROTATIONS:
        return None
    w, h, stride = int(buf.width), int(buf.height), int(buf.row_bytes)
    if w <= 0 or h <= 0 or stride < w * BYTES_PER_PIXEL:
        return None
    try:
        raw = np.frombuffer(buf.data, dtype=np.uint8)
    except (TypeError, ValueError):
        return None
    # La última fila puede venir sin relleno
    needed = stride * (h - 1) + w * BYTES_PER_PIXEL
    if raw.size < needed:
        return None

    padded = np.zeros(stride * h, dtype=np.uint8)
    padded[:needed] = raw[:needed]
    pixels = padded.reshape(h, stride)[:, :w * BYTES_PER_PIXEL].reshape(h, w, BYTES_PER_PIXEL)
    rgb = np.ascontiguousarray(pixels[:, :, list(offsets)])

    rotation = ROTATIONS[buf.orientation]
    if rotation is not None:
        rgb = cv2.rotate(rgb, rotation)
    return rgb.astype(np.float32) / 255.0


def from_bgr_image(frame):
    """Frame BGR uint8 de OpenCV (VideoCapture) -> RGB float32 en [0,1]."""
    if frame is None or frame.size == 0:
        return None
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB).astype(np.float32) / 255.0


def to_rgb(frame):
    """Acepta PixelBuffer o array (alto, ancho, 3) RGB; uint8 o float."""
    if isinstance(frame, PixelBuffer):
        return decode_frame(frame)
    if not isinstance(frame, np.ndarray) or frame.ndim != 3 or frame.shape[2] < 3:
        return None
    if frame.shape[0] == 0 or frame.shape[1] == 0:
        return None
    rgb = frame[:, :, :3]
    if rgb.dtype == np.uint8:
        return rgb.astype(np.float32) / 255.0
    return np.clip(rgb.astype(np.float32), 0.0, 1.0)


def extract_center_roi(rgb, size):
    """
    Región cuadrada centrada de `size` px (vista de sólo lectura).
    None si la ROI no cabe en el frame o tiene área cero.
    """
    if rgb is None:
        return None
    h, w = rgb.shape[:2]
    size = int(size)
    if size <= 0 or size > min(h, w):
        return None
    y0 = (h - size) // 2
    x0 = (w - size) // 2
    roi = rgb[y0:y0 + size, x0:x0 + size]
    roi.flags.writeable = False
    return roi


def center_fraction(rgb, fraction):
    """ROI rectangular centrada que ocupa `fraction` de cada lado."""
    h, w = rgb.shape[:2]
    rh, rw = max(1, int(h * fraction)), max(1, int(w * fraction))
    y0, x0 = max(0, (h - rh) // 2), max(0, (w - rw) // 2)
    return rgb[y0:y0 + rh, x0:x0 + rw]


def downscale(img, long_side):
    """Reduce (nunca amplía) para que el lado largo mida `long_side` px."""
    h, w = img.shape[:2]
    src = img.astype(np.float32)
    if max(h, w) <= long_side:
        return src
    scale = long_side / float(max(h, w))
    size = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
    return cv2.resize(src, size, interpolation=cv2.INTER_AREA)


def grid_sample(img, grid):
    """Muestreo en cuadrícula: ~`grid` muestras por lado, salto adaptativo."""
    h, w = img.shape[:2]
    step_y = max(1, h // grid)
    step_x = max(1, w // grid)
    return img[::step_y, ::step_x].reshape(-1, img.shape[2])
