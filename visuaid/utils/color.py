# visuaid/utils/color.py
# Conversiones RGB <-> HSV <-> Lab (sRGB, D65) y distancia perceptual ΔE2000.
# Funciones puras: sin estado, sin errores (todas son totales).
import math

import numpy as np

from visuaid.types import HSV, Lab, RGB

# Blanco de referencia D65
XN, YN, ZN = 0.95047, 1.00000, 1.08883

# Matriz sRGB lineal -> XYZ (D65)
SRGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])

HUE_EPSILON = 1e-7
_DELTA = 6.0 / 29.0


def clamp(x, lo=0.0, hi=1.0):
    return min(max(x, lo), hi)


def hue_delta(h_from, h_to):
    """Diferencia circular h_to - h_from en grados, envuelta a [-180, 180]."""
    d = (h_to - h_from) % 360.0
    return d - 360.0 if d > 180.0 else d


# -----------------------------------------------------------------------------
# RGB <-> HSV
# -----------------------------------------------------------------------------

def rgb_to_hsv(r, g, b) -> HSV:
    r, g, b = clamp(r), clamp(g), clamp(b)
    max_v = max(r, g, b)
    min_v = min(r, g, b)
    delta = max_v - min_v

    h = 0.0
    s = 0.0 if max_v == 0 else delta / max_v  # negro puro: sin división por cero
    if delta != 0:
        if max_v == r:
            h = 60.0 * math.fmod((g - b) / delta, 6.0)
        elif max_v == g:
            h = 60.0 * ((b - r) / delta + 2.0)
        else:
            h = 60.0 * ((r - g) / delta + 4.0)
    if h < 0:
        h += 360.0
    if h >= 360.0:
        h -= 360.0
    return HSV(h, s, max_v)


def hsv_to_rgb(h, s, v) -> RGB:
    h = h % 360.0
    s, v = clamp(s), clamp(v)
    c = v * s
    x = c * (1.0 - abs(math.fmod(h / 60.0, 2.0) - 1.0))
    m = v - c
    sector = int(h // 60.0)
    r, g, b = [
        (c, x, 0.0), (x, c, 0.0), (0.0, c, x),
        (0.0, x, c), (x, 0.0, c), (c, 0.0, x),
    ][min(sector, 5)]
    return RGB(clamp(r + m), clamp(g + m), clamp(b + m))


def rgb_to_hsv_array(rgb):
    """Versión vectorizada de rgb_to_hsv para arrays (..., 3) en [0,1]."""
    rgb = np.clip(np.asarray(rgb, dtype=np.float64), 0.0, 1.0)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    max_v = rgb.max(axis=-1)
    min_v = rgb.min(axis=-1)
    delta = max_v - min_v

    safe = np.where(delta == 0, 1.0, delta)
    h = np.where(max_v == r, 60.0 * np.fmod((g - b) / safe, 6.0),
        np.where(max_v == g, 60.0 * ((b - r) / safe + 2.0),
                             60.0 * ((r - g) / safe + 4.0)))
    h = np.where(delta == 0, 0.0, h)
    h = np.where(h < 0, h + 360.0, h)
    h = np.where(h >= 360.0, h - 360.0, h)
    s = np.where(max_v == 0, 0.0, delta / np.where(max_v == 0, 1.0, max_v))
    return np.stack([h, s, max_v], axis=-1)


def hsv_to_rgb_array(hsv):
    hsv = np.asarray(hsv, dtype=np.float64)
    h = np.mod(hsv[..., 0], 360.0)
    s = np.clip(hsv[..., 1], 0.0, 1.0)
    v = np.clip(hsv[..., 2], 0.0, 1.0)
    c = v * s
    x = c * (1.0 - np.abs(np.fmod(h / 60.0, 2.0) - 1.0))
    m = v - c
    sector = np.minimum((h // 60.0).astype(int), 5)
    conds = [sector == i for i in range(6)]
    r = np.select(conds, [c, x, 0.0, 0.0, x, c])
    g = np.select(conds, [x, c, c, x, 0.0, 0.0])
    b = np.select(conds, [0.0, 0.0, x, c, c, x])
    return np.clip(np.stack([r, g, b], axis=-1) + m[..., None], 0.0, 1.0)


# -----------------------------------------------------------------------------
# sRGB (D65) -> XYZ -> Lab
# -----------------------------------------------------------------------------

def _linearize(c):
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def rgb_to_xyz(r, g, b):
    lin = np.array([_linearize(clamp(r)), _linearize(clamp(g)), _linearize(clamp(b))])
    x, y, z = SRGB_TO_XYZ @ lin
    return float(x), float(y), float(z)


def _lab_f(t):
    if t > _DELTA ** 3:
        return t ** (1.0 / 3.0)
    return t / (3.0 * _DELTA * _DELTA) + 4.0 / 29.0


def xyz_to_lab(x, y, z) -> Lab:
    fx = _lab_f(x / XN)
    fy = _lab_f(y / YN)
    fz = _lab_f(z / ZN)
    return Lab(116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz))


def rgb_to_lab(r, g, b) -> Lab:
    return xyz_to_lab(*rgb_to_xyz(r, g, b))


# -----------------------------------------------------------------------------
# ΔE2000 (CIEDE2000, kL = kC = kH = 1)
# -----------------------------------------------------------------------------

def _hue_angle(b, a_prime, c_prime):
    # Con croma ~0 el ángulo es ruido: se define como 0
    if c_prime < HUE_EPSILON:
        return 0.0
    ang = math.degrees(math.atan2(b, a_prime))
    return ang + 360.0 if ang < 0 else ang


def delta_e2000(lab1, lab2):
    L1, a1, b1 = lab1
    L2, a2, b2 = lab2

    c1 = math.hypot(a1, b1)
    c2 = math.hypot(a2, b2)
    c_bar7 = ((c1 + c2) / 2.0) ** 7
    g = 0.5 * (1.0 - math.sqrt(c_bar7 / (c_bar7 + 25.0 ** 7)))
    a1p = (1.0 + g) * a1
    a2p = (1.0 + g) * a2
    c1p = math.hypot(a1p, b1)
    c2p = math.hypot(a2p, b2)
    h1p = _hue_angle(b1, a1p, c1p)
    h2p = _hue_angle(b2, a2p, c2p)

    dLp = L2 - L1
    dCp = c2p - c1p

    dh = h2p - h1p
    if c1p * c2p == 0:
        dhp = 0.0
    elif abs(dh) <= 180.0:
        dhp = dh
    elif dh > 180.0:
        dhp = dh - 360.0
    else:
        dhp = dh + 360.0
    dHp = 2.0 * math.sqrt(c1p * c2p) * math.sin(math.radians(dhp) / 2.0)

    L_bar = (L1 + L2) / 2.0
    cp_bar = (c1p + c2p) / 2.0
    if c1p * c2p == 0:
        hp_bar = h1p + h2p
    elif abs(h1p - h2p) <= 180.0:
        hp_bar = (h1p + h2p) / 2.0
    elif h1p + h2p < 360.0:
        hp_bar = (h1p + h2p + 360.0) / 2.0
    else:
        hp_bar = (h1p + h2p - 360.0) / 2.0

    t = (1.0
         - 0.17 * math.cos(math.radians(hp_bar - 30.0))
         + 0.24 * math.cos(math.radians(2.0 * hp_bar))
         + 0.32 * math.cos(math.radians(3.0 * hp_bar + 6.0))
         - 0.20 * math.cos(math.radians(4.0 * hp_bar - 63.0)))

    sl = 1.0 + (0.015 * (L_bar - 50.0) ** 2) / math.sqrt(20.0 + (L_bar - 50.0) ** 2)
    sc = 1.0 + 0.045 * cp_bar
    sh = 1.0 + 0.015 * cp_bar * t

    d_theta = 30.0 * math.exp(-(((hp_bar - 275.0) / 25.0) ** 2))
    cp_bar7 = cp_bar ** 7
    rc = 2.0 * math.sqrt(cp_bar7 / (cp_bar7 + 25.0 ** 7))
    rt = -rc * math.sin(math.radians(2.0 * d_theta))

    tl = dLp / sl
    tc = dCp / sc
    th = dHp / sh
    return math.sqrt(max(0.0, tl * tl + tc * tc + th * th + rt * tc * th))
