"""Estimador principal: ROI central + gray-world + k-means.

Pasos:
  1) ROI cuadrada centrada (roi_size px).
  2) Reducción a `downscale` px (lado largo) sólo para estimar el balance.
  3) Ganancias gray-world por canal a partir de los píxeles casi neutros.
  4) Corrección de la ROI a resolución completa (escala lineal + clamp).
  5) Nueva reducción y k-means determinista sobre los tripletes RGB.
  6) Se devuelve el centro del cluster con más miembros.

Si la ROI no cabe en el frame devuelve None y el pipeline usa el fallback.
"""

import numpy as np

from visuaid.types import RGB
from visuaid.utils.color import rgb_to_hsv_array
from visuaid.utils.frames import downscale, extract_center_roi

LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


def gray_world_gains(img, epsilon=1e-6, neutral_saturation=0.35, min_neutral_fraction=0.05):
    """
    Ganancias (gR, gG, gB) = gris_objetivo / media_canal.

    Sólo promedian los píxeles con saturación <= neutral_saturation (los que
    pueden revelar el tinte de la luz). Si no hay suficientes, la escena no
    aporta información de iluminación y las ganancias son 1. Con
    neutral_saturation=1.0 se obtiene el gray-world clásico sobre toda la región.
    """
    pixels = img.reshape(-1, 3).astype(np.float64)
    if pixels.size == 0:
        return np.ones(3)
    sat = rgb_to_hsv_array(pixels)[:, 1]
    neutral = pixels[sat <= neutral_saturation]
    if len(neutral) < max(1, min_neutral_fraction * len(pixels)):
        return np.ones(3)

    means = neutral.mean(axis=0)
    target = means.mean()
    gains = np.ones(3)
    for c in range(3):
        # Canal casi vacío: ganancia 1 para no disparar la corrección
        if means[c] >= epsilon:
            gains[c] = target / means[c]
    return gains


def apply_gains(img, gains):
    return np.clip(img * np.asarray(gains, dtype=np.float32), 0.0, 1.0)


def _initial_centers(points, k):
    # Muestreo equiespaciado sobre los puntos ordenados por luminancia (y R, G, B
    # para desempatar): no depende del orden de entrada ni usa aleatoriedad.
    luma = points @ LUMA_WEIGHTS
    order = np.lexsort((points[:, 2], points[:, 1], points[:, 0], luma))
    idx = np.linspace(0, len(points) - 1, k).round().astype(int)
    return points[order[idx]].copy()


def _assign(points, centers):
    d2 = ((points[:, None, :] - centers[None, :, :]) ** 2).sum(axis=2)
    return d2.argmin(axis=1)


def kmeans(points, k=3, iterations=8):
    """
    k-means sobre tripletes RGB (distancia euclídea al cuadrado).
    Devuelve (centros, conteos). Un cluster vacío conserva su centro.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(points) == 0:
        return np.zeros((0, 3)), np.zeros(0, dtype=int)
    k = max(1, min(int(k), len(points)))
    centers = _initial_centers(points, k)

    for _ in range(int(iterations)):
        labels = _assign(points, centers)
        for j in range(k):
            members = points[labels == j]
            if len(members):
                centers[j] = members.mean(axis=0)

    labels = _assign(points, centers)
    counts = np.bincount(labels, minlength=k)
    return centers, counts


def dominant_center(points, k=3, iterations=8):
    centers, counts = kmeans(points, k, iterations)
    if len(centers) == 0:
        return None
    return centers[int(np.argmax(counts))]


class GrayWorldKMeansEstimator:
    name = "kmeans"

    def __init__(self, roi_size=120, downscale_px=64, k=3, iterations=8,
                 gain_epsilon=1e-6, neutral_saturation=0.35, min_neutral_fraction=0.05):
        if int(k) < 1:
            raise ValueError(f"kmeans_k debe ser >= 1 (recibido {k})")
        if int(iterations) < 0:
            raise ValueError(f"kmeans_iterations debe ser >= 0 (recibido {iterations})")
        self.roi_size = int(roi_size)
        self.downscale_px = int(downscale_px)
        self.k = int(k)
        self.iterations = int(iterations)
        self.gain_epsilon = float(gain_epsilon)
        self.neutral_saturation = float(neutral_saturation)
        self.min_neutral_fraction = float(min_neutral_fraction)
        self.last_gains = np.ones(3)

    def estimate(self, rgb):
        roi = extract_center_roi(rgb, self.roi_size)
        if roi is None:
            return None

        small = downscale(roi, self.downscale_px)
        gains = gray_world_gains(small, self.gain_epsilon,
                                 self.neutral_saturation, self.min_neutral_fraction)
        self.last_gains = gains
        corrected = apply_gains(roi, gains)

        points = downscale(corrected, self.downscale_px).reshape(-1, 3)
        dom = dominant_center(points, self.k, self.iterations)
        if dom is None:
            return None
        r, g, b = np.clip(dom, 0.0, 1.0)
        return RGB(float(r), float(g), float(b))
