# visuaid/estimators/weighted_hue.py
# Fallback: media circular de tono ponderada por saturación y valor.
# - ROI central (fracción del frame) para evitar bordes y fondo
# - Descarta píxeles poco saturados o casi negros / casi blancos
# - El tono se acumula como vector (cos, sin) para promediar en el círculo
# Si ningún píxel aporta peso (escena gris o sobreexpuesta) se usa la media
# simple sobre una cuadrícula gruesa del frame completo.
import math

import numpy as np

from visuaid.estimators.average import grid_mean
from visuaid.utils.color import hsv_to_rgb, rgb_to_hsv_array
from visuaid.utils.frames import center_fraction, grid_sample


class WeightedHueEstimator:
    name = "weighted_hue"

    def __init__(self, roi_fraction=0.6, min_saturation=0.15, min_value=0.10,
                 max_value=0.98, grid=96, fallback_grid=64):
        if not 0.0 <= min_value < max_value <= 1.0:
            raise ValueError(f"Rango de valor inválido: [{min_value}, {max_value}]")
        self.roi_fraction = float(roi_fraction)
        self.min_saturation = float(min_saturation)
        self.min_value = float(min_value)
        self.max_value = float(max_value)
        self.grid = int(grid)
        self.fallback_grid = int(fallback_grid)

    def weighted_hsv(self, rgb):
        """(h, s, v) ponderado o None si el peso total es cero."""
        samples = grid_sample(center_fraction(rgb, self.roi_fraction), self.grid)
        hsv = rgb_to_hsv_array(samples)
        h, s, v = hsv[:, 0], hsv[:, 1], hsv[:, 2]

        keep = (s >= self.min_saturation) & (v >= self.min_value) & (v <= self.max_value)
        v_norm = np.clip((v - self.min_value) / (self.max_value - self.min_value), 0.0, 1.0)
        w = np.where(keep, s * v_norm, 0.0)
        total = float(w.sum())
        if total <= 0.0:
            return None

        rad = np.radians(h)
        hue = math.degrees(math.atan2(float((np.sin(rad) * w).sum()),
                                      float((np.cos(rad) * w).sum())))
        if hue < 0:
            hue += 360.0
        sat = float((s * w).sum()) / total
        val = float((v * w).sum()) / total
        return hue % 360.0, sat, val

    def estimate(self, rgb):
        if rgb is None or rgb.size == 0:
            return None
        hsv = self.weighted_hsv(rgb)
        if hsv is None:
            return grid_mean(rgb, self.fallback_grid)
        return hsv_to_rgb(*hsv)
