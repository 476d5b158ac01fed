# visuaid/estimators/average.py
# Media aritmética simple sobre una cuadrícula gruesa del frame completo.
# Es la variante más antigua del estimador y el último recurso del fallback
# por tono ponderado.
import numpy as np

from visuaid.types import RGB
from visuaid.utils.frames import grid_sample


def grid_mean(rgb, grid=64):
    if rgb is None or rgb.size == 0:
        return None
    samples = grid_sample(rgb, grid)
    r, g, b = np.clip(samples.mean(axis=0), 0.0, 1.0)
    return RGB(float(r), float(g), float(b))


class MeanColorEstimator:
    name = "average"

    def __init__(self, grid=64):
        self.grid = int(grid)

    def estimate(self, rgb):
        return grid_mean(rgb, self.grid)
