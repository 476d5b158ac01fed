"""Estabilizador temporal: EMA por canal + histeresis en HSV.

Estados: "uninitialized" -> "tracking" con la primera muestra. En "tracking"
cada muestra actualiza la EMA; el estado aceptado sólo se re-basa cuando el
color suavizado se aleja lo suficiente del ÚLTIMO ACEPTADO (no de la última
muestra cruda). reset() vuelve a "uninitialized".
"""

from visuaid.types import RGB, StabilizedColor
from visuaid.utils.color import clamp, hue_delta, rgb_to_hsv

UNINITIALIZED = "uninitialized"
TRACKING = "tracking"


class TemporalStabilizer:
    def __init__(self, alpha=0.3, hue_threshold=10.0, saturation_threshold=0.08, value_threshold=0.08,
                 hue_min_saturation=0.1):
        if not 0.0 < float(alpha) <= 1.0:
            raise ValueError(f"alpha debe estar en (0, 1] (recibido {alpha})")
        self.alpha = float(alpha)
        self.hue_threshold = float(hue_threshold)
        self.saturation_threshold = float(saturation_threshold)
        self.value_threshold = float(value_threshold)
        self.hue_min_saturation = float(hue_min_saturation)
        self.reset()

    def reset(self):
        self._smoothed = None
        self._accepted = None

    @property
    def state(self):
        return UNINITIALIZED if self._smoothed is None else TRACKING

    @property
    def smoothed(self):
        return self._smoothed

    @property
    def accepted(self):
        return self._accepted

    def smooth(self, rgb):
        if self._smoothed is None:
            # Primera muestra: inicializa sin mezclar
            self._smoothed = RGB(*(clamp(float(c)) for c in rgb))
        else:
            a = self.alpha
            self._smoothed = RGB(*(clamp(a * float(n) + (1.0 - a) * p)
                                   for n, p in zip(rgb, self._smoothed)))
        return self._smoothed

    def is_significant(self, hsv):
        if self._accepted is None:
            return True
        ref = self._accepted.hsv
        # Con saturación baja el tono es ruido del sensor: sólo cuentan s y v
        hue_defined = min(ref.s, hsv.s) >= self.hue_min_saturation
        return ((hue_defined and abs(hue_delta(ref.h, hsv.h)) >= self.hue_threshold)
                or abs(hsv.s - ref.s) >= self.saturation_threshold
                or abs(hsv.v - ref.v) >= self.value_threshold)

    def update(self, rgb):
        """Devuelve el nuevo StabilizedColor si el cambio es significativo, si no None."""
        smoothed = self.smooth(rgb)
        hsv = rgb_to_hsv(*smoothed)
        if not self.is_significant(hsv):
            return None
        self._accepted = StabilizedColor(smoothed, hsv)
        return self._accepted
