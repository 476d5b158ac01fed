# visuaid/types.py
# Tipos simples. Los colores son NamedTuple (inmutables); los eventos siguen
# siendo dicts, igual que en el resto del pipeline.
from typing import Any, Dict, NamedTuple


class RGB(NamedTuple):
    r: float  # 0..1
    g: float
    b: float


class HSV(NamedTuple):
    h: float  # 0..360 (circular)
    s: float  # 0..1
    v: float  # 0..1


class Lab(NamedTuple):
    L: float
    a: float
    b: float


class NamedColor(NamedTuple):
    name: str
    rgb: RGB


class StabilizedColor(NamedTuple):
    rgb: RGB
    hsv: HSV


ColorEvent = Dict[str, Any]   # {"name":str, "rgb":(r,g,b), "hsv":(h,s,v), "ts":float}
