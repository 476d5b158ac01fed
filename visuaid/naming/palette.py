"""Nombres de color: paleta de referencia + ΔE2000, y clasificador heurístico.

- PaletteNamer: convierte la paleta a Lab una sola vez y resuelve cualquier RGB
  al nombre con menor ΔE2000 (empates: gana el primero en la paleta).
- descriptive_name: heurística por sectores de tono + calificador de brillo /
  saturación. No necesita paleta; se usa cuando el namer perceptual está
  desactivado.
"""

from visuaid.types import HSV, NamedColor, RGB
from visuaid.utils.color import delta_e2000, rgb_to_hsv, rgb_to_lab

REFERENCE_PALETTE = (
    # Neutros
    NamedColor("Negro", RGB(0.02, 0.02, 0.02)),
    NamedColor("Blanco", RGB(0.98, 0.98, 0.98)),
    NamedColor("Gris", RGB(0.50, 0.50, 0.50)),
    NamedColor("Gris claro", RGB(0.75, 0.75, 0.75)),
    NamedColor("Gris oscuro", RGB(0.25, 0.25, 0.25)),
    # Rojos / Naranjas / Amarillos
    NamedColor("Rojo", RGB(0.90, 0.10, 0.10)),
    NamedColor("Rojo oscuro", RGB(0.55, 0.05, 0.05)),
    NamedColor("Naranja", RGB(0.95, 0.55, 0.10)),
    NamedColor("Amarillo", RGB(0.95, 0.90, 0.10)),
    # Verdes / Cian
    NamedColor("Verde", RGB(0.10, 0.75, 0.20)),
    NamedColor("Verde oscuro", RGB(0.05, 0.40, 0.10)),
    NamedColor("Cian", RGB(0.10, 0.80, 0.85)),
    NamedColor("Turquesa", RGB(0.18, 0.70, 0.60)),
    # Azules / Violetas
    NamedColor("Azul", RGB(0.10, 0.35, 0.90)),
    NamedColor("Azul marino", RGB(0.05, 0.10, 0.35)),
    NamedColor("Índigo", RGB(0.25, 0.20, 0.55)),
    NamedColor("Violeta", RGB(0.60, 0.30, 0.85)),
    NamedColor("Magenta", RGB(0.85, 0.20, 0.75)),
    NamedColor("Rosa", RGB(0.95, 0.55, 0.80)),
    # Marrones / Beige
    NamedColor("Marrón", RGB(0.45, 0.25, 0.10)),
    NamedColor("Beige", RGB(0.88, 0.80, 0.65)),
)

# (limite superior exclusivo en grados, nombre). Rojo envuelve 345..360 / 0..15.
HUE_SECTORS = (
    (15.0, "Rojo"),
    (45.0, "Naranja"),
    (65.0, "Amarillo"),
    (170.0, "Verde"),
    (200.0, "Cian"),
    (255.0, "Azul"),
    (290.0, "Índigo"),
    (345.0, "Magenta"),
    (360.0, "Rojo"),
)


def palette_from_config(entries):
    """[{name, rgb:[r,g,b]}] -> tupla de NamedColor."""
    return tuple(NamedColor(str(e["name"]), RGB(*map(float, e["rgb"]))) for e in entries)


class PaletteNamer:
    def __init__(self, palette=REFERENCE_PALETTE):
        palette = tuple(palette)
        # Paleta vacía o con nombres repetidos = error de configuración
        if not palette:
            raise ValueError("La paleta de referencia está vacía")
        names = [c.name for c in palette]
        if len(set(names)) != len(names):
            raise ValueError(f"Nombres repetidos en la paleta: {names}")
        self.palette = palette
        self._labs = [(c.name, rgb_to_lab(*c.rgb)) for c in palette]

    def nearest(self, rgb):
        """Devuelve (nombre, ΔE2000) del color de paleta más cercano."""
        target = rgb_to_lab(*rgb)
        best_name, best_de = None, float("inf")
        for name, lab in self._labs:
            de = delta_e2000(target, lab)
            if de < best_de:
                best_name, best_de = name, de
        return best_name, best_de

    def nearest_name(self, rgb):
        return self.nearest(rgb)[0]

    def name(self, rgb, hsv=None):
        return self.nearest_name(rgb)


def _hue_name(h):
    h = h % 360.0
    for upper, name in HUE_SECTORS:
        if h < upper:
            return name
    return "Rojo"


def descriptive_name(hsv: HSV) -> str:
    h, s, v = hsv
    if v < 0.25:
        qualifier = "muy oscuro"
    elif v < 0.5:
        qualifier = "oscuro"
    elif v > 0.85 and s < 0.25:
        qualifier = "muy claro"
    elif v > 0.75:
        qualifier = "claro"
    elif s < 0.2:
        qualifier = "apagado"
    else:
        qualifier = ""
    hue = _hue_name(h)
    return f"{hue} {qualifier}" if qualifier else hue


class DescriptiveNamer:
    """Namer heurístico sin paleta (misma interfaz que PaletteNamer)."""

    def name(self, rgb, hsv=None):
        return descriptive_name(hsv if hsv is not None else rgb_to_hsv(*rgb))


def build_namer(ncfg):
    if not ncfg.get("perceptual", True):
        return DescriptiveNamer()
    entries = ncfg.get("palette")
    if entries is None:
        return PaletteNamer()
    return PaletteNamer(palette_from_config(entries))
