# test/test_palette.py
import pytest

from visuaid.naming.palette import (
    REFERENCE_PALETTE, DescriptiveNamer, PaletteNamer, build_namer, descriptive_name,
)
from visuaid.types import HSV, NamedColor, RGB


def test_reference_palette_names_are_unique():
    names = [c.name for c in REFERENCE_PALETTE]
    assert len(names) == len(set(names)) == 21


def test_each_palette_entry_resolves_to_itself():
    namer = PaletteNamer()
    for c in REFERENCE_PALETTE:
        assert namer.nearest_name(c.rgb) == c.name


def test_bright_red_is_rojo():
    name, de = PaletteNamer().nearest(RGB(0.9, 0.1, 0.1))
    assert name == "Rojo"
    assert de == pytest.approx(0.0, abs=1e-9)


def test_empty_palette_fails_fast():
    with pytest.raises(ValueError):
        PaletteNamer(())


def test_duplicate_names_fail_fast():
    with pytest.raises(ValueError):
        PaletteNamer([NamedColor("A", RGB(0, 0, 0)), NamedColor("A", RGB(1, 1, 1))])


def test_ties_go_to_first_entry():
    palette = [NamedColor("Primero", RGB(0.2, 0.4, 0.6)), NamedColor("Segundo", RGB(0.2, 0.4, 0.6))]
    assert PaletteNamer(palette).nearest_name(RGB(0.25, 0.4, 0.6)) == "Primero"


@pytest.mark.parametrize("hsv, expected", [
    (HSV(0.0, 0.9, 0.6), "Rojo"),
    (HSV(350.0, 0.9, 0.6), "Rojo"),
    (HSV(359.99, 0.9, 0.6), "Rojo"),
    (HSV(30.0, 0.9, 0.6), "Naranja"),
    (HSV(55.0, 0.9, 0.6), "Amarillo"),
    (HSV(185.0, 0.9, 0.6), "Cian"),
    (HSV(270.0, 0.9, 0.6), "Índigo"),
    (HSV(220.0, 0.9, 0.2), "Azul muy oscuro"),
    (HSV(120.0, 0.9, 0.4), "Verde oscuro"),
    (HSV(120.0, 0.1, 0.95), "Verde muy claro"),
    (HSV(120.0, 0.9, 0.8), "Verde claro"),
    (HSV(300.0, 0.1, 0.6), "Magenta apagado"),
])
def test_descriptive_name(hsv, expected):
    assert descriptive_name(hsv) == expected


def test_build_namer_from_config():
    assert isinstance(build_namer({"perceptual": False}), DescriptiveNamer)
    namer = build_namer({"perceptual": True, "palette": [
        {"name": "Claro", "rgb": [0.9, 0.9, 0.9]},
        {"name": "Oscuro", "rgb": [0.1, 0.1, 0.1]},
    ]})
    assert namer.name(RGB(0.8, 0.8, 0.8)) == "Claro"
    with pytest.raises(ValueError):
        build_namer({"perceptual": True, "palette": []})
