# visuaid/estimators/registry.py
# Estrategias de color dominante seleccionables por configuración.
from visuaid.estimators.average import MeanColorEstimator
from visuaid.estimators.kmeans import GrayWorldKMeansEstimator
from visuaid.estimators.weighted_hue import WeightedHueEstimator


def _kmeans(ecfg, rcfg):
    return GrayWorldKMeansEstimator(
        roi_size=rcfg.get("size", 120),
        downscale_px=rcfg.get("downscale", 64),
        k=ecfg.get("kmeans_k", 3),
        iterations=ecfg.get("kmeans_iterations", 8),
        gain_epsilon=ecfg.get("gain_epsilon", 1e-6),
        neutral_saturation=ecfg.get("neutral_saturation", 0.35),
        min_neutral_fraction=ecfg.get("min_neutral_fraction", 0.05),
    )


def _weighted_hue(ecfg, rcfg):
    return WeightedHueEstimator(
        roi_fraction=ecfg.get("roi_fraction", 0.6),
        min_saturation=ecfg.get("min_saturation", 0.15),
        min_value=ecfg.get("min_value", 0.10),
        max_value=ecfg.get("max_value", 0.98),
        grid=ecfg.get("grid", 96),
        fallback_grid=ecfg.get("fallback_grid", 64),
    )


def _average(ecfg, rcfg):
    return MeanColorEstimator(grid=ecfg.get("fallback_grid", 64))


ESTIMATORS = {
    "kmeans": _kmeans,
    "weighted_hue": _weighted_hue,
    "average": _average,
}


def build_estimator(name, ecfg, rcfg):
    try:
        factory = ESTIMATORS[name]
    except KeyError:
        raise ValueError(f"Estrategia desconocida: {name!r} (opciones: {sorted(ESTIMATORS)})") from None
    return factory(ecfg, rcfg)
