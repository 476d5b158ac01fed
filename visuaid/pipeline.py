# -----------------------------------------------------------------------------
# Orquesta el análisis de color por frame:
#   1) Frame (PixelBuffer o array) -> RGB float [0,1]
#   2) Estimador principal (ROI + gray-world + k-means); si no da resultado,
#      estimador de respaldo (tono circular ponderado)
#   3) Estabilizador temporal (EMA + histeresis en HSV)
#   4) Si el cambio se acepta: nombre (paleta ΔE2000 o heurístico)
#   5) Sin repetir el último nombre + debounce -> evento {"name", "rgb", "hsv", "ts"}
# Si una etapa no produce resultado, ese frame no emite nada.
# El estado (EMA, último aceptado, último anuncio) es de esta instancia: un
# solo hilo debe llamar a process_frame (ver visuaid/frame_worker.py).
# -----------------------------------------------------------------------------

import copy
import os
import time

import pandas as pd
import yaml

from visuaid.estimators.registry import build_estimator
from visuaid.naming.palette import build_namer
from visuaid.stabilizers.announce import AnnouncementGate
from visuaid.stabilizers.smoothing import TemporalStabilizer
from visuaid.utils.events import EventLogger
from visuaid.utils.frames import from_bgr_image, to_rgb
from visuaid.utils.video_io import open_video_reader, release_safely

DEFAULT_CONFIG = {
    "roi": {"size": 120, "downscale": 64},
    "estimator": {
        "strategy": "kmeans",
        "fallback": "weighted_hue",
        "kmeans_k": 3,
        "kmeans_iterations": 8,
        "gain_epsilon": 1e-6,
        "neutral_saturation": 0.35,
        "min_neutral_fraction": 0.05,
        "roi_fraction": 0.6,
        "min_saturation": 0.15,
        "min_value": 0.10,
        "max_value": 0.98,
        "grid": 96,
        "fallback_grid": 64,
    },
    "smoothing": {
        "alpha": 0.3,
        "hue_threshold": 10.0,
        "saturation_threshold": 0.08,
        "value_threshold": 0.08,
        "hue_min_saturation": 0.1,
    },
    "announce": {"debounce_seconds": 1.2},
    "naming": {"perceptual": True, "palette": None},
}


def _deep_merge(base, over):
    for k, v in (over or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _load_config(path):
    if not os.path.exists(path):
        raise FileNotFoundError(f"No se encontró el archivo de configuración: {path}")
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if "include" in cfg:
        inc = cfg["include"]
        # Rutas relativas al archivo que incluye; después, al directorio actual
        if not os.path.isabs(inc):
            local = os.path.join(os.path.dirname(path), inc)
            if os.path.exists(local) or not os.path.exists(inc):
                inc = local
        base = _load_config(inc)
        cfg = _deep_merge(base, {k: v for k, v in cfg.items() if k != "include"})
    return cfg


class ColorPipeline:
    def __init__(self, config_path=None, clock=time.monotonic, **overrides):
        cfg = copy.deepcopy(DEFAULT_CONFIG)
        if config_path:
            print(f"[Pipeline] Configuración: {config_path}")
            _deep_merge(cfg, _load_config(config_path))
        # Overrides por sección, p.ej. smoothing={"alpha": 0.5}
        _deep_merge(cfg, overrides)
        self.cfg = cfg

        ecfg, rcfg = cfg["estimator"], cfg["roi"]
        self.estimator = build_estimator(ecfg["strategy"], ecfg, rcfg)
        fb = ecfg.get("fallback")
        self.fallback = build_estimator(fb, ecfg, rcfg) if fb and fb != ecfg["strategy"] else None

        scfg = cfg["smoothing"]
        self.stabilizer = TemporalStabilizer(
            alpha=scfg["alpha"],
            hue_threshold=scfg["hue_threshold"],
            saturation_threshold=scfg["saturation_threshold"],
            value_threshold=scfg["value_threshold"],
            hue_min_saturation=scfg["hue_min_saturation"],
        )
        self.gate = AnnouncementGate(cfg["announce"]["debounce_seconds"], clock=clock)
        # Paleta vacía => ValueError aquí, no en cada frame
        self.namer = build_namer(cfg["naming"])

        self._pending = None
        self.stats = {"frames": 0, "skipped": 0, "fallbacks": 0, "accepted": 0, "emitted": 0}
        print(f"[Pipeline] Estimador: {self.estimator.name} "
              f"(respaldo: {self.fallback.name if self.fallback else 'ninguno'}) | "
              f"Nombres: {type(self.namer).__name__}")

    def reset(self):
        self.stabilizer.reset()
        self.gate.reset()
        self._pending = None

    def estimate(self, rgb):
        if rgb is None:
            return None
        est = self.estimator.estimate(rgb)
        if est is None and self.fallback is not None:
            self.stats["fallbacks"] += 1
            est = self.fallback.estimate(rgb)
        return est

    def process_frame(self, frame, now=None):
        """Procesa un frame y devuelve un evento de color o None."""
        self.stats["frames"] += 1
        est = self.estimate(to_rgb(frame))
        if est is None:
            self.stats["skipped"] += 1
            return None

        accepted = self.stabilizer.update(est)
        if accepted is not None:
            self.stats["accepted"] += 1
            name = self.namer.name(accepted.rgb, accepted.hsv)
            if self.gate.is_repeat(name):
                # Mismo nombre que el último anuncio: se actualiza el estado sin hablar
                self._pending = None
            else:
                # Espera su turno si el debounce lo retiene
                self._pending = (name, accepted)
        if self._pending is None:
            return None

        name, color = self._pending
        now = self.gate.clock() if now is None else now
        if not self.gate.allow(name, now):
            return None
        self._pending = None
        self.stats["emitted"] += 1
        return {
            "name": name,
            "rgb": tuple(color.rgb),
            "hsv": tuple(color.hsv),
            "ts": now,
        }

    def process_video(self, source, output_dir=None, max_frames=None):
        """
        Ejecuta el pipeline sobre un video (o cámara) y devuelve:
          - events_df: DataFrame con los eventos emitidos
          - frames, processing_seconds, processing_fps
        El tiempo del debounce es el del video (frame_idx / fps), no el reloj.
        Si se pasa output_dir, los eventos se escriben también a CSV.
        """
        logger = EventLogger(output_dir) if output_dir else None
        t0 = time.perf_counter()
        cap, w, h, fps = open_video_reader(source)

        events = []
        frame_idx = 0
        try:
            while max_frames is None or frame_idx < max_frames:
                ok, frame = cap.read()
                if not ok:
                    break
                frame_idx += 1
                ev = self.process_frame(from_bgr_image(frame), now=frame_idx / fps)
                if ev is None:
                    continue
                events.append(ev)
                if logger:
                    logger.log(ev)
        finally:
            release_safely(cap)

        processing_seconds = max(0.0, time.perf_counter() - t0)
        df = pd.DataFrame(
            [{"tiempo_seg": e["ts"], "nombre": e["name"],
              "r": e["rgb"][0], "g": e["rgb"][1], "b": e["rgb"][2],
              "h": e["hsv"][0], "s": e["hsv"][1], "v": e["hsv"][2]} for e in events],
            columns=["tiempo_seg", "nombre", "r", "g", "b", "h", "s", "v"],
        )
        return {
            "events_df": df,
            "frames": frame_idx,
            "processing_seconds": processing_seconds,
            "processing_fps": (frame_idx / processing_seconds) if processing_seconds > 0 else 0.0,
            "csv_path": logger.csv_path if logger else None,
        }
