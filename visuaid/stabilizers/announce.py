# visuaid/stabilizers/announce.py
# Debounce + deduplicado a nivel de nombre: no repetir el último nombre
# anunciado (is_repeat) y dejar al menos `debounce_seconds` entre anuncios
# (tanto repetidos como cambios).
import time


class AnnouncementGate:
    def __init__(self, debounce_seconds=1.2, clock=time.monotonic):
        if float(debounce_seconds) < 0:
            raise ValueError(f"debounce_seconds debe ser >= 0 (recibido {debounce_seconds})")
        self.min_gap = float(debounce_seconds)
        self.clock = clock
        self.reset()

    def reset(self):
        self.last_name = None
        self.last_ts = None

    def is_repeat(self, name):
        """True si `name` es el último nombre anunciado."""
        return self.last_name is not None and name == self.last_name

    def allow(self, name, now=None):
        """True (y registra el anuncio) si `name` puede emitirse ahora."""
        now = self.clock() if now is None else now
        if self.last_ts is not None and now - self.last_ts < self.min_gap:
            return False
        self.last_name = name
        self.last_ts = now
        return True
