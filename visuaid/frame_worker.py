"""Ejecución en segundo plano con política "sólo el último frame".

La cámara puede entregar frames más rápido de lo que se procesan. FrameWorker
es el único escritor del estado del pipeline: un hilo toma el frame más
reciente y llama a process_frame. Los frames que llegan mientras hay uno
pendiente lo reemplazan (se descartan, nunca se encolan).
"""

import queue
import threading


class LatestQueue:
    def __init__(self):
        self.q = queue.Queue(maxsize=1)
        self.lock = threading.Lock()
        self.dropped = 0

    def put_latest(self, item):
        with self.lock:
            if self.q.full():
                try:
                    self.q.get_nowait()
                    self.dropped += 1
                except queue.Empty:
                    pass
            self.q.put_nowait(item)

    def get_or_none(self, timeout=None):
        try:
            return self.q.get(timeout=timeout)
        except queue.Empty:
            return None


class FrameWorker:
    def __init__(self, pipeline, on_event=None, poll_seconds=0.05):
        self.pipeline = pipeline
        self.on_event = on_event
        self.poll_seconds = poll_seconds
        self.frames = LatestQueue()
        self.processed = 0
        self.errors = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._idle = threading.Event()
        self._idle.set()
        self._thread = None

    @property
    def dropped(self):
        return self.frames.dropped

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="FrameWorker", daemon=True)
        self._thread.start()
        print("[FrameWorker] Iniciado")

    def submit(self, frame):
        """No bloquea: si hay un frame pendiente, se reemplaza."""
        with self._lock:
            self.frames.put_latest(frame)
            self._idle.clear()

    def wait_idle(self, timeout=None):
        """Espera a que no queden frames pendientes ni en proceso."""
        return self._idle.wait(timeout)

    def stop(self, timeout=2.0):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        print(f"[FrameWorker] Detenido (procesados={self.processed}, descartados={self.dropped})")

    def _run(self):
        while not self._stop.is_set():
            frame = self.frames.get_or_none(timeout=self.poll_seconds)
            if frame is None:
                with self._lock:
                    if self.frames.q.empty():
                        self._idle.set()
                continue
            try:
                event = self.pipeline.process_frame(frame)
                if event is not None and self.on_event is not None:
                    self.on_event(event)
            except Exception as e:
                # Un frame defectuoso no debe detener el hilo
                self.errors += 1
                print(f"[FrameWorker] Error procesando frame: {e}")
            finally:
                self.processed += 1
