# test/test_frame_worker.py
import numpy as np

from visuaid.frame_worker import FrameWorker, LatestQueue
from visuaid.pipeline import ColorPipeline


def test_latest_queue_keeps_only_newest():
    q = LatestQueue()
    for i in range(3):
        q.put_latest(i)
    assert q.dropped == 2
    assert q.get_or_none(timeout=0) == 2
    assert q.get_or_none(timeout=0) is None


def test_worker_processes_frames_and_emits_events():
    events = []
    worker = FrameWorker(ColorPipeline(), on_event=events.append)
    worker.start()
    try:
        worker.submit(np.tile(np.array([0.9, 0.1, 0.1], dtype=np.float32), (200, 200, 1)))
        assert worker.wait_idle(timeout=5.0)
    finally:
        worker.stop()
    assert [e["name"] for e in events] == ["Rojo"]
    assert worker.processed == 1


class ExplodingPipeline:
    def __init__(self):
        self.calls = 0

    def process_frame(self, frame):
        self.calls += 1
        if frame == "malo":
            raise RuntimeError("boom")
        return {"name": frame}


def test_worker_survives_frame_errors():
    events = []
    pipe = ExplodingPipeline()
    worker = FrameWorker(pipe, on_event=events.append)
    worker.start()
    try:
        worker.submit("malo")
        assert worker.wait_idle(timeout=5.0)
        worker.submit("bueno")
        assert worker.wait_idle(timeout=5.0)
    finally:
        worker.stop()
    assert worker.errors == 1
    assert events == [{"name": "bueno"}]
