# visuaid/utils/video_io.py
# Fuente de frames para el CLI: archivo de video o índice de cámara.
import cv2


def _as_source(source):
    # "0", "1"... => índice de cámara
    if isinstance(source, str) and source.isdigit():
        return int(source)
    return source


def open_video_reader(source):
    src = _as_source(source)
    cap = cv2.VideoCapture(src)
    if not cap.isOpened():
        raise RuntimeError(f"No se pudo abrir la fuente de video: {source}")
    w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
    h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    fps = cap.get(cv2.CAP_PROP_FPS) or 30.0  # fallback si FPS=0 (cámaras)
    print(f"[video_io] OK -> source={src} size={w}x{h} fps={fps:.1f}")
    return cap, w, h, fps


def release_safely(cap=None):
    if cap is not None:
        cap.release()
