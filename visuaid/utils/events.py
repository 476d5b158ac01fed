# -----------------------------------------------------------------------------
# EventLogger:
# - CSV con encabezados en ESPAÑOL:
#   fecha_hora, tiempo_seg, nombre, r, g, b, h, s, v
# - Una fila por cada color anunciado por el pipeline (modo lote / CLI).
# -----------------------------------------------------------------------------

import csv
import os
from datetime import datetime

HEADERS = ["fecha_hora", "tiempo_seg", "nombre", "r", "g", "b", "h", "s", "v"]


class EventLogger:
    def __init__(self, output_dir="data/output", filename="color_events.csv"):
        self.output_dir = output_dir
        os.makedirs(self.output_dir, exist_ok=True)
        self.csv_path = os.path.join(self.output_dir, filename)
        self._init_csv()

    def _init_csv(self):
        # Si no existe o está vacío, crea CSV con encabezados
        if not os.path.exists(self.csv_path) or os.path.getsize(self.csv_path) == 0:
            with open(self.csv_path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow(HEADERS)

    def log(self, event):
        now = datetime.now().isoformat(timespec="seconds")
        r, g, b = event["rgb"]
        h, s, v = event["hsv"]
        with open(self.csv_path, "a", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow([
                now, f"{event['ts']:.3f}", event["name"],
                f"{r:.4f}", f"{g:.4f}", f"{b:.4f}",
                f"{h:.2f}", f"{s:.4f}", f"{v:.4f}",
            ])
