#!/usr/bin/env python
"""Ejecución por CLI del pipeline de color sobre un video o una cámara.

Uso:
  python scripts/run_pipeline.py --input data/samples/video.mp4 \
      --config config/default.yaml --output data/output

  python scripts/run_pipeline.py --input 0 --max-frames 300   # cámara 0
"""

import argparse

from visuaid.pipeline import ColorPipeline


def main():
    p = argparse.ArgumentParser()
    p.add_argument('--input', required=True, help='Ruta del video o índice de cámara')
    p.add_argument('--config', default=None, help='YAML de configuración (por defecto: valores internos)')
    p.add_argument('--output', default=None, help='Directorio donde escribir color_events.csv')
    p.add_argument('--max-frames', type=int, default=None)
    p.add_argument('--heuristic', action='store_true', help='Usar nombres heurísticos en vez de la paleta')
    args = p.parse_args()

    overrides = {"naming": {"perceptual": False}} if args.heuristic else {}
    pipe = ColorPipeline(args.config, **overrides)
    res = pipe.process_video(args.input, output_dir=args.output, max_frames=args.max_frames)
    df = res['events_df']
    print(f"OK. Frames: {res['frames']} ({res['processing_fps']:.1f} fps)")
    print('Colores anunciados:', len(df))
    if len(df):
        print(df[['tiempo_seg', 'nombre']].to_string(index=False))
    if res['csv_path']:
        print('CSV:', res['csv_path'])


if __name__ == '__main__':
    main()
