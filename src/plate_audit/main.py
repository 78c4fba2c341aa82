
import argparse
import logging
import os
import sys

import cv2

from .engine import DetectionEngine
from .params import ParameterSet
from .resources import default_cascade_path
from .synthetic import write_test_image
from .visualize import draw_contours, draw_detections, save_artifacts, save_crops

logger = logging.getLogger('plate_audit')


def build_params(args) -> ParameterSet:
    return ParameterSet(
        blur_kernel=args.blur,
        canny_threshold1=args.canny1,
        canny_threshold2=args.canny2,
        dilate_kernel_size=args.dilate_kernel,
        dilate_iterations=args.dilate_iterations,
        min_aspect_ratio=args.min_ar,
        max_aspect_ratio=args.max_ar,
        haar_scale_factor=args.scale_factor,
        haar_min_neighbors=args.min_neighbors,
    )


def run_single_image(image_path, params, cascade_path=None, save_debug=None, annotate=None, crops_dir=None):
    """Detect plates in one image file. Returns the DetectionContext, or None if unreadable."""
    if not os.path.exists(image_path):
        print('Image file not found:', image_path)
        print('Generating a synthetic test image...')
        if not write_test_image(image_path):
            print('Could not generate test image at', image_path)
            return None

    image = cv2.imread(image_path)
    if image is None:
        print('Failed to read', image_path)
        return None

    engine = DetectionEngine(cascade_path=cascade_path)
    ctx = engine.detect(image, params)
    name = os.path.splitext(os.path.basename(image_path))[0]

    if not ctx.found:
        print('No plate found for', image_path)
    for i, c in enumerate(ctx.candidates):
        tag = ' [HIGH CONF]' if ctx.is_high_confidence(c) else ''
        x, y, w, h = c.bounds
        print(f'{i}: {c.method.display_name:<18} x={x} y={y} w={w} h={h} AR={c.bounds.aspect_ratio:.2f}{tag}')
    print(ctx.stats)

    if save_debug and ctx.artifacts is not None:
        save_artifacts(ctx.artifacts, save_debug, prefix=name)
        cv2.imwrite(os.path.join(save_debug, f'{name}_contours.jpg'), draw_contours(ctx.artifacts.dilated, ctx.candidates))
        print('Saved debug images to', save_debug)
    if annotate:
        out_dir = os.path.dirname(annotate)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        cv2.imwrite(annotate, draw_detections(image, ctx.candidates, ctx.high_confidence))
        print('Saved visualization to', annotate)
    if crops_dir:
        for path in save_crops(ctx.candidates, crops_dir, prefix=name).values():
            print('Saved crop:', path)
    return ctx


def parse_args(argv=None):
    defaults = ParameterSet()
    parser = argparse.ArgumentParser(description='Dual-detection license plate localizer (Haar + geometric)')
    parser.add_argument('--input', required=True, help='Path to input image (a synthetic one is written if missing)')
    parser.add_argument('--cascade', default=None, help='Path to Haar cascade XML (default: OpenCV bundled plate cascade)')
    parser.add_argument('--no-cascade', action='store_true', help='Run geometric detection only')
    parser.add_argument('--blur', type=int, default=defaults.blur_kernel, help='Bilateral filter window (forced odd)')
    parser.add_argument('--canny1', type=int, default=defaults.canny_threshold1, help='Canny low threshold')
    parser.add_argument('--canny2', type=int, default=defaults.canny_threshold2, help='Canny high threshold')
    parser.add_argument('--dilate-kernel', type=int, default=defaults.dilate_kernel_size, help='Dilation kernel size (forced odd)')
    parser.add_argument('--dilate-iterations', type=int, default=defaults.dilate_iterations)
    parser.add_argument('--min-ar', type=float, default=defaults.min_aspect_ratio, help='Minimum plate aspect ratio')
    parser.add_argument('--max-ar', type=float, default=defaults.max_aspect_ratio, help='Maximum plate aspect ratio')
    parser.add_argument('--scale-factor', type=float, default=defaults.haar_scale_factor, help='Haar scale factor (> 1.0)')
    parser.add_argument('--min-neighbors', type=int, default=defaults.haar_min_neighbors, help='Haar min neighbors')
    parser.add_argument('--save-debug', default=None, help='Directory for preprocessing step images')
    parser.add_argument('--annotate', default=None, help='Path for the annotated output image')
    parser.add_argument('--save-crops', default=None, help='Directory to save plate crops (optional)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    try:
        params = build_params(args)
    except ValueError as e:
        print('Invalid parameters:', e)
        return 2

    cascade_path = None if args.no_cascade else (args.cascade or default_cascade_path())
    if cascade_path is None and not args.no_cascade:
        logger.warning('No plate cascade bundled with this OpenCV build, pass --cascade to enable Haar detection')
    ctx = run_single_image(args.input, params, cascade_path, args.save_debug, args.annotate, args.save_crops)
    return 1 if ctx is None or ctx.error else 0


if __name__ == '__main__':
    sys.exit(main())
