import os

import cv2

from plate_audit.main import main, parse_args, build_params


def test_parse_args_defaults():
    args = parse_args(['--input', 'car.jpg'])
    params = build_params(args)
    assert params.blur_kernel == 11
    assert (params.canny_threshold1, params.canny_threshold2) == (50, 150)
    assert args.cascade is None and not args.no_cascade


def test_main_generates_missing_input(tmp_path, capsys):
    image_path = str(tmp_path / 'car.jpg')
    debug_dir = str(tmp_path / 'debug')
    annotated = str(tmp_path / 'out' / 'annotated.jpg')
    crops = str(tmp_path / 'crops')

    rc = main(['--input', image_path, '--no-cascade', '--save-debug', debug_dir,
               '--annotate', annotated, '--save-crops', crops])
    assert rc == 0
    assert os.path.exists(image_path)
    assert os.path.exists(os.path.join(debug_dir, 'car_step4_canny.jpg'))
    assert os.path.exists(os.path.join(debug_dir, 'car_contours.jpg'))
    assert cv2.imread(annotated).shape == (480, 640, 3)
    out = capsys.readouterr().out
    assert 'Generating a synthetic test image' in out
    assert 'Haar: 0 |' in out


def test_main_on_existing_image(tmp_path, plate_image, capsys):
    image_path = str(tmp_path / 'plate.png')
    cv2.imwrite(image_path, plate_image)
    assert main(['--input', image_path, '--no-cascade']) == 0
    out = capsys.readouterr().out
    assert 'Geometric/Contour' in out
    assert 'Haar: 0 | Geo: 1 | Overlap: 0' in out


def test_main_unreadable_image(tmp_path, capsys):
    image_path = tmp_path / 'broken.jpg'
    image_path.write_bytes(b'not an image')
    assert main(['--input', str(image_path), '--no-cascade']) == 1
    assert 'Failed to read' in capsys.readouterr().out


def test_main_invalid_params(tmp_path):
    assert main(['--input', str(tmp_path / 'x.jpg'), '--min-ar', '8', '--max-ar', '2']) == 2
