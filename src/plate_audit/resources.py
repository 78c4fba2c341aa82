
import logging
import os
from pathlib import Path
from typing import Optional

import cv2
import requests

logger = logging.getLogger(__name__)

CASCADE_FILENAME = 'haarcascade_russian_plate_number.xml'
CASCADE_URL = ('https://raw.githubusercontent.com/opencv/opencv/4.x/data/haarcascades/'
               + CASCADE_FILENAME)


def default_cascade_path() -> Optional[str]:
    """Plate cascade bundled with opencv-python, or None if this build lacks it."""
    data_dir = getattr(getattr(cv2, 'data', None), 'haarcascades', None)
    if not data_dir:
        return None
    path = os.path.join(data_dir, CASCADE_FILENAME)
    return path if os.path.exists(path) else None


def download_cascade(url: str = CASCADE_URL, dest: str = str(Path('models') / CASCADE_FILENAME),
                     timeout: float = 30.0) -> Path:
    """Stream a cascade XML from `url` to `dest`.

    The body goes to `<dest>.part` and is renamed over `dest` on success. A
    failed transfer removes the partial file. Raises requests.RequestException.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_suffix(dest.suffix + '.part')

    logger.info('Downloading cascade from %s -> %s', url, dest)
    try:
        with requests.get(url, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            with open(tmp, 'wb') as f:
                for chunk in r.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)
        tmp.replace(dest)
    except BaseException:
        if tmp.exists():
            tmp.unlink()
        raise
    return dest
