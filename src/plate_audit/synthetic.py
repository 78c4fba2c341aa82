
from typing import Optional, Tuple

import cv2
import numpy as np


def generate_test_image(width: int = 640, height: int = 480,
                        plate: Tuple[int, int, int, int] = (200, 300, 440, 380),
                        text: Optional[str] = '34 ABC 123',
                        background: int = 128, border: int = 2) -> np.ndarray:
    """Synthetic vehicle image: gray body with a white, black-bordered plate.

    `plate` is (x1, y1, x2, y2). Pass text=None for a blank plate.
    """
    image = np.full((height, width, 3), background, dtype=np.uint8)
    x1, y1, x2, y2 = plate
    cv2.rectangle(image, (x1, y1), (x2, y2), (255, 255, 255), -1)
    if border > 0:
        cv2.rectangle(image, (x1, y1), (x2, y2), (0, 0, 0), border)
    if text:
        font_scale = (y2 - y1) / 65.0
        (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 2)
        max_tw = 0.9 * (x2 - x1)
        if tw > max_tw:
            # shrink to fit the plate width
            font_scale *= max_tw / tw
            (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 2)
        org = (x1 + max(4, ((x2 - x1) - tw) // 2), y1 + ((y2 - y1) + th) // 2)
        cv2.putText(image, text, org, cv2.FONT_HERSHEY_SIMPLEX, font_scale, (0, 0, 0), 2)
    return image


def write_test_image(output_path: str, **kwargs) -> bool:
    return bool(cv2.imwrite(output_path, generate_test_image(**kwargs)))
