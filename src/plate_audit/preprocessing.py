
import logging
from dataclasses import dataclass

import cv2
import numpy as np

from .errors import InvalidInputError
from .params import ParameterSet

logger = logging.getLogger(__name__)

# Fixed stages, not exposed as tuning parameters
CLAHE_CLIP_LIMIT = 2.0
CLAHE_TILE_GRID = (8, 8)
BILATERAL_SIGMA_COLOR = 17
BILATERAL_SIGMA_SPACE = 17
CLOSE_KERNEL_SIZE = (21, 5)  # (width, height)


@dataclass
class PreprocessingArtifacts:
    """Single-channel buffers produced by one preprocess() call, in pipeline order."""
    gray: np.ndarray
    enhanced: np.ndarray
    filtered: np.ndarray
    edges: np.ndarray
    closed: np.ndarray
    dilated: np.ndarray

    def as_dict(self):
        return {
            'gray': self.gray,
            'enhanced': self.enhanced,
            'filtered': self.filtered,
            'edges': self.edges,
            'closed': self.closed,
            'dilated': self.dilated,
        }


def validate_image(image) -> None:
    """Raise InvalidInputError unless `image` is a non-empty 3-channel 8-bit buffer."""
    if image is None:
        raise InvalidInputError('No image supplied')
    if not isinstance(image, np.ndarray):
        raise InvalidInputError(f'Expected a numpy array, got {type(image).__name__}')
    if image.size == 0 or image.ndim != 3 or image.shape[2] != 3:
        raise InvalidInputError(f'Expected a non-empty HxWx3 image, got shape {image.shape}')
    if image.dtype != np.uint8:
        raise InvalidInputError(f'Expected an 8-bit image, got dtype {image.dtype}')


def preprocess(image: np.ndarray, params: ParameterSet) -> PreprocessingArtifacts:
    """Run the full preprocessing pipeline on a BGR image.

    grayscale -> CLAHE -> bilateral filter -> Canny -> closing -> dilation.
    Every stage works on a copy; the input image is left untouched.
    """
    validate_image(image)

    # Grayscale
    gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

    # CLAHE (Contrast Limited Adaptive Histogram Equalization) for uneven lighting
    clahe = cv2.createCLAHE(clipLimit=CLAHE_CLIP_LIMIT, tileGridSize=CLAHE_TILE_GRID)
    enhanced = clahe.apply(gray)

    # Edge-preserving smoothing, keeps the plate border sharp
    blur_kernel = params.effective_blur_kernel
    filtered = cv2.bilateralFilter(enhanced, blur_kernel, BILATERAL_SIGMA_COLOR, BILATERAL_SIGMA_SPACE)

    edges = cv2.Canny(filtered, params.canny_threshold1, params.canny_threshold2)

    # Wide, short element bridges the gaps between character strokes
    close_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, CLOSE_KERNEL_SIZE)
    closed = cv2.morphologyEx(edges, cv2.MORPH_CLOSE, close_kernel)

    dilate_kernel = params.effective_dilate_kernel
    kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (dilate_kernel, dilate_kernel))
    dilated = cv2.dilate(closed, kernel, iterations=params.dilate_iterations)

    logger.debug('Preprocessed %dx%d image: blur=%d canny=%d-%d dilate=%dx%d',
                 image.shape[1], image.shape[0], blur_kernel,
                 params.canny_threshold1, params.canny_threshold2,
                 dilate_kernel, params.dilate_iterations)

    return PreprocessingArtifacts(
        gray=gray,
        enhanced=enhanced,
        filtered=filtered,
        edges=edges,
        closed=closed,
        dilated=dilated,
    )
