
import dataclasses
from dataclasses import dataclass


def make_odd(k: int) -> int:
    """Force a kernel size to a positive odd value (even sizes are bumped by one)."""
    k = max(1, int(k))
    return k if k % 2 == 1 else k + 1


@dataclass(frozen=True)
class ParameterSet:
    """Tunable parameters for one detection pass.

    Defaults match the values the tuning tool ships with. Kernel sizes may be
    given even; the effective_* properties return the odd size actually used.
    """
    blur_kernel: int = 11
    canny_threshold1: int = 50
    canny_threshold2: int = 150
    dilate_kernel_size: int = 3
    dilate_iterations: int = 2
    min_aspect_ratio: float = 2.0
    max_aspect_ratio: float = 7.0
    haar_scale_factor: float = 1.1
    haar_min_neighbors: int = 3

    def __post_init__(self):
        if self.blur_kernel < 1:
            raise ValueError(f'blur_kernel must be >= 1, got {self.blur_kernel}')
        if self.dilate_kernel_size < 1:
            raise ValueError(f'dilate_kernel_size must be >= 1, got {self.dilate_kernel_size}')
        if self.canny_threshold1 < 0 or self.canny_threshold2 < 0:
            raise ValueError('Canny thresholds must be non-negative')
        if self.dilate_iterations < 0:
            raise ValueError(f'dilate_iterations must be >= 0, got {self.dilate_iterations}')
        if self.min_aspect_ratio <= 0 or self.min_aspect_ratio >= self.max_aspect_ratio:
            raise ValueError(
                f'Aspect ratio band must satisfy 0 < min < max, got '
                f'[{self.min_aspect_ratio}, {self.max_aspect_ratio}]')
        if self.haar_scale_factor <= 1.0:
            raise ValueError(f'haar_scale_factor must be > 1.0, got {self.haar_scale_factor}')
        if self.haar_min_neighbors < 0:
            raise ValueError(f'haar_min_neighbors must be >= 0, got {self.haar_min_neighbors}')

    @property
    def effective_blur_kernel(self) -> int:
        return make_odd(self.blur_kernel)

    @property
    def effective_dilate_kernel(self) -> int:
        return make_odd(self.dilate_kernel_size)

    def aspect_ratio_in_band(self, ratio: float) -> bool:
        return self.min_aspect_ratio <= ratio <= self.max_aspect_ratio

    def replace(self, **changes) -> 'ParameterSet':
        """Return a copy with some fields changed; used between passes."""
        return dataclasses.replace(self, **changes)


DEFAULT_PARAMS = ParameterSet()
