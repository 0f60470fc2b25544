"""
RGBA Image Buffer

Opaque width/height/channel pixel grid consumed by every clustering engine.
Pixels are stored row-major with 4 channels; alpha is carried but ignored
by clustering.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np

from .errors import InvalidParameter


CHANNELS = 4
"""Channels stored per pixel (R, G, B, A)."""


def _as_channel_bytes(values) -> np.ndarray:
    """
    Channel values as uint8.

    Raises:
        InvalidParameter: If any value is fractional, NaN or outside [0, 255]
    """
    values = np.asarray(values)
    if values.dtype == np.uint8:
        return values

    if not (np.issubdtype(values.dtype, np.integer)
            or np.issubdtype(values.dtype, np.floating)):
        raise InvalidParameter(f"Pixel data must be numeric, got dtype {values.dtype}")

    if np.issubdtype(values.dtype, np.floating) and not np.all(values == np.floor(values)):
        raise InvalidParameter("Pixel data must hold whole channel values")

    if values.size and (values.min() < 0 or values.max() > 255):
        raise InvalidParameter(
            f"Channel values must be in [0, 255], got range "
            f"[{values.min()}, {values.max()}]"
        )

    return values.astype(np.uint8)


@dataclass(frozen=True, eq=False)
class ImageBuffer:
    """
    Flat RGBA pixel buffer.

    Attributes:
        width: Image width in pixels (> 0)
        height: Image height in pixels (> 0)
        data: Flat uint8 array of length width * height * 4

    Example:
        >>> image = np.zeros((10, 10, 3), dtype=np.uint8)
        >>> buffer = ImageBuffer.from_array(image)
        >>> buffer.n_pixels
        100
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        """Validate buffer dimensions against the data length."""
        if self.data is None:
            raise InvalidParameter("Image buffer has no pixel data")
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidParameter(
                    f"{name} must be an integer, got {type(value).__name__}"
                )
        if self.width <= 0 or self.height <= 0:
            raise InvalidParameter(
                f"Image dimensions must be positive, got "
                f"width={self.width}, height={self.height}"
            )

        data = np.asarray(self.data).reshape(-1)
        expected = self.width * self.height * CHANNELS
        if data.size != expected:
            raise InvalidParameter(
                f"Buffer length {data.size} doesn't match "
                f"{self.width}x{self.height}x{CHANNELS} = {expected}"
            )

        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, 'data', _as_channel_bytes(data))

    @classmethod
    def from_array(cls, image: np.ndarray) -> 'ImageBuffer':
        """
        Build a buffer from an (H, W, 3) or (H, W, 4) array.

        RGB input gets a fully opaque alpha channel.

        Args:
            image: Image array with values in [0, 255]

        Returns:
            buffer: ImageBuffer wrapping a copy of the pixels

        Raises:
            InvalidParameter: If the array is not (H, W, 3) or (H, W, 4), or
                holds values that are not whole numbers in [0, 255]
        """
        image = np.asarray(image)
        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise InvalidParameter(
                f"Image must be (H, W, 3) or (H, W, 4), got shape {image.shape}"
            )

        h, w, c = image.shape
        rgba = np.full((h, w, CHANNELS), 255, dtype=np.uint8)
        rgba[:, :, :c] = _as_channel_bytes(image)

        return cls(width=w, height=h, data=rgba.reshape(-1))

    @property
    def n_pixels(self) -> int:
        """Total number of pixels (width * height)."""
        return self.width * self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """Image dimensions as (H, W)."""
        return (self.height, self.width)

    def rgb(self) -> np.ndarray:
        """
        Color vectors of every pixel, alpha dropped.

        Returns:
            pixels: float64 array of shape (N, 3), N = width * height
        """
        return self.data.reshape(-1, CHANNELS)[:, :3].astype(np.float64)

    def to_array(self) -> np.ndarray:
        """Pixels as an (H, W, 4) uint8 array."""
        return self.data.reshape(self.height, self.width, CHANNELS)
