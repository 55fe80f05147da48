"""Loading of MNIST-style IDX image and label files."""

from __future__ import annotations

import struct
from pathlib import Path

import numpy as np

TRAINING_IMAGES = "data/train-images.idx3-ubyte"
TRAINING_LABELS = "data/train-labels.idx1-ubyte"
TESTING_IMAGES = "data/t10k-images.idx3-ubyte"
TESTING_LABELS = "data/t10k-labels.idx1-ubyte"

IMAGE_MAGIC = 2051
LABEL_MAGIC = 2049
_IMAGE_HEADER = struct.Struct(">IIII")
_LABEL_HEADER = struct.Struct(">II")


class MnistFormatError(ValueError):
    """Raised when an image or label file is not valid IDX data."""


class ImageSet:
    """Images scaled to [0, 1] with shape (channels, rows, cols), and their labels."""

    channels = 1

    def __init__(self, image_path, label_path, limit=None):
        image_data = Path(image_path).read_bytes()
        label_data = Path(label_path).read_bytes()
        if len(image_data) < _IMAGE_HEADER.size or len(label_data) < _LABEL_HEADER.size:
            raise MnistFormatError("file too short to hold an IDX header")

        image_magic, image_count, rows, cols = _IMAGE_HEADER.unpack_from(image_data)
        label_magic, label_count = _LABEL_HEADER.unpack_from(label_data)
        if image_magic != IMAGE_MAGIC or label_magic != LABEL_MAGIC:
            raise MnistFormatError("Invalid MNIST magic numbers")
        if image_count != label_count:
            raise MnistFormatError("Mismatch in image and label count")

        count = image_count if limit is None else limit
        if count < 0:
            raise ValueError("limit must not be negative")
        pixels_per_image = self.channels * rows * cols
        needed_pixels = count * pixels_per_image
        if (
            len(image_data) - _IMAGE_HEADER.size < needed_pixels
            or len(label_data) - _LABEL_HEADER.size < count
        ):
            raise MnistFormatError(f"files hold fewer than {count} images")

        pixels = np.frombuffer(
            image_data, dtype=np.uint8, count=needed_pixels, offset=_IMAGE_HEADER.size
        )
        self.rows = rows
        self.cols = cols
        self.images = (
            pixels.reshape(count, self.channels, rows, cols).astype(np.float64) / 255.0
        )
        self.labels = np.frombuffer(
            label_data, dtype=np.uint8, count=count, offset=_LABEL_HEADER.size
        ).copy()

    def __len__(self) -> int:
        return len(self.images)

    def __getitem__(self, index) -> np.ndarray:
        return self.images[index]