import struct

import numpy as np
import pytest

from cnnlite.mnist import ImageSet, MnistFormatError


def write_idx(tmp_path, images, labels, image_magic=2051, label_magic=2049, label_count=None):
    images = np.asarray(images, dtype=np.uint8)
    count, rows, cols = images.shape
    image_file = tmp_path / "images.idx3-ubyte"
    label_file = tmp_path / "labels.idx1-ubyte"
    image_file.write_bytes(struct.pack(">IIII", image_magic, count, rows, cols) + images.tobytes())
    if label_count is None:
        label_count = len(labels)
    label_file.write_bytes(struct.pack(">II", label_magic, label_count) + bytes(labels))
    return image_file, label_file


@pytest.fixture
def sample(tmp_path):
    images = np.array(
        [
            [[0, 255], [51, 102]],
            [[255, 255], [0, 0]],
            [[10, 20], [30, 40]],
        ]
    )
    return write_idx(tmp_path, images, [7, 2, 5])


def test_loads_all_images_and_labels(sample):
    data = ImageSet(*sample)
    assert len(data) == 3
    assert data.images.shape == (3, 1, 2, 2)
    assert list(data.labels) == [7, 2, 5]


def test_pixels_are_normalized(sample):
    data = ImageSet(*sample)
    assert data[0][0, 0, 0] == 0.0
    assert data[0][0, 0, 1] == 1.0
    assert data[0][0, 1, 0] == pytest.approx(51 / 255)


def test_limit_reads_first_images(sample):
    data = ImageSet(*sample, limit=2)
    assert len(data) == 2
    assert list(data.labels) == [7, 2]
    np.testing.assert_array_equal(data[1], ImageSet(*sample)[1])


def test_limit_beyond_file_raises(sample):
    with pytest.raises(MnistFormatError):
        ImageSet(*sample, limit=10)


def test_bad_image_magic(tmp_path):
    files = write_idx(tmp_path, np.zeros((1, 2, 2)), [0], image_magic=2049)
    with pytest.raises(MnistFormatError, match="magic"):
        ImageSet(*files)


def test_bad_label_magic(tmp_path):
    files = write_idx(tmp_path, np.zeros((1, 2, 2)), [0], label_magic=2051)
    with pytest.raises(MnistFormatError, match="magic"):
        ImageSet(*files)


def test_count_mismatch(tmp_path):
    files = write_idx(tmp_path, np.zeros((2, 2, 2)), [0, 1], label_count=3)
    with pytest.raises(MnistFormatError, match="Mismatch"):
        ImageSet(*files)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ImageSet(tmp_path / "none", tmp_path / "nope")


def test_negative_limit(sample):
    with pytest.raises(ValueError):
        ImageSet(*sample, limit=-1)