"""Command line entry point: train on MNIST and report test accuracy."""

from __future__ import annotations

import argparse
import sys

import numpy as np

from .layers import Conv, Dense, Flatten, Pooling, Relu, Softmax
from .mnist import (
    TESTING_IMAGES,
    TESTING_LABELS,
    TRAINING_IMAGES,
    TRAINING_LABELS,
    ImageSet,
    MnistFormatError,
)
from .network import Network


def build_default_network(rng=None) -> Network:
    """Convolution, ReLU, pooling, flatten, dense and softmax, in that order."""
    rng = rng if rng is not None else np.random.default_rng()
    return Network(
        [
            Conv(rng=rng),
            Relu(),
            Pooling(),
            Flatten(),
            Dense(rng=rng),
            Softmax(),
        ]
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cnnlite", description="Train a small CNN on MNIST and measure accuracy."
    )
    parser.add_argument("--train-images", default=TRAINING_IMAGES)
    parser.add_argument("--train-labels", default=TRAINING_LABELS)
    parser.add_argument("--test-images", default=TESTING_IMAGES)
    parser.add_argument("--test-labels", default=TESTING_LABELS)
    parser.add_argument("--train-limit", type=int, default=50000)
    parser.add_argument("--test-limit", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=None)
    return parser


def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    try:
        test_data = ImageSet(args.test_images, args.test_labels, args.test_limit)
        train_data = ImageSet(args.train_images, args.train_labels, args.train_limit)
    except (OSError, MnistFormatError) as exc:
        print(f"Failed to load MNIST files: {exc}", file=sys.stderr)
        return 1

    net = build_default_network(np.random.default_rng(args.seed))
    net.train(train_data.images, train_data.labels)
    accuracy = net.inference(test_data.images, test_data.labels)
    print(f"\npercent correct with inference: {accuracy * 100:g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())