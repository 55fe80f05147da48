"""A small convolutional neural network for MNIST-format digit images."""

__version__ = "0.1.0"
__all__ = ["layers", "mnist", "network", "cli"]