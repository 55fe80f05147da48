"""A sequential network trained one sample at a time."""

from __future__ import annotations

import numpy as np

from .layers import Layer, cross_entropy_loss


def find_max_element(pred) -> int:
    """Index of the largest positive value; 0 when none is above zero."""
    best_value = 0.0
    best_index = 0
    for index, value in enumerate(pred):
        if value > best_value:
            best_value = value
            best_index = index
    return best_index


class Network:
    """Layers applied in order, with gradients passed back in reverse."""

    def __init__(self, layers=None):
        self.layers: list[Layer] = list(layers) if layers is not None else []

    def add_layer(self, layer) -> None:
        self.layers.append(layer)

    def forward(self, image) -> np.ndarray:
        output = image
        for layer in self.layers:
            output = layer.forward(output)
        return np.asarray(output, dtype=np.float64)

    def backward(self, grad):
        for layer in reversed(self.layers):
            grad = layer.backward(grad)
        return grad

    def train(self, images, labels) -> list[float]:
        """One pass of stochastic gradient descent; returns the loss of each step.

        The last image is left out of training.
        """
        losses = []
        for image, label in zip(list(images)[:-1], labels):
            prediction = self.forward(image)
            target = np.zeros_like(prediction)
            target[int(label)] = 1.0
            losses.append(cross_entropy_loss(target, prediction))
            self.backward(prediction - target)
        return losses

    def inference(self, images, labels) -> float:
        """Fraction of images whose most likely class equals the label."""
        outcomes = [
            find_max_element(self.forward(image)) == int(label)
            for image, label in zip(images, labels)
        ]
        if not outcomes:
            raise ValueError("inference needs at least one image")
        return sum(outcomes) / len(outcomes)