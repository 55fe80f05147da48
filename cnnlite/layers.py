"""Convolutional network layers and small tensor helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

EPSILON = 1e-9
LEARNING_RATE = 0.01
POOL_SIZE = 2


def _as_array(x) -> np.ndarray:
    return np.array(x, dtype=np.float64)


def _random_fraction(rng: np.random.Generator, shape) -> np.ndarray:
    """Values drawn from {0.00, 0.01, ..., 0.99}."""
    return rng.integers(0, 100, size=shape).astype(np.float64) / 100.0


def dotproduct(a, b) -> float:
    """Sum of the element-wise product of two equally shaped matrices."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.size == 0 or b.size == 0 or a.shape != b.shape:
        raise ValueError("Neither a*b or b*a is valid: incompatible dimensions")
    return float(np.sum(a * b))


def matmult(a, b) -> np.ndarray:
    """Multiply a by b, or b by a when only that order fits."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.size and b.size:
        if a.shape[1] == b.shape[0]:
            return a @ b
        if b.shape[1] == a.shape[0]:
            return b @ a
    raise ValueError("Neither a*b or b*a is valid: incompatible dimensions")


def cross_entropy_loss(y_actual, y_pred) -> float:
    """Cross-entropy between a target distribution and predicted probabilities."""
    actual = np.asarray(y_actual, dtype=np.float64)
    pred = np.asarray(y_pred, dtype=np.float64)
    return float(-np.sum(actual * np.log(pred + EPSILON)))


def softmax_probs(logits) -> np.ndarray:
    """Numerically stable softmax of a vector of logits."""
    logits = np.asarray(logits, dtype=np.float64)
    exps = np.exp(logits - logits.max())
    return exps / exps.sum()


def format_tensor3(t) -> str:
    """Render a 3-D tensor one matrix at a time, two significant digits."""
    t = np.asarray(t, dtype=np.float64)
    parts = []
    for matrix in t:
        for row in matrix:
            parts.append("".join(f"{v:>6.2g}" for v in row) + "\n")
        parts.append("\n\n")
    return "".join(parts)


def format_vector(vec) -> str:
    """Render a vector on one line, two significant digits."""
    return "".join(f"{v:>5.2g} " for v in np.asarray(vec, dtype=np.float64)) + "\n\n"


class Layer(ABC):
    """A network layer with a forward pass and a gradient-taking backward pass."""

    @abstractmethod
    def forward(self, x):
        """Compute the layer output for x."""

    @abstractmethod
    def backward(self, grad):
        """Take the gradient of the output and return the gradient of the input."""


def _require(value, name: str):
    if value is None:
        raise RuntimeError(f"{name}: backward called before forward")
    return value


class Conv(Layer):
    """Valid, stride-1 convolution over the first input channel."""

    def __init__(self, num_kernels=3, out_channels=1, kernel_size=3, rng=None):
        rng = rng if rng is not None else np.random.default_rng()
        kernels = []
        bias = []
        for _ in range(num_kernels):
            kernels.append(_random_fraction(rng, (out_channels, kernel_size, kernel_size)))
            bias.append(_random_fraction(rng, ())[()])
        self.kernels = np.array(kernels, dtype=np.float64).reshape(
            num_kernels, out_channels, kernel_size, kernel_size
        )
        self.bias = np.array(bias, dtype=np.float64)
        self._input: np.ndarray | None = None

    @property
    def kernel_size(self) -> int:
        return self.kernels.shape[2]

    def forward(self, x) -> np.ndarray:
        x = _as_array(x)
        self._input = x.copy()
        k = self.kernel_size
        width = x.shape[2]
        if x.shape[1] < width or width < k:
            raise ValueError("convolution input must be square and no smaller than the kernel")
        outsize = width - k + 1
        windows = sliding_window_view(x[0], (k, k))[:outsize, :outsize]
        out = np.einsum("ijab,xab->xij", windows, self.kernels[:, 0])
        return out + self.bias[:, None, None]

    def backward(self, grad) -> np.ndarray:
        source = _require(self._input, "Conv")
        dout = _as_array(grad)
        k = self.kernel_size
        out_h, out_w = dout.shape[1], dout.shape[2]
        dinput = np.zeros_like(source)
        for ki in range(k):
            for kj in range(k):
                dinput[0, ki:ki + out_h, kj:kj + out_w] += np.einsum(
                    "x,xij->ij", self.kernels[:, 0, ki, kj], dout
                )
        windows = sliding_window_view(source[0], (k, k))[:out_h, :out_w]
        d_kernels = np.einsum("ijab,xij->xab", windows, dout)
        d_bias = dout.sum(axis=(1, 2))
        self.kernels[:, 0] -= LEARNING_RATE * d_kernels
        self.bias -= LEARNING_RATE * d_bias
        return dinput

    def format_kernels(self) -> str:
        parts = []
        for kernel in self.kernels:
            for channel in kernel:
                for row in channel:
                    parts.append("".join(f"{v:>6g} " for v in row) + "\n")
                parts.append("\n\n")
        return "".join(parts)


class Pooling(Layer):
    """2x2 max pooling with stride 2."""

    def __init__(self):
        self._input_shape: tuple[int, ...] | None = None
        self._max_rows: np.ndarray | None = None
        self._max_cols: np.ndarray | None = None

    def forward(self, x) -> np.ndarray:
        x = _as_array(x)
        channels, height, width = x.shape
        out_h, out_w = height // POOL_SIZE, width // POOL_SIZE
        blocks = (
            x[:, :out_h * POOL_SIZE, :out_w * POOL_SIZE]
            .reshape(channels, out_h, POOL_SIZE, out_w, POOL_SIZE)
            .transpose(0, 1, 3, 2, 4)
            .reshape(channels, out_h, out_w, POOL_SIZE * POOL_SIZE)
        )
        best = blocks.argmax(axis=-1)
        out = np.take_along_axis(blocks, best[..., None], axis=-1)[..., 0]
        self._input_shape = x.shape
        self._max_rows = np.arange(out_h)[None, :, None] * POOL_SIZE + best // POOL_SIZE
        self._max_cols = np.arange(out_w)[None, None, :] * POOL_SIZE + best % POOL_SIZE
        return out

    def backward(self, grad) -> np.ndarray:
        shape = _require(self._input_shape, "Pooling")
        dout = _as_array(grad)
        d_input = np.zeros(shape)
        out_h, out_w = dout.shape[1], dout.shape[2]
        rows = self._max_rows[:, :out_h, :out_w]
        cols = self._max_cols[:, :out_h, :out_w]
        chans = np.arange(shape[0])[:, None, None]
        d_input[np.broadcast_to(chans, rows.shape), rows, cols] = dout
        return d_input


class Flatten(Layer):
    """Turn a 3-D tensor into a vector and back."""

    def __init__(self):
        self._shape: tuple[int, ...] | None = None

    def forward(self, x) -> np.ndarray:
        x = _as_array(x)
        if x.size == 0:
            raise ValueError("flatten input is empty")
        self._shape = x.shape
        return x.reshape(-1).copy()

    def backward(self, grad) -> np.ndarray:
        shape = _require(self._shape, "Flatten")
        count = int(np.prod(shape))
        return _as_array(grad)[:count].reshape(shape)


class Dense(Layer):
    """Fully connected layer whose weights are created on the first forward pass."""

    def __init__(self, output_size=10, rng=None):
        self._rng = rng if rng is not None else np.random.default_rng()
        self.bias = np.zeros(output_size)
        self.weights: np.ndarray | None = None
        self._last_input: np.ndarray | None = None

    def forward(self, x) -> np.ndarray:
        x = _as_array(x)
        self._last_input = x.copy()
        if self.weights is None:
            self.weights = _random_fraction(self._rng, (self.bias.size, x.size))
        return self.weights @ x + self.bias

    def backward(self, grad) -> np.ndarray:
        last = _require(self._last_input, "Dense")
        dout = _as_array(grad)
        din = self.weights.T @ dout
        self.weights -= LEARNING_RATE * np.outer(dout, last)
        self.bias -= LEARNING_RATE * dout
        return din


class Relu(Layer):
    """Rectified linear activation."""

    def __init__(self):
        self._input: np.ndarray | None = None

    def forward(self, x) -> np.ndarray:
        x = _as_array(x)
        self._input = x.copy()
        return np.maximum(x, 0.0)

    def backward(self, grad) -> np.ndarray:
        source = _require(self._input, "Relu")
        din = _as_array(grad)
        din[source <= 0] = 0.0
        return din


class Softmax(Layer):
    """Softmax output; the backward pass expects the combined cross-entropy gradient."""

    def __init__(self):
        self.output: np.ndarray | None = None

    def forward(self, x) -> np.ndarray:
        x = _as_array(x)
        if x.size == 0:
            return np.zeros(0)
        self.output = softmax_probs(x)
        return self.output

    def backward(self, grad) -> np.ndarray:
        return _as_array(grad)