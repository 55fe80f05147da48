[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cnnlite"
version = "0.1.0"
description = "A small convolutional neural network trained on MNIST-format image files"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["cnn", "neural-network", "mnist", "convolution", "machine-learning"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cnnlite = "cnnlite.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["cnnlite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
