# cnnlite

cnnlite is a small convolutional neural network for MNIST-style digit images.
It is built from plain layers: convolution, ReLU, 2×2 max pooling, flatten, a
dense layer and softmax. Training is stochastic gradient descent with a
learning rate of 0.01. Each layer updates itself as each image passes through.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

By default the command reads the MNIST files from a `data/` directory under
the current directory:

- `data/train-images.idx3-ubyte`
- `data/train-labels.idx1-ubyte`
- `data/t10k-images.idx3-ubyte`
- `data/t10k-labels.idx1-ubyte`

Then run:

```
cnnlite
```

The command trains the default network on the first 50000 training images and
then tests it on the first 10000 test images. It prints the share of test
images that it classifies correctly, as a percentage. If a file cannot be read
or is not valid IDX data, it prints an error and exits with status 1.

Options:

- `--train-images PATH`, `--train-labels PATH`, `--test-images PATH` and
  `--test-labels PATH` set the data files.
- `--train-limit N` sets how many training images are read. The default is 50000.
- `--test-limit N` sets how many test images are read. The default is 10000.
- `--seed N` seeds the random initial weights, so that runs can be repeated.

## Library use

```python
import numpy as np
from cnnlite.mnist import ImageSet
from cnnlite.network import Network
from cnnlite.layers import Conv, Relu, Pooling, Flatten, Dense, Softmax

rng = np.random.default_rng(0)
train = ImageSet("data/train-images.idx3-ubyte", "data/train-labels.idx1-ubyte", 1000)
test = ImageSet("data/t10k-images.idx3-ubyte", "data/t10k-labels.idx1-ubyte", 200)

net = Network([
    Conv(3, 1, 3, rng),
    Relu(),
    Pooling(),
    Flatten(),
    Dense(10, rng),
    Softmax(),
])
losses = net.train(train.images, train.labels)
print(net.inference(test.images, test.labels))
```

`cnnlite.cli.build_default_network(rng)` returns the same network as the
example above.

### `cnnlite.mnist`

`ImageSet(image_path, label_path, limit=None)` reads an IDX image file and an
IDX label file. It scales each pixel to the range 0 to 1. With `limit` it
reads only the first `limit` images. It raises `MnistFormatError` in these
cases:

- a header or magic number is wrong;
- the image count and the label count differ;
- the files hold fewer images than asked for.

`images` is an array of shape `(count, channels, rows, cols)` and `labels` is
an array of bytes. `len(imageset)` gives the number of images. Indexing a set
gives the image array at that index.

### `cnnlite.network`

- `Network(layers)` applies its layers in order. `add_layer` appends one more.
- `forward(image)` returns the network output. `backward(grad)` passes a
  gradient back through the layers in reverse order.
- `train(images, labels)` makes one pass over the images and returns the
  cross-entropy loss of each step. The last image is left out of training.
- `inference(images, labels)` returns the fraction of images whose predicted
  class matches the label.
- `find_max_element(pred)` returns the index of the largest positive value. It
  returns 0 when no value is above zero.

### `cnnlite.layers`

Layers: `Conv`, `Relu`, `Pooling`, `Flatten`, `Dense` and `Softmax`. All are
subclasses of `Layer`.

- `Conv` is a valid, stride-1 convolution over the first input channel.
- `Dense` creates its weights on its first forward pass.
- `Softmax.backward` passes its gradient through unchanged. It expects the
  combined softmax and cross-entropy gradient (prediction minus target).

Helpers:

- `dotproduct`, `matmult`, `cross_entropy_loss` and `softmax_probs` do the
  arithmetic.
- `format_tensor3`, `format_vector` and `Conv.format_kernels` render values as
  text.

## Limitations

- Trained weights are not saved or loaded. Every run starts from fresh random
  weights.
- Training sees one image at a time, in one pass. There are no batches and no
  epochs.