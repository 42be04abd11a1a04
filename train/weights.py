# train/weights.py
import numpy as np


def uniform_weights(rows, cols, rng, weight_range=0.5):
    """Matrix of shape (rows, cols) drawn from U(-weight_range, weight_range)."""
    return rng.uniform(-weight_range, weight_range, size=(rows, cols))


def initial_weights(input_count, hidden_count, class_count, seed, weight_range=0.5):
    """
    Returns (hidden_weights, output_weights) shaped [H][input_count+1] and
    [C][H+1]; the trailing column of each is the bias weight.
    """
    rng = np.random.default_rng(seed)
    hidden = uniform_weights(hidden_count, input_count + 1, rng, weight_range)
    output = uniform_weights(class_count, hidden_count + 1, rng, weight_range)
    return hidden, output
