# train/dataset.py
import re
from pathlib import Path

import numpy as np

from network.errors import ConfigurationError
from utils.logger import get_logger

logger = get_logger("dataset")


class Instance:
    """
    attributes   : list[float]  raw attribute values
    class_values : list[float]  one-hot (or soft) label, one entry per class
    """

    def __init__(self, attributes, class_values):
        self.attributes = [float(a) for a in attributes]
        self.class_values = [float(c) for c in class_values]

    @property
    def label(self):
        best, best_value = 0, float("-inf")
        for i, value in enumerate(self.class_values):
            if value > best_value:
                best, best_value = i, value
        return best

    def __repr__(self):
        return f"Instance(attributes={self.attributes}, class_values={self.class_values})"


def one_hot(label, num_classes):
    if not 0 <= label < num_classes:
        raise ConfigurationError(f"Label {label} outside [0, {num_classes})")
    values = [0.0] * num_classes
    values[label] = 1.0
    return values


def instances_from_arrays(features, labels, num_classes=None):
    features = np.asarray(features, dtype=float)
    labels = np.asarray(labels).astype(int)
    if features.ndim != 2:
        raise ConfigurationError(f"Expected a 2-D feature array, got shape {features.shape}")
    if len(features) != len(labels):
        raise ConfigurationError(f"{len(features)} feature rows but {len(labels)} labels")
    if num_classes is None:
        num_classes = int(labels.max()) + 1 if len(labels) else 0
    return [Instance(row.tolist(), one_hot(int(y), num_classes)) for row, y in zip(features, labels)]


def load_instances(path, num_classes=None):
    """
    One instance per line, comma or whitespace separated, integer class
    label in the last column. Lines starting with '#' are skipped.
    """
    path = Path(path)
    rows = []
    with path.open() as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            fields = [f for f in re.split(r"[,\s]+", line) if f]
            try:
                rows.append([float(f) for f in fields])
            except ValueError as e:
                logger.error("Unparseable line %d in %s: %r", lineno, path, line)
                raise ConfigurationError(f"{path}:{lineno}: non-numeric field") from e

    if not rows:
        raise ConfigurationError(f"No instances found in {path}")
    widths = {len(r) for r in rows}
    if len(widths) != 1:
        raise ConfigurationError(f"Ragged rows in {path}: widths {sorted(widths)}")

    data = np.array(rows)
    instances = instances_from_arrays(data[:, :-1], data[:, -1], num_classes=num_classes)
    logger.info("Loaded %d instances from %s (%d attributes, %d classes)",
                len(instances), path, data.shape[1] - 1, len(instances[0].class_values))
    return instances


def make_linearly_separable(n_per_class=20, seed=0, spread=0.5, offset=2.0):
    """
    Two Gaussian blobs centred at (-offset, -offset) and (offset, offset).
    Class 0 is the lower-left blob.
    """
    rng = np.random.default_rng(seed)
    low = rng.normal(-offset, spread, size=(n_per_class, 2))
    high = rng.normal(offset, spread, size=(n_per_class, 2))
    features = np.vstack([low, high])
    labels = np.array([0] * n_per_class + [1] * n_per_class)
    return instances_from_arrays(features, labels, num_classes=2)
