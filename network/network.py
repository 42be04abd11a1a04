# network/network.py
import logging
import math
import numbers
import random

import numpy as np

from network.errors import ConfigurationError, DimensionMismatch, NumericalInstability
from network.node import NodeKind, make_node
from train.trainer import train_online
from utils.logger import get_logger

logger = get_logger("network")


def softmax(logits):
    """
    Softmax over a whole layer of weighted inputs.
    Logits are shifted by their max before exponentiation; the result is the
    same distribution and the denominator is always >= 1.
    """
    if not all(math.isfinite(z) for z in logits):
        raise NumericalInstability(f"Non-finite logits reached softmax: {logits}")
    peak = max(logits)
    exps = [math.exp(z - peak) for z in logits]
    total = sum(exps)
    return [e / total for e in exps]


def cross_entropy(probabilities, targets):
    loss = 0.0
    for p, t in zip(probabilities, targets):
        if t == 0:
            continue
        # a zero probability under a positive target is reported as inf loss
        loss -= t * (math.log(p) if p > 0 else -math.inf)
    return loss


def _is_count(value):
    # bool is Integral but never a valid count
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _as_matrix(weights, shape, name):
    try:
        matrix = np.asarray(weights, dtype=float)
    except (TypeError, ValueError) as e:
        raise DimensionMismatch(f"{name} is not a rectangular numeric matrix: {e}") from e
    if matrix.shape != shape:
        raise DimensionMismatch(f"{name} has shape {matrix.shape}, expected {shape}")
    return matrix


class NeuralNetwork:
    """
    input -> ReLU hidden -> softmax output, trained by online backpropagation.

    Layers are plain ordered lists. The last node of input_nodes and of
    hidden_nodes is a bias node. The j-th edge of every output node points at
    hidden_nodes[j]; the backward pass relies on that positional coupling and
    it is checked once at construction.
    """

    def __init__(self, training_set, hidden_node_count, learning_rate, max_epoch,
                 rng, hidden_weights, output_weights):
        if not training_set:
            raise ConfigurationError("training_set must contain at least one instance")
        if not _is_count(hidden_node_count) or hidden_node_count <= 0:
            raise ConfigurationError(f"hidden_node_count must be a positive int, got {hidden_node_count!r}")
        if learning_rate < 0:
            raise ConfigurationError(f"learning_rate must be >= 0, got {learning_rate!r}")
        if not _is_count(max_epoch) or max_epoch < 0:
            raise ConfigurationError(f"max_epoch must be a non-negative int, got {max_epoch!r}")

        self.training_set = list(training_set)
        self.learning_rate = float(learning_rate)
        self.max_epoch = int(max_epoch)
        self.rng = rng if rng is not None else random.Random()
        hidden_node_count = int(hidden_node_count)

        self.input_count = len(self.training_set[0].attributes)
        self.class_count = len(self.training_set[0].class_values)
        for instance in self.training_set:
            self._check_instance(instance, with_labels=True)

        hidden_weights = _as_matrix(hidden_weights, (hidden_node_count, self.input_count + 1), "hidden_weights")
        output_weights = _as_matrix(output_weights, (self.class_count, hidden_node_count + 1), "output_weights")

        self.input_nodes = [make_node(NodeKind.INPUT) for _ in range(self.input_count)]
        self.input_nodes.append(make_node(NodeKind.HIDDEN_BIAS))

        self.hidden_nodes = []
        for i in range(hidden_node_count):
            node = make_node(NodeKind.HIDDEN)
            for j, parent in enumerate(self.input_nodes):
                node.connect(parent, hidden_weights[i][j])
            self.hidden_nodes.append(node)
        self.hidden_nodes.append(make_node(NodeKind.OUTPUT_BIAS))

        self.output_nodes = []
        for i in range(self.class_count):
            node = make_node(NodeKind.OUTPUT)
            for j, parent in enumerate(self.hidden_nodes):
                node.connect(parent, output_weights[i][j])
            self.output_nodes.append(node)

        self._check_coupling()
        logger.info("Built network: %d inputs, %d hidden, %d outputs, lr=%g, epochs=%d",
                    self.input_count, hidden_node_count, self.class_count,
                    self.learning_rate, self.max_epoch)

    @property
    def hidden_node_count(self):
        return len(self.hidden_nodes) - 1

    def _check_coupling(self):
        for i, node in enumerate(self.output_nodes):
            if len(node.parents) != len(self.hidden_nodes):
                raise DimensionMismatch(f"Output node {i} has {len(node.parents)} edges, "
                                        f"hidden layer has {len(self.hidden_nodes)} nodes")
            for j, edge in enumerate(node.parents):
                if edge.parent is not self.hidden_nodes[j]:
                    raise DimensionMismatch(f"Edge {j} of output node {i} does not point at hidden node {j}")

    def _check_instance(self, instance, with_labels=False):
        if len(instance.attributes) != self.input_count:
            raise DimensionMismatch(f"Instance has {len(instance.attributes)} attributes, "
                                    f"network expects {self.input_count}")
        if with_labels and len(instance.class_values) != self.class_count:
            raise DimensionMismatch(f"Instance has {len(instance.class_values)} class values, "
                                    f"network expects {self.class_count}")

    # forward

    def forward(self, instance):
        self._check_instance(instance)
        for node, value in zip(self.input_nodes, instance.attributes):
            node.set_input(value)

        # every hidden output is final before any output node reads it
        for node in self.hidden_nodes[:-1]:
            node.compute_weighted_input()
            node.activate()

        # softmax needs all peers' weighted inputs at once
        logits = [node.compute_weighted_input() for node in self.output_nodes]
        probabilities = softmax(logits)
        for node, p in zip(self.output_nodes, probabilities):
            node.set_probability(p)
        return probabilities

    def output_values(self, instance):
        return list(self.forward(instance))

    # backward / update

    def backward(self, instance):
        for node, target in zip(self.output_nodes, instance.class_values):
            node.compute_delta(target)
        # hidden deltas consume every output delta
        for position, node in enumerate(self.hidden_nodes[:-1]):
            node.compute_delta(self.output_nodes, position)

    def update_weights(self):
        for node in self.output_nodes:
            node.update_weights(self.learning_rate)
        for node in self.hidden_nodes[:-1]:
            node.update_weights(self.learning_rate)

    def step(self, instance):
        self._check_instance(instance, with_labels=True)
        self.forward(instance)
        self.backward(instance)
        self.update_weights()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Step on %s: deltas=%s", instance.attributes,
                         [node.delta for node in self.output_nodes])

    def train(self, progress=False):
        return train_online(self, self.training_set, self.max_epoch, self.rng, progress=progress)

    # diagnostics

    def loss(self, instance):
        self._check_instance(instance, with_labels=True)
        return cross_entropy(self.forward(instance), instance.class_values)

    def mean_loss(self, instances=None):
        instances = self.training_set if instances is None else instances
        if not instances:
            raise ConfigurationError("mean_loss needs at least one instance")
        return sum(self.loss(inst) for inst in instances) / len(instances)

    # prediction

    def predict(self, instance):
        self.forward(instance)
        prediction = 0
        best = -math.inf
        for i, node in enumerate(self.output_nodes):
            # strict '>' keeps the lowest index on ties
            if node.output > best:
                best = node.output
                prediction = i
        return prediction

    def accuracy(self, instances):
        if not instances:
            return 0.0
        correct = sum(1 for inst in instances if self.predict(inst) == inst.label)
        return correct / len(instances)

    # inspection

    def hidden_weights(self):
        return np.array([node.weights() for node in self.hidden_nodes[:-1]])

    def output_weights(self):
        return np.array([node.weights() for node in self.output_nodes])

    def __repr__(self):
        return (f"NeuralNetwork(inputs={self.input_count}, hidden={self.hidden_node_count}, "
                f"outputs={self.class_count})")
