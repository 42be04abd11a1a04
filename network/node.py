# network/node.py
from enum import Enum

from network.errors import InvalidNodeKind


class NodeKind(Enum):
    INPUT = 0
    HIDDEN_BIAS = 1
    HIDDEN = 2
    OUTPUT_BIAS = 3
    OUTPUT = 4

    @property
    def is_bias(self):
        return self in (NodeKind.HIDDEN_BIAS, NodeKind.OUTPUT_BIAS)

    @property
    def is_weighted(self):
        return self in (NodeKind.HIDDEN, NodeKind.OUTPUT)


class Edge:
    """
    Weighted link from a parent node, owned by the child node.
    parent : Node  (non-owning reference into the previous layer)
    weight : float (mutated in place by training)
    """
    __slots__ = ("parent", "weight")

    def __init__(self, parent, weight):
        self.parent = parent
        self.weight = float(weight)

    def __repr__(self):
        return f"Edge(parent={self.parent.kind.name}, weight={self.weight:.6g})"


class Node:
    kind = None

    @property
    def output(self):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(output={self.output:.6g})"


class InputNode(Node):
    kind = NodeKind.INPUT

    def __init__(self):
        self.input_value = 0.0

    def set_input(self, value):
        self.input_value = float(value)

    @property
    def output(self):
        return self.input_value


class BiasNode(Node):
    """Constant 1.0 output; carries no parents and no computed state."""

    def __init__(self, kind):
        if not kind.is_bias:
            raise InvalidNodeKind(f"{kind.name} is not a bias kind")
        self.kind = kind

    @property
    def output(self):
        return 1.0


class WeightedNode(Node):
    def __init__(self):
        self.parents = []
        self.input_value = 0.0
        self.output_value = 0.0
        self.delta = 0.0

    @property
    def output(self):
        return self.output_value

    def connect(self, parent, weight):
        self.parents.append(Edge(parent, weight))

    def compute_weighted_input(self):
        total = 0.0
        for edge in self.parents:
            total += edge.parent.output * edge.weight
        self.input_value = total
        return total

    def update_weights(self, learning_rate):
        # gradient ascent on log-likelihood: delta is (target - prediction)-signed
        for edge in self.parents:
            edge.weight += learning_rate * edge.parent.output * self.delta

    def weights(self):
        return [edge.weight for edge in self.parents]


class HiddenNode(WeightedNode):
    kind = NodeKind.HIDDEN

    def activate(self):
        self.output_value = max(0.0, self.input_value)
        return self.output_value

    def relu_derivative(self):
        # subgradient at exactly 0 is 0
        return 1.0 if self.input_value > 0 else 0.0

    def compute_delta(self, output_nodes, position):
        """
        position is this node's index in the hidden layer; it addresses the
        edge pointing back at this node in every output node's parent list.
        """
        downstream = 0.0
        for node in output_nodes:
            downstream += node.parents[position].weight * node.delta
        self.delta = self.relu_derivative() * downstream
        return self.delta


class OutputNode(WeightedNode):
    kind = NodeKind.OUTPUT

    def set_probability(self, probability):
        self.output_value = probability
        return probability

    def compute_delta(self, target):
        self.delta = target - self.output_value
        return self.delta


_WEIGHTED_TYPES = {
    NodeKind.HIDDEN: HiddenNode,
    NodeKind.OUTPUT: OutputNode,
}


def coerce_kind(kind):
    if isinstance(kind, NodeKind):
        return kind
    # bool is an int subclass but never a valid tag
    if isinstance(kind, int) and not isinstance(kind, bool):
        try:
            return NodeKind(kind)
        except ValueError:
            pass
    raise InvalidNodeKind(f"Incorrect value for node kind: {kind!r}")


def make_node(kind):
    """
    Build a node of the given kind.
    kind : NodeKind or its integer tag (0=input, 1=hidden bias, 2=hidden,
           3=output bias, 4=output)
    """
    kind = coerce_kind(kind)
    if kind.is_bias:
        return BiasNode(kind)
    if kind.is_weighted:
        return _WEIGHTED_TYPES[kind]()
    return InputNode()
