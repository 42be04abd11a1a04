# tests/test_node.py
import pytest

from network.errors import ConfigurationError, InvalidNodeKind
from network.node import (
    BiasNode, Edge, HiddenNode, InputNode, NodeKind, OutputNode, make_node
)


def build_hidden_with_input(value, weight=1.0):
    inp = make_node(NodeKind.INPUT)
    inp.set_input(value)
    hidden = make_node(NodeKind.HIDDEN)
    hidden.connect(inp, weight)
    return inp, hidden


def test_make_node_returns_variant_per_kind():
    assert isinstance(make_node(NodeKind.INPUT), InputNode)
    assert isinstance(make_node(NodeKind.HIDDEN), HiddenNode)
    assert isinstance(make_node(NodeKind.OUTPUT), OutputNode)
    assert isinstance(make_node(NodeKind.HIDDEN_BIAS), BiasNode)
    assert isinstance(make_node(NodeKind.OUTPUT_BIAS), BiasNode)


def test_integer_tags_map_to_kinds():
    for tag, kind in enumerate([NodeKind.INPUT, NodeKind.HIDDEN_BIAS, NodeKind.HIDDEN,
                                NodeKind.OUTPUT_BIAS, NodeKind.OUTPUT]):
        assert make_node(tag).kind is kind


@pytest.mark.parametrize("bad", [5, -1, "hidden", None, True, 2.0])
def test_invalid_kind_raises(bad):
    with pytest.raises(InvalidNodeKind):
        make_node(bad)


def test_invalid_kind_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        make_node(99)


def test_bias_node_rejects_non_bias_kind():
    with pytest.raises(InvalidNodeKind):
        BiasNode(NodeKind.HIDDEN)


def test_bias_nodes_are_constant_and_parentless():
    for kind in (NodeKind.HIDDEN_BIAS, NodeKind.OUTPUT_BIAS):
        bias = make_node(kind)
        assert bias.output == 1.0
        assert not hasattr(bias, "parents")
        assert not hasattr(bias, "set_input")


def test_only_weighted_kinds_own_edges():
    assert make_node(NodeKind.HIDDEN).parents == []
    assert make_node(NodeKind.OUTPUT).parents == []
    assert not hasattr(make_node(NodeKind.INPUT), "parents")


def test_relu_passes_positive_input():
    _, hidden = build_hidden_with_input(2.5)
    hidden.compute_weighted_input()
    assert hidden.activate() == 2.5
    assert hidden.relu_derivative() == 1.0


@pytest.mark.parametrize("value", [-3.0, 0.0])
def test_relu_clamps_non_positive_input(value):
    _, hidden = build_hidden_with_input(value)
    hidden.compute_weighted_input()
    assert hidden.activate() == 0.0
    assert hidden.relu_derivative() == 0.0


def test_weighted_input_sums_parent_outputs():
    inp, hidden = build_hidden_with_input(2.0, weight=0.5)
    hidden.connect(make_node(NodeKind.HIDDEN_BIAS), -0.25)
    assert hidden.compute_weighted_input() == pytest.approx(0.75)


def test_update_weights_moves_along_delta():
    inp, hidden = build_hidden_with_input(2.0, weight=0.5)
    hidden.delta = 0.1
    hidden.update_weights(0.5)
    assert hidden.parents[0].weight == pytest.approx(0.5 + 0.5 * 2.0 * 0.1)


def test_output_delta_is_target_minus_probability():
    out = make_node(NodeKind.OUTPUT)
    out.set_probability(0.25)
    assert out.compute_delta(1.0) == pytest.approx(0.75)
    assert out.compute_delta(0.0) == pytest.approx(-0.25)


def test_edge_holds_float_weight():
    edge = Edge(make_node(NodeKind.INPUT), 3)
    assert isinstance(edge.weight, float)
    assert "INPUT" in repr(edge)


def test_weighted_kinds_are_exactly_hidden_and_output():
    weighted = [kind for kind in NodeKind if kind.is_weighted]
    assert weighted == [NodeKind.HIDDEN, NodeKind.OUTPUT]
    for kind in NodeKind:
        assert hasattr(make_node(kind), "parents") == kind.is_weighted
