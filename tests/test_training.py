# tests/test_training.py
import random

import numpy as np
import pytest

from network.errors import ConfigurationError
from network.network import NeuralNetwork
from train.dataset import Instance, make_linearly_separable
from train.trainer import EpochReport
from train.weights import initial_weights
from utils.logger import get_logger

logger = get_logger("test_training")


def build_separable_set():
    low = [(-2.0, -1.5), (-1.5, -2.5), (-2.5, -2.0), (-1.0, -2.0)]
    high = [(2.0, 1.5), (1.5, 2.5), (2.5, 2.0), (1.0, 2.0)]
    return ([Instance(p, [1.0, 0.0]) for p in low] +
            [Instance(p, [0.0, 1.0]) for p in high])


def build_separable_network(max_epoch=200, learning_rate=0.05, seed=0):
    hidden = [[1.0, 1.0, 0.0],
              [-1.0, -1.0, 0.0],
              [1.0, 0.0, 0.0],
              [0.0, -1.0, 0.0]]
    output = np.zeros((2, 5))
    return NeuralNetwork(build_separable_set(), 4, learning_rate, max_epoch,
                         random.Random(seed), hidden, output)


def build_seeded_network(seed, max_epoch=5):
    data = make_linearly_separable(n_per_class=6, seed=42)
    hw, ow = initial_weights(2, 3, 2, seed=42)
    return NeuralNetwork(data, 3, 0.1, max_epoch, random.Random(seed), hw, ow)


def test_zero_epochs_leaves_weights_and_loss_unchanged():
    net = build_seeded_network(seed=1, max_epoch=0)
    hidden, output = net.hidden_weights(), net.output_weights()
    untrained_loss = net.mean_loss()

    assert net.train() == []
    assert np.array_equal(net.hidden_weights(), hidden)
    assert np.array_equal(net.output_weights(), output)
    assert net.mean_loss() == untrained_loss


def test_one_report_per_epoch():
    net = build_seeded_network(seed=1, max_epoch=4)
    reports = net.train()
    assert [r.epoch for r in reports] == [0, 1, 2, 3]
    assert all(isinstance(r, EpochReport) for r in reports)
    assert reports[-1].loss == pytest.approx(net.mean_loss())


def test_fixed_seed_reproduces_training_run():
    a = build_seeded_network(seed=7)
    b = build_seeded_network(seed=7)
    reports_a, reports_b = a.train(), b.train()

    assert [i.attributes for i in a.training_set] == [i.attributes for i in b.training_set]
    assert np.array_equal(a.hidden_weights(), b.hidden_weights())
    assert np.array_equal(a.output_weights(), b.output_weights())
    assert reports_a == reports_b


def test_different_seed_changes_shuffle_order():
    a = build_seeded_network(seed=7, max_epoch=1)
    b = build_seeded_network(seed=8, max_epoch=1)
    a.train()
    b.train()
    assert [i.attributes for i in a.training_set] != [i.attributes for i in b.training_set]


def test_separable_data_drives_loss_towards_zero():
    net = build_separable_network()
    reports = net.train()
    losses = [r.loss for r in reports]
    logger.info("Separable losses: first=%.3e mid=%.3e last=%.3e",
                losses[0], losses[len(losses) // 2], losses[-1])

    assert all(later <= earlier for earlier, later in zip(losses, losses[1:]))
    assert losses[-1] < losses[0]
    assert losses[-1] < 0.05
    assert net.accuracy(net.training_set) == 1.0


def test_bias_nodes_stay_constant_through_training():
    net = build_separable_network(max_epoch=10)
    assert net.input_nodes[-1].output == 1.0
    assert net.hidden_nodes[-1].output == 1.0
    net.train()
    assert net.input_nodes[-1].output == 1.0
    assert net.hidden_nodes[-1].output == 1.0


def test_training_does_not_mutate_callers_list():
    data = build_separable_set()
    original = [i.attributes for i in data]
    net = NeuralNetwork(data, 4, 0.05, 3, random.Random(0),
                        np.full((4, 3), 0.1), np.zeros((2, 5)))
    net.train()
    assert [i.attributes for i in data] == original


def test_progress_bar_does_not_change_results():
    a = build_seeded_network(seed=3)
    b = build_seeded_network(seed=3)
    assert a.train(progress=True) == b.train(progress=False)


def test_mean_loss_of_empty_sequence_is_rejected():
    net = build_seeded_network(seed=1, max_epoch=0)
    with pytest.raises(ConfigurationError):
        net.mean_loss([])
