# main.py
import argparse
import random
import sys

from network.compiler import batch_accuracy, compile_network
from network.errors import NetworkError
from network.network import NeuralNetwork
from train.dataset import load_instances, make_linearly_separable
from train.weights import initial_weights
from utils.config import TrainingConfig
from utils.logger import configure_all, get_logger

logger = get_logger("main")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Online backpropagation MLP")
    parser.add_argument("--train", type=str, default=None,
                        help="training set file (default: generated toy dataset)")
    parser.add_argument("--test", type=str, default=None,
                        help="test set file (default: the training set)")
    parser.add_argument("--hidden", type=int, default=5, metavar="H",
                        help="hidden layer size (default: 5)")
    parser.add_argument("--lr", type=float, default=0.01, metavar="LR",
                        help="learning rate (default: 0.01)")
    parser.add_argument("--epochs", type=int, default=100, metavar="N",
                        help="number of epochs to train (default: 100)")
    parser.add_argument("--seed", type=int, default=1, metavar="S",
                        help="random seed for shuffling and weight init (default: 1)")
    parser.add_argument("--weight-range", type=float, default=0.5, metavar="R",
                        help="initial weights drawn from U(-R, R) (default: 0.5)")
    parser.add_argument("--progress", action="store_true",
                        help="show a progress bar over epochs")
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument("--log-file", type=str, default=None)
    return parser.parse_args(argv)


def load_data(args):
    if args.train is None:
        logger.info("No training file given, generating a linearly separable toy dataset")
        train_set = make_linearly_separable(seed=args.seed)
        return train_set, train_set

    train_set = load_instances(args.train)
    num_classes = len(train_set[0].class_values)
    test_set = load_instances(args.test, num_classes=num_classes) if args.test else train_set
    return train_set, test_set


def run(args):
    config = TrainingConfig.from_args(args).validate()
    configure_all(config.log_level, config.log_file)
    logger.info("Config: %s", config)

    train_set, test_set = load_data(args)
    hidden_weights, output_weights = initial_weights(
        input_count=len(train_set[0].attributes),
        hidden_count=config.hidden_node_count,
        class_count=len(train_set[0].class_values),
        seed=config.random_seed,
        weight_range=config.weight_range,
    )

    network = NeuralNetwork(
        train_set,
        config.hidden_node_count,
        config.learning_rate,
        config.max_epoch,
        random.Random(config.random_seed),
        hidden_weights,
        output_weights,
    )
    reports = network.train(progress=args.progress)
    if reports:
        logger.info("Final training loss: %.3e", reports[-1].loss)

    logger.info("Train accuracy: %.4f", network.accuracy(train_set))
    logger.info("Test accuracy: %.4f", network.accuracy(test_set))

    compiled = compile_network(network)
    logger.info("Test accuracy (compiled): %.4f", batch_accuracy(compiled, test_set))
    return network


def main(argv=None):
    args = parse_args(argv)
    try:
        run(args)
    except (NetworkError, OSError):
        logger.exception("Run failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
