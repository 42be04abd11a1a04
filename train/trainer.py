# train/trainer.py
from collections import namedtuple

from tqdm import tqdm

from utils.logger import get_logger

logger = get_logger("trainer")

EpochReport = namedtuple("EpochReport", ["epoch", "loss"])


def train_online(network, training_set, max_epoch, rng, progress=False):
    """
    Online SGD: one weight update per instance, fixed number of epochs.
    training_set is shuffled in place by rng at the start of every epoch.
    The loss of each epoch is measured after its updates are applied.
    """
    reports = []
    for epoch in tqdm(range(max_epoch), desc="Training", disable=not progress):
        rng.shuffle(training_set)
        for instance in training_set:
            network.step(instance)

        loss = network.mean_loss(training_set)
        logger.info("Epoch: %d, Loss: %.3e", epoch, loss)
        reports.append(EpochReport(epoch, loss))
    return reports
