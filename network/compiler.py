# network/compiler.py
import torch
import torch.nn as nn

from utils.logger import get_logger

logger = get_logger("compiler")


class CompiledNetwork(nn.Module):
    """
    Snapshot of a NeuralNetwork as torch layers, for batch inference.
    Weights are copied at construction; later training of the source network
    is not reflected until the network is compiled again.
    """

    def __init__(self, network):
        super().__init__()
        self.input_count = network.input_count
        self.class_count = network.class_count
        logger.info("Compiling %r", network)
        self._build(network)

    def _build(self, network):
        hidden = torch.as_tensor(network.hidden_weights(), dtype=torch.float64)
        output = torch.as_tensor(network.output_weights(), dtype=torch.float64)

        # trailing column of each matrix is the bias node's weight
        self.hidden = nn.Linear(hidden.shape[1] - 1, hidden.shape[0]).double()
        self.output = nn.Linear(output.shape[1] - 1, output.shape[0]).double()
        with torch.no_grad():
            self.hidden.weight.copy_(hidden[:, :-1])
            self.hidden.bias.copy_(hidden[:, -1])
            self.output.weight.copy_(output[:, :-1])
            self.output.bias.copy_(output[:, -1])
        self.relu = nn.ReLU()
        logger.debug("Hidden layer %s, output layer %s", tuple(self.hidden.weight.shape),
                     tuple(self.output.weight.shape))

    def forward(self, x):
        x = torch.as_tensor(x, dtype=torch.float64)
        if x.shape[-1] != self.input_count:
            logger.error("Input has %d features, compiled network expects %d", x.shape[-1], self.input_count)
            raise ValueError(f"Expected {self.input_count} features, got {x.shape[-1]}")
        return torch.softmax(self.output(self.relu(self.hidden(x))), dim=-1)


def compile_network(network):
    return CompiledNetwork(network).eval()


def batch_predict(compiled, instances):
    """Arg-max class index for every instance; ties go to the lowest index."""
    features = torch.tensor([inst.attributes for inst in instances], dtype=torch.float64)
    with torch.no_grad():
        probs = compiled(features)
    return probs.argmax(dim=1).tolist()


def batch_accuracy(compiled, instances):
    if not instances:
        return 0.0
    predictions = batch_predict(compiled, instances)
    correct = sum(1 for pred, inst in zip(predictions, instances) if pred == inst.label)
    return correct / len(instances)
