# utils/config.py
import numbers
from dataclasses import dataclass
from typing import Optional

from network.errors import ConfigurationError


def _is_count(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass
class TrainingConfig:
    hidden_node_count: int = 5
    learning_rate: float = 0.01
    max_epoch: int = 100
    random_seed: int = 1
    weight_range: float = 0.5
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self, allow_zero_learning_rate=False):
        if not _is_count(self.hidden_node_count) or self.hidden_node_count <= 0:
            raise ConfigurationError(f"hidden_node_count must be a positive int, got {self.hidden_node_count!r}")
        if allow_zero_learning_rate:
            if self.learning_rate < 0:
                raise ConfigurationError(f"learning_rate must be >= 0, got {self.learning_rate!r}")
        elif self.learning_rate <= 0:
            raise ConfigurationError(f"learning_rate must be > 0, got {self.learning_rate!r}")
        if not _is_count(self.max_epoch) or self.max_epoch < 0:
            raise ConfigurationError(f"max_epoch must be a non-negative int, got {self.max_epoch!r}")
        if self.weight_range <= 0:
            raise ConfigurationError(f"weight_range must be > 0, got {self.weight_range!r}")
        return self

    @classmethod
    def from_args(cls, args):
        return cls(
            hidden_node_count=args.hidden,
            learning_rate=args.lr,
            max_epoch=args.epochs,
            random_seed=args.seed,
            weight_range=args.weight_range,
            log_level=args.log_level,
            log_file=args.log_file,
        )
