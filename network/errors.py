# network/errors.py


class NetworkError(Exception):
    """Base class for every error raised by the network package."""


class ConfigurationError(NetworkError, ValueError):
    pass


class InvalidNodeKind(ConfigurationError):
    pass


class DimensionMismatch(ConfigurationError):
    pass


class NumericalInstability(NetworkError, ArithmeticError):
    pass
