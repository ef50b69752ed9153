# Error taxonomy for the PAD screening model


class ModelError(Exception):
    """Base class for every error raised by the model."""


class ConfigurationError(ModelError, ValueError):
    """Invalid parameter set or run request; raised before any simulation."""


class SimulationError(ModelError, RuntimeError):
    """An invariant broke while advancing a cohort (e.g. a draw exceeded the pool)."""
