import copy

import matplotlib
import pytest

matplotlib.use("Agg")

from pad_screening.config import basic_config, staged_config  # noqa: E402
from pad_screening.parameters import build_parameter_set  # noqa: E402


class RecordingSource:
    """Random source stub: returns a fixed fraction of the pool and logs every draw."""

    def __init__(self, fraction=0.0):
        self.fraction = fraction
        self.calls = []

    def binomial(self, n, p):
        self.calls.append((n, p))
        return int(n * self.fraction)


class OverdrawingSource:
    def binomial(self, n, p):
        return n + 1


def make_config(base, **overrides):
    cfg = copy.deepcopy(base)
    cfg.update(overrides)
    return cfg


def zero_probabilities(cfg):
    cfg = copy.deepcopy(cfg)
    for table in cfg['transition_probabilities'].values():
        for kind in table:
            table[kind] = 0.0
    return cfg


@pytest.fixture
def basic_cfg():
    return copy.deepcopy(basic_config)


@pytest.fixture
def staged_cfg():
    return copy.deepcopy(staged_config)


@pytest.fixture
def basic_parameters():
    return build_parameter_set(basic_config)


@pytest.fixture
def staged_parameters():
    return build_parameter_set(staged_config)
