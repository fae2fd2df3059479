import logging

import numpy as np
import pytest

from odefinder_pkg.logging_config import PACKAGE_LOGGER
from odefinder_pkg.symbolic_regression import Dataset
from odefinder_pkg.symbolic_regression import default_registry


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def cosine_dataset():
    """Samples of x(t) = -cos(t) at t = 0..4."""
    return Dataset.from_function(lambda t: -np.cos(t), np.arange(0.0, 5.0))


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI runs so they do not outlive the test."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
