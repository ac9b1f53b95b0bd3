from unittest.mock import Mock

import pytest

from http_router import Router


@pytest.fixture
def funct():
    """Mock function for testing purposes."""
    return Mock(__name__="Mock")


@pytest.fixture
def router():
    """Empty router without log handlers."""
    return Router.create(configure_logs=False)
