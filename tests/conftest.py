import pytest

from gpclass_jax.config import enable_x64

enable_x64()


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: full-scale end-to-end run")
