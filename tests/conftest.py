import logging

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers setup_logging() attached so they never outlive capsys."""
    yield
    log = logging.getLogger("ascii_coloriser")
    for handler in log.handlers:
        handler.close()
    log.handlers.clear()
    log.setLevel(logging.NOTSET)
