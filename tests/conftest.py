import logging
import random

import pytest


@pytest.fixture(autouse=True)
def reset_bpsim_logger():
    """Drop handlers installed by setup_logging so they do not outlive a test."""
    yield
    logger = logging.getLogger("bpsim")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_trace(tmp_path):
    """Write trace lines to a file under tmp_path and return its path."""

    def _write(lines, name="trace.txt"):
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines))
        return path

    return _write


@pytest.fixture
def random_records():
    """Reproducible (pc, taken) pairs over a small set of branch addresses."""
    rng = random.Random(1234)
    pcs = [0x400000 + 4 * rng.randint(0, 255) for _ in range(24)]

    def _records(count=2000):
        return [(rng.choice(pcs), rng.random() < 0.6) for _ in range(count)]

    return _records
