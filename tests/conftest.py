"""Root conftest -- headless matplotlib, loguru capture, fake font registry."""

import matplotlib

matplotlib.use("Agg")

import pytest
from loguru import logger

from apde_graphs.fonts import StaticFontResolver

# Stand-in for a host font registry; deliberately has no Arial
HOST_FAMILIES = ["DejaVu Sans", "DejaVu Serif", "Liberation Sans", "Georgia"]


@pytest.fixture()
def resolver() -> StaticFontResolver:
    return StaticFontResolver(HOST_FAMILIES)


@pytest.fixture()
def arial_resolver() -> StaticFontResolver:
    return StaticFontResolver(["Arial", "Arial Black", "DejaVu Sans"])


@pytest.fixture()
def log_records():
    """Collect loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    import matplotlib.pyplot as plt

    plt.close("all")
