import pytest

from cascade_sim.cascade_tools import CentrifugeConfig
from cascade_sim.design import assemble_cascade

FEED = 0.0071
PRODUCT = 0.05
WASTE = 0.0025


@pytest.fixture
def centrifuge():
    return CentrifugeConfig()


@pytest.fixture
def ideal_cascade(centrifuge):
    return assemble_cascade(FEED, PRODUCT, WASTE, centrifuge)
