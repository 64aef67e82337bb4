import pytest

from accreverse.base.star import Star
from accreverse.config import Config
from accreverse.context import GenerationContext


@pytest.fixture
def sun():
    star = Star({"spectral_class": "G", "subtype": 2, "name": "Sol", "age": 4.6e9})
    star.evaluate()
    return star


@pytest.fixture
def messages():
    return []


@pytest.fixture
def ctx(sun, messages):
    return GenerationContext(Config(seed=7), sun, rng=7, console=messages.append)
