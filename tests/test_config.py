import logging

import pytest

from mathmesh.config import DEFAULT_LIMITS, EngineLimits, with_overrides
from mathmesh.errors import InvalidParameter
from mathmesh.request import GeometryRequest


def test_defaults():
    assert DEFAULT_LIMITS.max_hopf_fibers == 50
    assert DEFAULT_LIMITS.max_ribbon_fibers == 40
    assert DEFAULT_LIMITS.max_sierpinski_depth == 4
    assert DEFAULT_LIMITS.max_koch_depth == 5
    assert DEFAULT_LIMITS.max_julia_resolution == 60


@pytest.mark.parametrize('value', [0, -3, 2.5, True])
def test_limits_must_be_positive_integers(value):
    with pytest.raises(InvalidParameter):
        EngineLimits(max_hopf_fibers=value)


def test_from_mapping_warns_on_unknown_keys(caplog):
    with caplog.at_level(logging.WARNING, logger='mathmesh.config'):
        limits = EngineLimits.from_mapping({'max_koch_depth': '3', 'max_widgets': 7})
    assert limits.max_koch_depth == 3
    assert 'max_widgets' in caplog.text


def test_with_overrides():
    limits = with_overrides(max_julia_resolution=20)
    assert limits.max_julia_resolution == 20
    assert limits.max_hopf_fibers == DEFAULT_LIMITS.max_hopf_fibers
    assert DEFAULT_LIMITS.max_julia_resolution == 60


def test_clamp_delegates():
    limits = EngineLimits(max_hopf_fibers=3)
    assert limits.clamp(GeometryRequest('hopf_fibration', complexity=10)).complexity == 3
