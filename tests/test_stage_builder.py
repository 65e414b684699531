"""Tests for the ideal-stage search.

The ideal stage is the cut at which the separation factor on the
enriching side equals the one on the stripping side.
"""

import pytest

from cascade_sim.cascade_tools import InvalidParameterError, RootFindingError
from cascade_sim.design.centrifuge import separative_power
from cascade_sim.design.stage_builder import build_ideal_stage, build_stage, cut_for_ideal_stage


def test_ideal_stage_is_symmetric(centrifuge):
    stg = build_ideal_stage(0.0071, centrifuge)
    assert abs(stg.alpha - stg.beta) < 1e-8
    assert 0.2 < stg.cut < 0.6
    assert 1.1 < stg.alpha < 1.5
    assert stg.product_assay > stg.feed_assay > stg.tail_assay
    assert stg.flow is None and stg.n_machines is None


def test_ideal_stage_populates_separative_power(centrifuge):
    stg = build_ideal_stage(0.0071, centrifuge)
    assert stg.DU == pytest.approx(separative_power(stg.cut, centrifuge))


def test_ideal_stage_tail_closes_mass_balance(centrifuge):
    stg = build_ideal_stage(0.03, centrifuge)
    lever = stg.cut * stg.product_assay + (1.0 - stg.cut) * stg.tail_assay
    assert lever == pytest.approx(stg.feed_assay, rel=1e-9)


def test_ideal_cut_across_assays(centrifuge):
    for a in (0.001, 0.0071, 0.05, 0.2, 0.9):
        stg = build_ideal_stage(a, centrifuge)
        assert 0.0 < stg.cut < 1.0
        assert abs(stg.alpha - stg.beta) < 1e-8


def test_build_stage_at_given_cut(centrifuge):
    stg = build_stage(0.0071, 0.3, centrifuge)
    assert stg.cut == 0.3
    # below the ideal cut the stripping side separates less
    assert stg.alpha > stg.beta > 1.0


def test_no_bracket_raises(centrifuge):
    # alpha < beta over the whole interval
    with pytest.raises(RootFindingError):
        cut_for_ideal_stage(0.0071, centrifuge, cut_bounds=(0.6, 0.9))


def test_iteration_cap_raises(centrifuge):
    with pytest.raises(RootFindingError):
        cut_for_ideal_stage(0.0071, centrifuge, precision=0.0, max_iter=3)


def test_feed_assay_domain(centrifuge):
    with pytest.raises(InvalidParameterError):
        build_ideal_stage(0.0, centrifuge)
    with pytest.raises(InvalidParameterError):
        build_ideal_stage(1.0, centrifuge)
