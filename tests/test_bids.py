"""Tests for ordering bids by enrichment level."""

import pytest

from cascade_sim.bids import Bid, bid_precedes, sort_bids
from cascade_sim.cascade_tools import InvalidParameterError


def test_bid_assay():
    assert Bid("leu", 10.0, 0.5).assay == pytest.approx(0.05)


def test_strict_ordering():
    low = Bid("natu", 100.0, 0.71)
    high = Bid("leu", 10.0, 0.45)
    assert bid_precedes(low, high)
    assert not bid_precedes(high, low)
    assert not bid_precedes(low, Bid("natu2", 200.0, 1.42))


def test_sort_bids_ascending_and_stable():
    a = Bid("a", 10.0, 0.45)
    b = Bid("b", 100.0, 0.71)
    c = Bid("c", 20.0, 0.9)
    d = Bid("d", 10.0, 0.071)
    assert [x.commodity for x in sort_bids([a, b, c, d])] == ["b", "d", "a", "c"]


def test_invalid_bids():
    with pytest.raises(InvalidParameterError):
        Bid("x", 0.0, 0.0)
    with pytest.raises(InvalidParameterError):
        Bid("x", 1.0, 2.0)


def test_assay_of_very_small_bid():
    assert Bid("trace", 1e-40, 5e-42).assay == pytest.approx(0.05)
