"""Tests for the steady-state flow balance across the cascade."""

import numpy as np
import pytest

from cascade_sim.cascade_tools import InvalidParameterError, SingularSystemError
from cascade_sim.design import (
    assemble_cascade,
    build_flow_equations,
    calc_feed_flows,
    external_flows,
    solve_stage_flows,
)
from cascade_sim.linalg import solve_linear_system


def test_system_sized_to_stage_count(ideal_cascade):
    A, b = build_flow_equations(ideal_cascade)
    n = ideal_cascade.n_stages
    assert A.shape == (n, n)
    assert b.shape == (n,)
    # tridiagonal
    assert np.all(np.triu(A, 2) == 0) and np.all(np.tril(A, -2) == 0)
    assert np.all(np.diag(A) == -1.0)
    r0 = ideal_cascade.n_strip
    assert b[r0] == -ideal_cascade.feed_flow
    assert np.count_nonzero(b) == 1


def test_matrix_coefficients_follow_neighbour_cuts(ideal_cascade):
    c = ideal_cascade
    A, _ = build_flow_equations(c)
    r0 = c.n_strip
    assert A[r0, r0 - 1] == c.stages[-1].cut
    assert A[r0, r0 + 1] == pytest.approx(1.0 - c.stages[1].cut)


def test_one_flow_per_stage(ideal_cascade):
    flows = solve_stage_flows(ideal_cascade)
    assert sorted(flows) == list(ideal_cascade.stage_indices())
    assert all(f > 0 for f in flows.values())


def test_feed_stage_receives_cascade_feed(ideal_cascade):
    c = calc_feed_flows(ideal_cascade)
    s = c.stages
    internal = s[-1].product_flow + s[1].tail_flow
    assert s[0].flow - internal == pytest.approx(c.feed_flow, rel=1e-9)


def test_every_stage_balances(ideal_cascade):
    c = calc_feed_flows(ideal_cascade)
    for i in c.stage_indices():
        inflow = 0.0
        if i - 1 in c.stages:
            inflow += c.stages[i - 1].product_flow
        if i + 1 in c.stages:
            inflow += c.stages[i + 1].tail_flow
        if i == 0:
            inflow += c.feed_flow
        assert c.stages[i].flow == pytest.approx(inflow, rel=1e-9)


def test_mass_conservation(ideal_cascade):
    c = calc_feed_flows(ideal_cascade)
    ext = external_flows(c)
    assert ext["product"] + ext["waste"] == pytest.approx(ext["feed"], rel=1e-10)
    assert 0.0 < ext["product"] < ext["feed"]


def test_flows_scale_with_feed(ideal_cascade):
    f1 = solve_stage_flows(ideal_cascade)
    ideal_cascade.feed_flow *= 3.0
    f3 = solve_stage_flows(ideal_cascade)
    for i in f1:
        assert f3[i] == pytest.approx(3.0 * f1[i], rel=1e-10)


def test_machine_counts_set(ideal_cascade):
    c = calc_feed_flows(ideal_cascade)
    for s in c.stages.values():
        assert isinstance(s.n_machines, int) and s.n_machines >= 1


def test_single_stage_cascade(centrifuge):
    c = assemble_cascade(0.0071, 0.0071, 0.0071, centrifuge, feed_flow=2.0)
    flows = solve_stage_flows(c)
    assert list(flows) == [0]
    assert flows[0] == pytest.approx(2.0)


def test_singular_system_reported(ideal_cascade):
    # closing both ends makes every column sum to zero
    ideal_cascade.stages[-ideal_cascade.n_strip].cut = 1.0
    ideal_cascade.stages[ideal_cascade.n_enrich].cut = 0.0
    with pytest.raises(SingularSystemError):
        solve_stage_flows(ideal_cascade)


def test_topology_gap_rejected(ideal_cascade):
    del ideal_cascade.stages[1]
    with pytest.raises(InvalidParameterError):
        build_flow_equations(ideal_cascade)


def test_linear_solver_seam():
    sol = solve_linear_system(np.array([[2.0, 0.0], [0.0, 4.0]]), np.array([2.0, 2.0]))
    assert sol.ok
    assert np.allclose(sol.x, [1.0, 0.5])

    bad = solve_linear_system(np.array([[1.0, 2.0], [2.0, 4.0]]), np.array([1.0, 1.0]))
    assert not bad.ok and bad.x is None

    mismatch = solve_linear_system(np.eye(2), np.ones(3))
    assert not mismatch.ok
