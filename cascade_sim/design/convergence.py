from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from ..cascade_tools import (
    CascadeConfig,
    ConvergenceError,
    check_assay,
    max_abs_change,
    snapshot_assays,
)
from ..inputs import InputParameters
from .centrifuge import cut_by_alpha_beta, product_assay_by_alpha, tail_assay_by_beta
from .flow_solver import calc_feed_flows

logger = logging.getLogger(__name__)


def update_enrichment(cascade: CascadeConfig, feed_assay: float) -> CascadeConfig:
    """
    Re-mix every stage's feed from its neighbours' outlets, then re-derive
    product and tail assays with the stage's fixed alpha and beta.

    All stages read the assays and flows of the previous pass.
    """
    feed_assay = check_assay(feed_assay, "feed_assay")
    # (product_flow, product_assay, tail_flow, tail_assay) of the previous pass
    prev: Dict[int, Tuple[float, float, float, float]] = {
        i: (s.product_flow, s.product_assay, s.tail_flow, s.tail_assay)
        for i, s in cascade.stages.items()
    }
    for i in cascade.stage_indices():
        stg = cascade.stages[i]
        inflow = 0.0
        u235 = 0.0
        if i - 1 in prev:
            P, x_p, _, _ = prev[i - 1]
            inflow += P
            u235 += P * x_p
        if i + 1 in prev:
            _, _, W, x_w = prev[i + 1]
            inflow += W
            u235 += W * x_w
        if i == 0:
            inflow += cascade.feed_flow
            u235 += cascade.feed_flow * feed_assay

        stg.feed_assay = check_assay(u235 / inflow, f"stage {i} feed_assay")
        stg.product_assay = product_assay_by_alpha(stg.alpha, stg.feed_assay)
        stg.tail_assay = tail_assay_by_beta(stg.beta, stg.feed_assay)
    return cascade


def update_cuts(cascade: CascadeConfig) -> CascadeConfig:
    for i in cascade.stage_indices():
        stg = cascade.stages[i]
        stg.cut = cut_by_alpha_beta(stg.alpha, stg.beta, stg.feed_assay)
    return cascade


def diff_enrichment(actual: CascadeConfig, previous: CascadeConfig) -> float:
    return max_abs_change(snapshot_assays(previous), snapshot_assays(actual))


def remaining_distance(err: float, ratios: List[float]) -> float:
    """
    Bound on the distance to the fixed point after a pass of size err.

    The passes contract linearly near the fixed point, so with a contraction
    rate rho the steps still to come sum to at most err / (1 - rho). rho is
    the slowest of the recent step ratios.
    """
    if not ratios:
        return float("inf")
    rho = max(ratios)
    if rho >= 1.0:
        return float("inf")
    return err / (1.0 - rho)


def compute_assays(
    cascade: CascadeConfig,
    feed_assay: float,
    precision: float = InputParameters.ASSAY_PRECISION,
    *,
    max_iter: int = InputParameters.ASSAY_MAX_ITER,
) -> CascadeConfig:
    """
    Fixed point between stage assays and steady-state flows.

    The ideal design is the starting guess; each pass mixes feeds, updates
    assays and cuts, then re-solves the flows. Converged once both the last
    step and the bound on the distance left to the fixed point are below
    precision. Mutates and returns cascade.
    """
    cascade.check_topology()
    if not cascade.has_flows():
        calc_feed_flows(cascade)

    prev_snap: Dict = snapshot_assays(cascade)
    err = float("inf")
    prev_err = None
    ratios: List[float] = []
    for it in range(1, max_iter + 1):
        update_enrichment(cascade, feed_assay)
        update_cuts(cascade)
        calc_feed_flows(cascade)

        curr_snap = snapshot_assays(cascade)
        err = max_abs_change(prev_snap, curr_snap)
        if prev_err is not None and prev_err > 0.0:
            ratios = (ratios + [err / prev_err])[-2:]
        left = remaining_distance(err, ratios)
        logger.debug("assay pass %d: max change %.3e, distance bound %.3e", it, err, left)

        if err <= InputParameters.ASSAY_ROUNDOFF or (err < precision and left < precision):
            logger.info(
                "Assays converged after %d passes (product %.6g, tail %.6g)",
                it, cascade.product_assay, cascade.tail_assay,
            )
            return cascade
        prev_snap = curr_snap
        prev_err = err

    raise ConvergenceError(
        f"Stage assays did not converge after {max_iter} passes "
        f"(last change {err:.3e}, precision {precision})."
    )
