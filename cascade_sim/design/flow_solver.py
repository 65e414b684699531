from __future__ import annotations

import logging
import math
from typing import Dict, Tuple

import numpy as np

from ..cascade_tools import CascadeConfig, InvalidParameterError, SingularSystemError
from ..linalg import solve_linear_system
from .centrifuge import machines_per_stage

logger = logging.getLogger(__name__)


def build_flow_equations(cascade: CascadeConfig) -> Tuple[np.ndarray, np.ndarray]:
    """
    Steady-state balance A F = b over all stages, ordered bottom (-n_strip)
    to top (n_enrich). Row r (stage i = r - n_strip):

        cut_{i-1} F_{i-1} - F_i + (1 - cut_{i+1}) F_{i+1} = -F_ext,i

    For 2 stripping + 2 enriching stages with a common cut c:

        [[-1, 1-c,   0,   0,   0]       [[ 0]
         [ c,  -1, 1-c,   0,   0]        [ 0]
         [ 0,   c,  -1, 1-c,   0]  F  =  [-F]
         [ 0,   0,   c,  -1, 1-c]        [ 0]
         [ 0,   0,   0,   c,  -1]]       [ 0]]
    """
    cascade.check_topology()
    if cascade.feed_flow <= 0:
        raise InvalidParameterError(f"cascade feed_flow must be > 0, got {cascade.feed_flow}")

    n = cascade.n_stages
    A = np.zeros((n, n), dtype=float)
    b = np.zeros(n, dtype=float)
    for r, i in enumerate(cascade.stage_indices()):
        A[r, r] = -1.0
        if r > 0:
            A[r, r - 1] = cascade.stages[i - 1].cut
        if r < n - 1:
            A[r, r + 1] = 1.0 - cascade.stages[i + 1].cut
        if i == 0:
            b[r] = -1.0 * cascade.feed_flow
    return A, b


def solve_stage_flows(cascade: CascadeConfig) -> Dict[int, float]:
    A, b = build_flow_equations(cascade)
    sol = solve_linear_system(A, b)
    if not sol.ok or sol.x is None:
        raise SingularSystemError(
            f"no consistent steady-state flow for {cascade.n_stages} stages: {sol.message}"
        )
    if np.any(sol.x <= 0.0):
        raise SingularSystemError(f"steady-state solve gave non-positive stage flows: {sol.x}")
    return {i: float(sol.x[r]) for r, i in enumerate(cascade.stage_indices())}


def calc_stage_features(cascade: CascadeConfig) -> CascadeConfig:
    """Machines per stage from the current stage flows (rounded up, at least one)."""
    for i in cascade.stage_indices():
        stg = cascade.stages[i]
        if stg.flow is None:
            raise InvalidParameterError(f"stage {i} has no flow; solve flows first")
        n = machines_per_stage(stg.alpha, stg.DU, stg.flow)
        stg.n_machines = max(1, int(math.ceil(n)))
    return cascade


def calc_feed_flows(cascade: CascadeConfig) -> CascadeConfig:
    flows = solve_stage_flows(cascade)
    for i, f in flows.items():
        cascade.stages[i].flow = f
    return calc_stage_features(cascade)


def external_flows(cascade: CascadeConfig) -> Dict[str, float]:
    """Streams crossing the cascade boundary."""
    return {
        "feed": float(cascade.feed_flow),
        "product": float(cascade.product_flow),
        "waste": float(cascade.waste_flow),
    }
