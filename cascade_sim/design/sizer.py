from __future__ import annotations

import logging

from ..cascade_tools import (
    CascadeConfig,
    InfeasibleConstraintsError,
    InvalidParameterError,
)
from ..inputs import InputParameters
from .flow_solver import calc_feed_flows

logger = logging.getLogger(__name__)


def find_total_machines(cascade: CascadeConfig) -> int:
    total = 0
    for i in cascade.stage_indices():
        n = cascade.stages[i].n_machines
        if n is None:
            raise InvalidParameterError(f"stage {i} has no machine count; solve flows first")
        total += int(n)
    return int(total)


def design_cascade(
    cascade: CascadeConfig,
    max_feed_flow: float,
    max_centrifuges: int,
    *,
    max_iter: int = InputParameters.SIZING_MAX_ITER,
) -> CascadeConfig:
    """
    Size the cascade for the largest feed flow that respects both caps.

    Starts from max_feed_flow and scales the feed down by
    max_centrifuges / machines_needed until the machine count fits.
    Stage cuts (and so assays) are unchanged; flows scale linearly.
    """
    if max_feed_flow <= 0:
        raise InvalidParameterError(f"max_feed_flow must be > 0, got {max_feed_flow}")
    if int(max_centrifuges) <= 0:
        raise InvalidParameterError(f"max_centrifuges must be > 0, got {max_centrifuges}")
    cascade.check_topology()

    max_centrifuges = int(max_centrifuges)
    if cascade.n_stages > max_centrifuges:
        raise InfeasibleConstraintsError(
            f"{cascade.n_stages} stages need at least {cascade.n_stages} machines, "
            f"cap is {max_centrifuges}"
        )

    feed = float(max_feed_flow)
    cascade.feed_flow = feed
    calc_feed_flows(cascade)
    machines_needed = find_total_machines(cascade)

    it = 0
    while machines_needed > max_centrifuges:
        it += 1
        if it > max_iter:
            raise InfeasibleConstraintsError(
                f"could not fit cascade within {max_centrifuges} machines after {max_iter} "
                f"rescalings (still {machines_needed} at feed {feed:.6g})"
            )
        scaling_ratio = float(machines_needed) / float(max_centrifuges)
        feed = feed / scaling_ratio
        cascade.feed_flow = feed
        calc_feed_flows(cascade)
        machines_needed = find_total_machines(cascade)
        logger.debug("rescale %d: feed %.6g -> %d machines", it, feed, machines_needed)

    logger.info(
        "Cascade sized: feed %.6g, %d machines (cap %d), %d rescalings",
        feed, machines_needed, max_centrifuges, it,
    )
    return cascade
