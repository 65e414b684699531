from __future__ import annotations

import logging
from typing import Dict

from ..cascade_tools import (
    AssemblyNonConvergenceError,
    CascadeConfig,
    CentrifugeConfig,
    InvalidParameterError,
    StageConfig,
    check_assay,
)
from ..inputs import InputParameters
from .stage_builder import build_ideal_stage

logger = logging.getLogger(__name__)


def assemble_cascade(
    feed_assay: float,
    product_assay: float,
    waste_assay: float,
    centrifuge: CentrifugeConfig,
    precision: float = InputParameters.STAGE_PRECISION,
    *,
    feed_flow: float = InputParameters.NOMINAL_FEED_FLOW,
    max_stages: int = InputParameters.MAX_STAGES,
) -> CascadeConfig:
    """
    Chain ideal stages up from the feed stage until the product target is
    reached and down until the waste target is reached.

    Stage counts are integers, so the end assays overshoot the targets.
    Flows and machine counts are left unset.
    """
    feed_assay = check_assay(feed_assay, "feed_assay")
    product_assay = check_assay(product_assay, "product_assay")
    waste_assay = check_assay(waste_assay, "waste_assay")
    if not (waste_assay <= feed_assay <= product_assay):
        raise InvalidParameterError(
            f"need waste <= feed <= product assay, got {waste_assay}, {feed_assay}, {product_assay}"
        )
    if feed_flow <= 0:
        raise InvalidParameterError(f"feed_flow must be > 0, got {feed_flow}")
    centrifuge.validate()

    stages: Dict[int, StageConfig] = {0: build_ideal_stage(feed_assay, centrifuge, precision)}

    # enriching section
    n_enrich = 0
    stg = stages[0]
    while stg.product_assay < product_assay:
        if n_enrich >= max_stages:
            raise AssemblyNonConvergenceError(
                f"product assay {product_assay} not reached within {max_stages} enriching stages "
                f"(reached {stg.product_assay:.6g})"
            )
        n_enrich += 1
        stg = build_ideal_stage(stg.product_assay, centrifuge, precision)
        stages[n_enrich] = stg

    # stripping section
    n_strip = 0
    stg = stages[0]
    while stg.tail_assay > waste_assay:
        if n_strip >= max_stages:
            raise AssemblyNonConvergenceError(
                f"waste assay {waste_assay} not reached within {max_stages} stripping stages "
                f"(reached {stg.tail_assay:.6g})"
            )
        n_strip += 1
        stg = build_ideal_stage(stg.tail_assay, centrifuge, precision)
        stages[-n_strip] = stg

    logger.info(
        "Ideal cascade: %d enriching + %d stripping stages (product %.6g, tail %.6g)",
        n_enrich, n_strip, stages[n_enrich].product_assay, stages[-n_strip].tail_assay,
    )

    cascade = CascadeConfig(
        centrifuge=centrifuge,
        n_enrich=n_enrich,
        n_strip=n_strip,
        feed_flow=float(feed_flow),
        stages={i: stages[i] for i in range(-n_strip, n_enrich + 1)},
    )
    return cascade
