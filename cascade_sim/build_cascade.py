from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .inputs import InputParameters
from .cascade_tools import CascadeConfig, CentrifugeConfig
from .design import (
    assemble_cascade,
    cascade_separative_power,
    compute_assays,
    design_cascade,
    external_flows,
    find_total_machines,
    machines_per_cascade,
    separative_power_by_cascade,
)

logger = logging.getLogger(__name__)


def build_cascade(
    *,
    feed_assay: float = InputParameters.FEED_ASSAY,
    product_assay: float = InputParameters.PRODUCT_ASSAY,
    waste_assay: float = InputParameters.WASTE_ASSAY,
    max_feed_flow: float = InputParameters.MAX_FEED_FLOW_KG_S,
    max_centrifuges: int = InputParameters.MAX_CENTRIFUGES,
    centrifuge: Optional[CentrifugeConfig] = None,
    stage_precision: float = InputParameters.STAGE_PRECISION,
    assay_precision: float = InputParameters.ASSAY_PRECISION,
) -> CascadeConfig:
    """
    Full design in the required order:
      1) ideal stage chain bracketing the product/waste targets
      2) actual assays and cuts at steady-state flow (fixed point)
      3) feed flow scaled to the feed and machine caps
    """
    centrifuge = centrifuge or CentrifugeConfig.from_inputs()
    logger.info(
        "Designing cascade: feed %.6g -> product %.6g / waste %.6g",
        feed_assay, product_assay, waste_assay,
    )
    cascade = assemble_cascade(feed_assay, product_assay, waste_assay, centrifuge, stage_precision)
    compute_assays(cascade, feed_assay, assay_precision)
    design_cascade(cascade, max_feed_flow, max_centrifuges)
    return cascade


def summarize_cascade(cascade: CascadeConfig, feed_assay: float) -> Dict[str, Any]:
    flows = external_flows(cascade)
    total_machines = find_total_machines(cascade)
    feed_stage = cascade.stages[0]
    U = cascade_separative_power(
        feed_assay, cascade.product_assay, cascade.tail_assay, flows["feed"], flows["product"]
    )
    return {
        "n_enrich": int(cascade.n_enrich),
        "n_strip": int(cascade.n_strip),
        "n_stages": int(cascade.n_stages),
        "feed_flow": flows["feed"],
        "product_flow": flows["product"],
        "waste_flow": flows["waste"],
        "feed_assay": float(feed_assay),
        "product_assay": float(cascade.product_assay),
        "tail_assay": float(cascade.tail_assay),
        "total_machines": int(total_machines),
        "separative_power_cascade": float(U),
        "machines_ideal_estimate": float(machines_per_cascade(
            feed_stage.DU, feed_assay, cascade.product_assay, cascade.tail_assay,
            flows["feed"], flows["product"],
        )),
        "separative_power_per_machine": float(separative_power_by_cascade(
            feed_assay, cascade.product_assay, cascade.tail_assay,
            flows["feed"], flows["product"], total_machines,
        )),
    }
