from __future__ import annotations

import logging
import math
from typing import Tuple

import numpy as np

from ..cascade_tools import CentrifugeConfig, RootFindingError, StageConfig, check_assay
from ..inputs import InputParameters
from .centrifuge import (
    alpha_by_separative_power,
    beta_by_alpha_and_cut,
    product_assay_by_alpha,
    separative_power,
    tail_assay_by_beta,
    tail_assay_by_cut,
)

logger = logging.getLogger(__name__)


def build_stage(feed_assay: float, cut: float, centrifuge: CentrifugeConfig) -> StageConfig:
    """Single stage operated at a given cut; flow and machines left unset."""
    feed_assay = check_assay(feed_assay, "feed_assay")
    DU = separative_power(cut, centrifuge)
    alpha = alpha_by_separative_power(DU, centrifuge.feed, cut, centrifuge.M)
    beta = beta_by_alpha_and_cut(alpha, feed_assay, cut)
    return StageConfig(
        feed_assay=feed_assay,
        product_assay=product_assay_by_alpha(alpha, feed_assay),
        tail_assay=tail_assay_by_beta(beta, feed_assay),
        cut=float(cut),
        DU=float(DU),
        alpha=float(alpha),
        beta=float(beta),
    )


def _alpha_minus_beta(feed_assay: float, cut: float, centrifuge: CentrifugeConfig) -> float:
    DU = separative_power(cut, centrifuge)
    alpha = alpha_by_separative_power(DU, centrifuge.feed, cut, centrifuge.M)
    x_w = tail_assay_by_cut(alpha, feed_assay, cut)
    if not (0.0 < x_w < 1.0):
        # over-stripped: beta is unbounded
        return -math.inf
    return alpha - beta_by_alpha_and_cut(alpha, feed_assay, cut)


def cut_for_ideal_stage(
    feed_assay: float,
    centrifuge: CentrifugeConfig,
    precision: float = InputParameters.STAGE_PRECISION,
    *,
    cut_bounds: Tuple[float, float] = (InputParameters.CUT_LOWER, InputParameters.CUT_UPPER),
    max_iter: int = InputParameters.ROOT_MAX_ITER,
) -> float:
    """
    Cut at which alpha == beta (symmetric stage), by bisection.

    g(cut) = alpha - beta is positive at small cut (the tail barely moves
    away from the feed) and negative towards cut -> 1.
    """
    feed_assay = check_assay(feed_assay, "feed_assay")
    lo, hi = float(cut_bounds[0]), float(cut_bounds[1])
    if not (0.0 < lo < hi < 1.0):
        raise RootFindingError(f"invalid cut bracket ({lo}, {hi})")

    g_lo = _alpha_minus_beta(feed_assay, lo, centrifuge)
    g_hi = _alpha_minus_beta(feed_assay, hi, centrifuge)
    if not (np.sign(g_lo) * np.sign(g_hi) < 0):
        raise RootFindingError(
            f"no ideal cut bracketed in ({lo}, {hi}) for feed assay {feed_assay} "
            f"(alpha-beta = {g_lo:.6g}, {g_hi:.6g})"
        )
    s_lo = np.sign(g_lo)

    for it in range(1, max_iter + 1):
        mid = 0.5 * (lo + hi)
        g_mid = _alpha_minus_beta(feed_assay, mid, centrifuge)
        if abs(g_mid) < precision:
            logger.debug("ideal cut %.12g for feed %.6g after %d bisections", mid, feed_assay, it)
            return float(mid)
        if np.sign(g_mid) == s_lo:
            lo = mid
        else:
            hi = mid
        if hi - lo <= 4.0 * np.finfo(float).eps * mid:
            # bracket at float resolution; residual cannot shrink further
            logger.debug("ideal cut %.12g for feed %.6g at bracket resolution (|g|=%.3g)",
                         mid, feed_assay, abs(g_mid))
            return float(0.5 * (lo + hi))

    raise RootFindingError(
        f"ideal cut for feed assay {feed_assay} not found within {max_iter} bisections "
        f"(bracket [{lo}, {hi}], precision {precision})"
    )


def build_ideal_stage(
    feed_assay: float,
    centrifuge: CentrifugeConfig,
    precision: float = InputParameters.STAGE_PRECISION,
) -> StageConfig:
    cut = cut_for_ideal_stage(feed_assay, centrifuge, precision)
    return build_stage(feed_assay, cut, centrifuge)
