from __future__ import annotations

import math

from ..cascade_tools import CentrifugeConfig, InvalidParameterError, check_assay
from ..inputs import InputParameters


def _check_cut(cut: float) -> float:
    cut = float(cut)
    if not (0.0 < cut < 1.0):
        raise InvalidParameterError(f"cut must be in (0,1), got {cut}")
    return cut


def _check_factor(f: float, name: str) -> float:
    f = float(f)
    if not (f > 1.0) or not math.isfinite(f):
        raise InvalidParameterError(f"{name} must be > 1, got {f}")
    return f


# ------------------------------------------------------------------------------
# SINGLE MACHINE
# ------------------------------------------------------------------------------

def thermal_exponent(v_a: float, temp: float, dM: float,
                     gas_const: float = InputParameters.GAS_CONST_J_K_MOL) -> float:
    """Peripheral energy ratio dM * v_a^2 / (2 R T)."""
    if v_a <= 0 or temp <= 0 or dM <= 0 or gas_const <= 0:
        raise InvalidParameterError(
            f"v_a, temp, dM, gas_const must be > 0 (got {v_a}, {temp}, {dM}, {gas_const})"
        )
    return (dM * v_a ** 2) / (2.0 * gas_const * temp)


def withdrawal_radius_ratio(centrifuge: CentrifugeConfig) -> float:
    """
    r1/r2 from the isothermal pressure profile: the light fraction is
    withdrawn where the pressure has dropped by the factor x.
    """
    c = centrifuge.constants
    if centrifuge.x <= 1.0:
        raise InvalidParameterError(f"pressure ratio x must be > 1, got {centrifuge.x}")
    radicand = 1.0 - (2.0 * c.gas_const * centrifuge.temp * math.log(centrifuge.x)
                      / centrifuge.M / centrifuge.v_a ** 2)
    if radicand <= 0.0:
        raise InvalidParameterError(
            f"pressure ratio {centrifuge.x} too large for v_a={centrifuge.v_a}, T={centrifuge.temp}"
        )
    return math.sqrt(radicand)


def separative_power(cut: float, centrifuge: CentrifugeConfig) -> float:
    """
    Separative power of one machine at a given cut, Raetz equation
    (Glaser, Science and Global Security 16, 2008, eqs. 3, 10, 12).

    Returned in the units of centrifuge.feed (kg/s); divide by M for mol/s.
    """
    cut = _check_cut(cut)
    centrifuge.validate()

    c = centrifuge.constants
    H = centrifuge.height
    F = centrifuge.feed
    L = centrifuge.flow_internal

    a = centrifuge.diameter / 2.0
    r_2 = c.r2_fraction * a
    r_12 = withdrawal_radius_ratio(centrifuge)
    r_1 = r_2 * r_12

    # axial position of the feed
    Z_p = H * (1.0 - cut) * (1.0 + L) / (1.0 - cut + L)

    C1 = 2.0 * math.pi * c.D_rho / math.log(r_2 / r_1)
    A_p = C1 * (1.0 / F) * (cut / ((1.0 + L) * (1.0 - cut + L)))
    A_w = C1 * (1.0 / F) * ((1.0 - cut) / (L * (1.0 - cut + L)))

    C_therm = thermal_exponent(centrifuge.v_a, centrifuge.temp, centrifuge.dM, c.gas_const)

    C_scale = (r_2 / a) ** 4 * (1.0 - r_12 ** 2) ** 2
    enrich_term = (1.0 + L) / cut * (1.0 - math.exp(-A_p * Z_p))
    strip_term = L / (1.0 - cut) * (1.0 - math.exp(-A_w * (H - Z_p)))

    major_term = 0.5 * cut * (1.0 - cut) * C_therm ** 2 * C_scale * (enrich_term + strip_term) ** 2
    return F * major_term * centrifuge.eff


def value_function(assay: float) -> float:
    x = check_assay(assay)
    return (2.0 * x - 1.0) * math.log(x / (1.0 - x))


def alpha_by_separative_power(DU: float, feed: float, cut: float, M: float) -> float:
    """Separation factor from separative power (Avery & Davies, p. 18)."""
    cut = _check_cut(cut)
    if feed <= 0 or M <= 0:
        raise InvalidParameterError(f"feed and M must be > 0 (got {feed}, {M})")
    bracket = 2.0 * (DU / M) * (1.0 - cut) / (cut * feed)
    if bracket < 0.0:
        raise InvalidParameterError(f"negative separative power term ({bracket}); DU={DU}")
    return 1.0 + math.sqrt(bracket)


# ------------------------------------------------------------------------------
# IDEAL STAGE ASSAYS
# ------------------------------------------------------------------------------

def product_assay_by_alpha(alpha: float, feed_assay: float) -> float:
    x = check_assay(feed_assay, "feed_assay")
    ratio = alpha * x / (1.0 - x)
    return ratio / (1.0 + ratio)


def tail_assay_by_beta(beta: float, feed_assay: float) -> float:
    x = check_assay(feed_assay, "feed_assay")
    A = x / (1.0 - x) / beta
    return A / (1.0 + A)


def tail_assay_by_cut(alpha: float, feed_assay: float, cut: float) -> float:
    """Tail assay closing the stage mass balance; may fall outside (0,1)."""
    x_p = product_assay_by_alpha(alpha, feed_assay)
    return (feed_assay - cut * x_p) / (1.0 - cut)


def beta_by_alpha_and_cut(alpha: float, feed_assay: float, cut: float) -> float:
    cut = _check_cut(cut)
    x = check_assay(feed_assay, "feed_assay")
    x_w = tail_assay_by_cut(alpha, x, cut)
    if not (0.0 < x_w < 1.0):
        raise InvalidParameterError(
            f"cut {cut} with alpha {alpha} gives tail assay {x_w} outside (0,1)"
        )
    return x / (1.0 - x) * (1.0 - x_w) / x_w


def cut_by_alpha_beta(alpha: float, beta: float, feed_assay: float) -> float:
    alpha = _check_factor(alpha, "alpha")
    beta = _check_factor(beta, "beta")
    x_p = product_assay_by_alpha(alpha, feed_assay)
    x_w = tail_assay_by_beta(beta, feed_assay)
    return (feed_assay - x_w) / (x_p - x_w)


def product_assay_from_n_stages(alpha: float, feed_assay: float, n_stages: float) -> float:
    x = check_assay(feed_assay, "feed_assay")
    A = x / (1.0 - x) * alpha ** n_stages
    return A / (1.0 + A)


def tail_assay_from_n_stages(beta: float, feed_assay: float, n_stages: float) -> float:
    x = check_assay(feed_assay, "feed_assay")
    A = x / (1.0 - x) / beta ** n_stages
    return A / (1.0 + A)


# ------------------------------------------------------------------------------
# MACHINE COUNTS AND CASCADE SEPARATIVE WORK
# ------------------------------------------------------------------------------

def machines_per_stage(alpha: float, DU: float, stage_feed: float) -> float:
    """Machines needed for a stage feed flow (Avery & Davies, p. 62)."""
    alpha = _check_factor(alpha, "alpha")
    if DU <= 0:
        raise InvalidParameterError(f"separative power must be > 0, got {DU}")
    return stage_feed / (2.0 * DU / (alpha - 1.0) ** 2)


def cascade_separative_power(feed_assay: float, product_assay: float, waste_assay: float,
                             feed_flow: float, product_flow: float) -> float:
    waste_flow = feed_flow - product_flow
    return (product_flow * value_function(product_assay)
            + waste_flow * value_function(waste_assay)
            - feed_flow * value_function(feed_assay))


def machines_per_cascade(DU_machine: float, feed_assay: float, product_assay: float,
                         waste_assay: float, feed_flow: float, product_flow: float) -> float:
    if DU_machine <= 0:
        raise InvalidParameterError(f"separative power must be > 0, got {DU_machine}")
    U = cascade_separative_power(feed_assay, product_assay, waste_assay, feed_flow, product_flow)
    return U / DU_machine


def separative_power_by_cascade(feed_assay: float, product_assay: float, waste_assay: float,
                                feed_flow: float, product_flow: float, n_machines: int) -> float:
    """Effective per-machine separative power of a realised cascade."""
    if n_machines <= 0:
        raise InvalidParameterError(f"n_machines must be > 0, got {n_machines}")
    U = cascade_separative_power(feed_assay, product_assay, waste_assay, feed_flow, product_flow)
    return U / float(n_machines)
