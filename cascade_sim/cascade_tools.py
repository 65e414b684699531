from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional
import numpy as np
from openpyxl import Workbook

from .inputs import InputParameters


# ------------------------------------------------------------------------------
# ERRORS
# ------------------------------------------------------------------------------

class CascadeError(Exception):
    pass


class InvalidParameterError(CascadeError, ValueError):
    pass


class RootFindingError(CascadeError, RuntimeError):
    pass


class AssemblyNonConvergenceError(CascadeError, RuntimeError):
    pass


class SingularSystemError(CascadeError, RuntimeError):
    pass


class ConvergenceError(CascadeError, RuntimeError):
    pass


class InfeasibleConstraintsError(CascadeError, RuntimeError):
    pass


def check_assay(x: float, name: str = "assay") -> float:
    x = float(x)
    if not (0.0 < x < 1.0):
        raise InvalidParameterError(f"{name} must be in (0,1), got {x}")
    return x


# ------------------------------------------------------------------------------
# DATA MODEL
# ------------------------------------------------------------------------------

@dataclass(frozen=True)
class PhysicalConstants:
    gas_const: float = InputParameters.GAS_CONST_J_K_MOL
    D_rho: float = InputParameters.D_RHO_KG_M_S
    r2_fraction: float = InputParameters.WITHDRAWAL_RADIUS_FRACTION


@dataclass(frozen=True)
class CentrifugeConfig:
    """
    Physical and operating description of a single machine.

    Units: v_a [m/s], height/diameter [m], feed [kg/s], temp [K],
    M/dM [kg/mol]. x is the wall-to-axis pressure ratio and flow_internal
    the countercurrent flow multiplier L.
    """

    v_a: float = InputParameters.CENT_V_A_M_S
    height: float = InputParameters.CENT_HEIGHT_M
    diameter: float = InputParameters.CENT_DIAMETER_M
    feed: float = InputParameters.CENT_FEED_KG_S
    temp: float = InputParameters.CENT_TEMP_K
    eff: float = InputParameters.CENT_EFFICIENCY
    M: float = InputParameters.CENT_M_KG_MOL
    dM: float = InputParameters.CENT_DM_KG_MOL
    x: float = InputParameters.CENT_PRESSURE_RATIO
    flow_internal: float = InputParameters.CENT_FLOW_INTERNAL
    constants: PhysicalConstants = field(default_factory=PhysicalConstants)

    @classmethod
    def from_inputs(cls, params: Optional[InputParameters] = None) -> "CentrifugeConfig":
        p = params or InputParameters()
        return cls(
            v_a=p.CENT_V_A_M_S, height=p.CENT_HEIGHT_M, diameter=p.CENT_DIAMETER_M,
            feed=p.CENT_FEED_KG_S, temp=p.CENT_TEMP_K, eff=p.CENT_EFFICIENCY,
            M=p.CENT_M_KG_MOL, dM=p.CENT_DM_KG_MOL, x=p.CENT_PRESSURE_RATIO,
            flow_internal=p.CENT_FLOW_INTERNAL,
            constants=PhysicalConstants(
                gas_const=p.GAS_CONST_J_K_MOL, D_rho=p.D_RHO_KG_M_S,
                r2_fraction=p.WITHDRAWAL_RADIUS_FRACTION,
            ),
        )

    def validate(self) -> None:
        for f in fields(self):
            if f.name == "constants":
                continue
            v = getattr(self, f.name)
            if not (float(v) > 0.0):
                raise InvalidParameterError(f"centrifuge {f.name} must be > 0, got {v}")
        if self.x <= 1.0:
            raise InvalidParameterError(f"pressure ratio x must be > 1, got {self.x}")
        c = self.constants
        if c.gas_const <= 0 or c.D_rho <= 0:
            raise InvalidParameterError("physical constants must be > 0")
        if not (0.0 < c.r2_fraction <= 1.0):
            raise InvalidParameterError(f"r2_fraction must be in (0,1], got {c.r2_fraction}")

    def as_dict(self) -> Dict[str, float]:
        out = {f.name: float(getattr(self, f.name)) for f in fields(self) if f.name != "constants"}
        for f in fields(self.constants):
            out[f"const_{f.name}"] = float(getattr(self.constants, f.name))
        return out


@dataclass
class StageConfig:
    feed_assay: float
    product_assay: float
    tail_assay: float
    cut: float
    DU: float
    alpha: float
    beta: float
    flow: Optional[float] = None
    n_machines: Optional[int] = None

    @property
    def product_flow(self) -> float:
        return self.cut * self._flow()

    @property
    def tail_flow(self) -> float:
        return (1.0 - self.cut) * self._flow()

    def _flow(self) -> float:
        if self.flow is None:
            raise InvalidParameterError("stage flow not computed yet")
        return float(self.flow)


@dataclass
class CascadeConfig:
    centrifuge: CentrifugeConfig
    n_enrich: int = 0
    n_strip: int = 0
    feed_flow: float = InputParameters.NOMINAL_FEED_FLOW
    stages: Dict[int, StageConfig] = field(default_factory=dict)

    def stage_indices(self) -> range:
        return range(-self.n_strip, self.n_enrich + 1)

    @property
    def n_stages(self) -> int:
        return self.n_enrich + self.n_strip + 1

    @property
    def top(self) -> StageConfig:
        return self.stages[self.n_enrich]

    @property
    def bottom(self) -> StageConfig:
        return self.stages[-self.n_strip]

    @property
    def product_assay(self) -> float:
        return self.top.product_assay

    @property
    def tail_assay(self) -> float:
        return self.bottom.tail_assay

    @property
    def product_flow(self) -> float:
        return self.top.product_flow

    @property
    def waste_flow(self) -> float:
        return self.bottom.tail_flow

    def has_flows(self) -> bool:
        return bool(self.stages) and all(s.flow is not None for s in self.stages.values())

    def check_topology(self) -> None:
        expected = set(self.stage_indices())
        if set(self.stages.keys()) != expected:
            raise InvalidParameterError(
                f"stages must cover [{-self.n_strip}, {self.n_enrich}] without gaps, "
                f"got {sorted(self.stages.keys())}"
            )

    def copy(self) -> "CascadeConfig":
        return copy.deepcopy(self)


# ------------------------------------------------------------------------------
# ASSAY SNAPSHOTS
# ------------------------------------------------------------------------------

def snapshot_assays(cascade: CascadeConfig) -> Dict[int, np.ndarray]:
    snap: Dict[int, np.ndarray] = {}
    for i in cascade.stage_indices():
        s = cascade.stages[i]
        snap[i] = np.array([s.feed_assay, s.product_assay, s.tail_assay], dtype=float)
    return snap


def max_abs_change(prev: Dict[int, np.ndarray], curr: Dict[int, np.ndarray]) -> float:
    worst = 0.0
    for i, x0 in prev.items():
        x1 = curr[i]
        worst = max(worst, float(np.max(np.abs(x1 - x0))))
    return float(worst)


# ------------------------------------------------------------------------------
# EXCEL EXPORT
# ------------------------------------------------------------------------------

def _summarize_value(v: Any) -> Any:
    # single-cell value; unsolved flows/machine counts export blank
    if isinstance(v, (np.floating, np.integer)):
        return v.item()
    return "" if v is None else v


STAGE_COLUMNS: List[str] = [
    "stage", "feed_assay", "product_assay", "tail_assay", "cut",
    "alpha", "beta", "DU [kg/s]", "flow", "n_machines",
]


def export_to_excel(cascade: CascadeConfig, path: str, *, summary: Optional[Dict[str, Any]] = None) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "Stages"
    ws.append(STAGE_COLUMNS)
    for i in cascade.stage_indices():
        s = cascade.stages[i]
        ws.append([
            i, s.feed_assay, s.product_assay, s.tail_assay, s.cut,
            s.alpha, s.beta, s.DU,
            _summarize_value(s.flow), _summarize_value(s.n_machines),
        ])

    ws2 = wb.create_sheet("Centrifuge")
    ws2.append(["param", "value"])
    for k, v in cascade.centrifuge.as_dict().items():
        ws2.append([k, v])

    ws3 = wb.create_sheet("Summary")
    ws3.append(["item", "value"])
    ws3.append(["n_enrich", cascade.n_enrich])
    ws3.append(["n_strip", cascade.n_strip])
    ws3.append(["feed_flow", cascade.feed_flow])
    for k, v in (summary or {}).items():
        ws3.append([k, _summarize_value(v)])

    wb.save(path)
