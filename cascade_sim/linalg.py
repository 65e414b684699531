from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import numpy as np

from .inputs import InputParameters


@dataclass
class LinearSolution:
    x: Optional[np.ndarray]
    ok: bool
    rcond: float = 0.0
    message: str = ""


def solve_linear_system(A: np.ndarray, b: np.ndarray, *, rcond_min: float = InputParameters.RCOND_MIN) -> LinearSolution:
    """
    Dense solve of A x = b (LU with partial pivoting through LAPACK gesv).

    Never raises on numerical failure; the caller decides what a failed
    solve means. ok is False for a singular or ill-conditioned matrix or a
    non-finite result.
    """
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    n = A.shape[0]
    if A.ndim != 2 or A.shape[1] != n or b.shape != (n,):
        return LinearSolution(None, False, 0.0, f"shape mismatch: A{A.shape}, b{b.shape}")
    if n == 0:
        return LinearSolution(np.zeros(0), True, 1.0, "empty system")

    cond = float(np.linalg.cond(A))
    rcond = 0.0 if not np.isfinite(cond) or cond == 0.0 else 1.0 / cond
    if rcond < rcond_min:
        return LinearSolution(None, False, rcond, f"matrix is singular to working precision (rcond={rcond:.3g})")

    try:
        x = np.linalg.solve(A, b)
    except np.linalg.LinAlgError as exc:
        return LinearSolution(None, False, rcond, str(exc))

    if not np.all(np.isfinite(x)):
        return LinearSolution(None, False, rcond, "non-finite solution")
    return LinearSolution(x, True, rcond, "")
