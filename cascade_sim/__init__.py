from .cascade_tools import (
    CascadeConfig,
    CentrifugeConfig,
    PhysicalConstants,
    StageConfig,
    CascadeError,
    InvalidParameterError,
    RootFindingError,
    AssemblyNonConvergenceError,
    SingularSystemError,
    ConvergenceError,
    InfeasibleConstraintsError,
)
from .build_cascade import build_cascade, summarize_cascade
