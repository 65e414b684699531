from .centrifuge import (
    separative_power,
    thermal_exponent,
    value_function,
    alpha_by_separative_power,
    beta_by_alpha_and_cut,
    cut_by_alpha_beta,
    product_assay_by_alpha,
    tail_assay_by_beta,
    product_assay_from_n_stages,
    tail_assay_from_n_stages,
    machines_per_stage,
    cascade_separative_power,
    machines_per_cascade,
    separative_power_by_cascade,
)
from .stage_builder import build_stage, build_ideal_stage, cut_for_ideal_stage
from .assembler import assemble_cascade
from .flow_solver import build_flow_equations, solve_stage_flows, calc_feed_flows, calc_stage_features, external_flows
from .convergence import compute_assays, update_enrichment, update_cuts, diff_enrichment, remaining_distance
from .sizer import design_cascade, find_total_machines
