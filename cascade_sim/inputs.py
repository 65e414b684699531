from __future__ import annotations


class InputParameters:
    # -------------------------------------------------------------------------
    # CENTRIFUGE DEFAULTS (single machine)
    # -------------------------------------------------------------------------
    CENT_V_A_M_S = 485.0            # peripheral velocity
    CENT_HEIGHT_M = 0.5
    CENT_DIAMETER_M = 0.15
    CENT_FEED_KG_S = 15.0 / 1000.0 / 1000.0
    CENT_TEMP_K = 320.0
    CENT_EFFICIENCY = 1.0
    CENT_M_KG_MOL = 0.352           # UF6
    CENT_DM_KG_MOL = 0.003          # 238 - 235
    CENT_PRESSURE_RATIO = 1000.0
    CENT_FLOW_INTERNAL = 2.0        # countercurrent multiplier, typically 2-4

    # -------------------------------------------------------------------------
    # PHYSICAL CONSTANTS
    # -------------------------------------------------------------------------
    GAS_CONST_J_K_MOL = 8.314
    D_RHO_KG_M_S = 2.2e-5

    # Heavy-isotope withdrawal radius as a fraction of the rotor radius.
    # Glaser (2008) gives 0.96-0.99 for operating machines.
    WITHDRAWAL_RADIUS_FRACTION = 0.99

    # -------------------------------------------------------------------------
    # DESIGN DUTY (natural uranium -> LEU)
    # -------------------------------------------------------------------------
    FEED_ASSAY = 0.0071
    PRODUCT_ASSAY = 0.05
    WASTE_ASSAY = 0.0025

    # Nominal feed used before sizing; assays only depend on flow ratios.
    NOMINAL_FEED_FLOW = 1.0

    # -------------------------------------------------------------------------
    # RESOURCE CAPS
    # -------------------------------------------------------------------------
    MAX_FEED_FLOW_KG_S = 1.0e-4
    MAX_CENTRIFUGES = 1000

    # -------------------------------------------------------------------------
    # NUMERICS
    # -------------------------------------------------------------------------
    STAGE_PRECISION = 1e-10         # |alpha - beta| at the ideal cut
    ASSAY_PRECISION = 1e-10         # max assay change between passes
    # Assay steps at or below this are float round-off in the mixing / flow solve
    ASSAY_ROUNDOFF = 1e-15

    CUT_LOWER = 1e-6
    CUT_UPPER = 1.0 - 1e-6

    ROOT_MAX_ITER = 200
    MAX_STAGES = 100                # per side of the feed stage
    ASSAY_MAX_ITER = 20000
    SIZING_MAX_ITER = 1000

    # Reciprocal condition number below which the flow system counts as singular
    RCOND_MIN = 1e-13

    # -------------------------------------------------------------------------
    # OUTPUT
    # -------------------------------------------------------------------------
    EXCEL_PATH = "cascade_design.xlsx"
    LOG_FILE = None
