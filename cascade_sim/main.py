from __future__ import annotations
import logging
import sys
from typing import Optional

from .build_cascade import build_cascade, summarize_cascade
from .cascade_tools import export_to_excel
from .inputs import InputParameters


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Route the package's log records to stdout and, if given, a log file."""
    logger = logging.getLogger("cascade_sim")
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(h)
    return logger


def main() -> None:
    params = InputParameters()
    configure_logging(log_file=params.LOG_FILE)
    cascade = build_cascade()
    summary = summarize_cascade(cascade, params.FEED_ASSAY)
    export_to_excel(cascade, params.EXCEL_PATH, summary=summary)
    print(f"Converged. Wrote {params.EXCEL_PATH}")

    print("\n--- Design summary ---")
    for k, v in summary.items():
        print(f"{k}: {v}")

    print("\n--- Stages ---")
    for i in cascade.stage_indices():
        s = cascade.stages[i]
        print(f"{i:+d}: cut={s.cut:.6g}, alpha={s.alpha:.6g}, feed={s.feed_assay:.6g}, "
              f"product={s.product_assay:.6g}, tail={s.tail_assay:.6g}, "
              f"flow={s.flow:.6g}, machines={s.n_machines}")

if __name__ == "__main__":
    main()
