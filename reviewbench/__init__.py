"""
Review Bench

Benchmark for automated code-review agents: candidate models review source
files, a judge model maps their findings onto curated ground truth, and
per-agent accuracy and cost metrics are reported.
"""

import logging

__version__ = "1.0.0"

logger = logging.getLogger("reviewbench")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
