from __future__ import annotations
import logging

import torch

logger = logging.getLogger(__name__)


def select_device(cpu: bool = False) -> torch.device:
    """cpu when asked for, otherwise the first available accelerator (cuda, then mps)."""
    if cpu:
        return torch.device("cpu")
    if torch.cuda.is_available():
        return torch.device("cuda", 0)
    mps = getattr(torch.backends, "mps", None)
    if mps is not None and mps.is_available():
        return torch.device("mps")
    logger.info("Running on CPU, no cuda or mps device available")
    return torch.device("cpu")
