from __future__ import annotations
from pathlib import Path
from typing import Dict, Union

import torch
from safetensors.torch import load_file


def load_weights(path: Union[str, Path]) -> Dict[str, torch.Tensor]:
    """State dict from a pytorch `.bin` or a `.safetensors` file (loaded on cpu)."""
    path = Path(path)
    if path.suffix == ".safetensors":
        return load_file(str(path), device="cpu")
    return torch.load(str(path), map_location="cpu", weights_only=True)
