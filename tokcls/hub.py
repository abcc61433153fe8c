"""
Fetch a token-classification checkpoint from the HuggingFace Hub and build
(model, tokenizer, label table) from it.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import torch
from huggingface_hub import hf_hub_download
from tokenizers import Tokenizer

from .config import TokenClassificationConfig
from .constants import (
    CONFIG_FILENAME,
    DEFAULT_MODEL_ID,
    DEFAULT_REVISION,
    PTH_WEIGHTS_FILENAME,
    SAFETENSORS_WEIGHTS_FILENAME,
    TOKENIZER_FILENAME,
)
from .modeling.heads import TokenClassificationHead
from .utils.weights import load_weights

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelFiles:
    """Local paths of the three files a checkpoint needs."""
    config: Path
    tokenizer: Path
    weights: Path


def fetch_model_files(
    model_id: Optional[str] = None,
    revision: Optional[str] = None,
    *,
    use_pth: bool = True,
) -> ModelFiles:
    """
    Download (or reuse from the local HF cache) config, tokenizer and weights.

    Missing model_id / revision fall back to DEFAULT_MODEL_ID / DEFAULT_REVISION.
    """
    model_id = model_id or DEFAULT_MODEL_ID
    revision = revision or DEFAULT_REVISION
    weights_name = PTH_WEIGHTS_FILENAME if use_pth else SAFETENSORS_WEIGHTS_FILENAME
    logger.info("Fetching %s@%s (%s)", model_id, revision, weights_name)

    def get(filename: str) -> Path:
        return Path(hf_hub_download(repo_id=model_id, filename=filename, revision=revision, repo_type="model"))

    return ModelFiles(
        config=get(CONFIG_FILENAME),
        tokenizer=get(TOKENIZER_FILENAME),
        weights=get(weights_name),
    )


def build_model_and_tokenizer(
    files: ModelFiles,
    device: Optional[torch.device] = None,
) -> Tuple[TokenClassificationHead, Tokenizer, List[str]]:
    cfg = TokenClassificationConfig.from_json_file(files.config)
    tokenizer = Tokenizer.from_file(str(files.tokenizer))
    labels = cfg.labels

    model = TokenClassificationHead.load(cfg, load_weights(files.weights))
    if device is not None:
        model = model.to(device)
    logger.info(
        "Loaded %s token classifier with %d labels on %s",
        cfg.model_type or "bert", len(labels), model.device,
    )
    return model, tokenizer, labels
