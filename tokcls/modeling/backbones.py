from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Type, Union

import torch
from torch import nn
from transformers import BertModel, ElectraModel

from ..config import TokenClassificationConfig


@dataclass
class BackboneOutput:
    """Standardized backbone outputs to keep the head backbone-agnostic."""
    sequence_output: torch.Tensor  # [bs, seq_len, hidden]


class BertLikeBackbone(nn.Module):
    """
    Base wrapper for a BERT-like encoder.

    Subclasses set `model_cls` to a `transformers` encoder class. The rest of the
    package only relies on:
      - from_config
      - forward(input_ids, token_type_ids, attention_mask) -> BackboneOutput
      - device
    """

    model_cls: Type = BertModel
    model_kwargs: Dict[str, object] = {}

    def __init__(self, encoder: nn.Module):
        super().__init__()
        self.encoder = encoder

    @classmethod
    def from_config(cls, cfg: TokenClassificationConfig) -> "BertLikeBackbone":
        """Randomly initialised encoder with the architecture described by `cfg`."""
        return cls(cls.model_cls(cfg.to_transformers_config(), **cls.model_kwargs))

    @property
    def device(self) -> torch.device:
        return next(self.parameters()).device

    def forward(
        self,
        input_ids: torch.LongTensor,
        token_type_ids: Optional[torch.LongTensor] = None,
        attention_mask: Optional[torch.LongTensor] = None,
    ) -> BackboneOutput:
        out = self.encoder(
            input_ids=input_ids,
            attention_mask=attention_mask,
            token_type_ids=token_type_ids,
        )
        return BackboneOutput(sequence_output=out.last_hidden_state)


class BertBackbone(BertLikeBackbone):
    """BERT encoder without the pooling layer (token tagging needs per-token states only)."""

    model_cls = BertModel
    model_kwargs = {"add_pooling_layer": False}


class ElectraBackbone(BertLikeBackbone):
    """ELECTRA discriminator encoder."""

    model_cls = ElectraModel


BACKBONES: Dict[str, Type[BertLikeBackbone]] = {
    "bert": BertBackbone,
    "electra": ElectraBackbone,
}


def get_backbone_cls(model_type: Union[str, None]) -> Type[BertLikeBackbone]:
    """Backbone class for a config `model_type`; missing model_type means BERT."""
    key = (model_type or "bert").lower()
    try:
        return BACKBONES[key]
    except KeyError:
        raise ValueError(f"unsupported model_type {model_type!r}, expected one of {sorted(BACKBONES)}") from None
