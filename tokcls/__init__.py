"""
tokcls: token classification with a BERT-like encoder.

The package exposes:
- model configuration read from a checkpoint's config.json
- BERT / ELECTRA backbones behind one interface
- a token classification head (classify_tokens, classify)
- BILOU decoding of per-token labels into entity groups
"""

from .config import TokenClassificationConfig
from .errors import ConfigError, LabelIndexError, TokClsError, TokenizationError
from .modeling.heads import TokenClassificationHead
from .utils.bilou import BILOU, EntityGroup, Prefix, decode_entity_groups, filter_entities

__all__ = [
    "TokenClassificationConfig",
    "TokenClassificationHead",
    "BILOU",
    "EntityGroup",
    "Prefix",
    "decode_entity_groups",
    "filter_entities",
    "TokClsError",
    "TokenizationError",
    "LabelIndexError",
    "ConfigError",
]
