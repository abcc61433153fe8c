from __future__ import annotations
import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from transformers import BertConfig, ElectraConfig, PretrainedConfig

from .errors import ConfigError

HIDDEN_ACTS = ("gelu", "relu", "tanh")
POSITION_EMBEDDING_TYPES = ("absolute",)


@dataclass(frozen=True)
class TokenClassificationConfig:
    """
    Model configuration for a BERT-like encoder + token classification head.

    Mirrors the `config.json` shipped with HuggingFace token-classification
    checkpoints. Only the fields the encoder and the head need are kept;
    anything else in the file is ignored.

    `id2label` maps classifier output index -> label string (e.g. "B-PER").
    """

    # ===== Encoder =====
    vocab_size: int = 30522
    hidden_size: int = 768
    num_hidden_layers: int = 12
    num_attention_heads: int = 12
    intermediate_size: int = 3072
    hidden_act: str = "gelu"
    hidden_dropout_prob: float = 0.1
    max_position_embeddings: int = 512
    type_vocab_size: int = 2
    initializer_range: float = 0.02
    layer_norm_eps: float = 1e-12
    pad_token_id: int = 0
    position_embedding_type: str = "absolute"
    use_cache: bool = False
    embedding_size: Optional[int] = None  # ELECTRA only; defaults to hidden_size

    # ===== Head =====
    classifier_dropout: Optional[float] = None
    model_type: Optional[str] = None  # stored lowercase
    id2label: Dict[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.model_type is not None:
            object.__setattr__(self, "model_type", self.model_type.lower())
        if self.hidden_act not in HIDDEN_ACTS:
            raise ConfigError(f"unsupported hidden_act {self.hidden_act!r}, expected one of {HIDDEN_ACTS}")
        if self.position_embedding_type not in POSITION_EMBEDDING_TYPES:
            raise ConfigError(
                f"unsupported position_embedding_type {self.position_embedding_type!r}, "
                f"expected one of {POSITION_EMBEDDING_TYPES}"
            )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TokenClassificationConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs = {k: v for k, v in raw.items() if k in known}
        # JSON object keys are strings
        try:
            kwargs["id2label"] = {int(k): str(v) for k, v in (raw.get("id2label") or {}).items()}
        except (TypeError, ValueError) as e:
            raise ConfigError(f"id2label keys must be integers: {e}") from e
        return cls(**kwargs)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "TokenClassificationConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @property
    def num_labels(self) -> int:
        return len(self.id2label)

    @property
    def labels(self) -> List[str]:
        """Label table: labels[i] is the label for classifier output index i."""
        n = len(self.id2label)
        missing = [i for i in range(n) if i not in self.id2label]
        if missing:
            raise ConfigError(f"id2label must cover indices 0..{n - 1}; missing {missing}")
        return [self.id2label[i] for i in range(n)]

    @property
    def classifier_dropout_prob(self) -> float:
        if self.classifier_dropout is None:
            return self.hidden_dropout_prob
        return self.classifier_dropout

    def to_transformers_config(self) -> PretrainedConfig:
        """Build the matching `transformers` encoder config (BERT unless model_type is electra)."""
        common = dict(
            vocab_size=self.vocab_size,
            hidden_size=self.hidden_size,
            num_hidden_layers=self.num_hidden_layers,
            num_attention_heads=self.num_attention_heads,
            intermediate_size=self.intermediate_size,
            hidden_act=self.hidden_act,
            hidden_dropout_prob=self.hidden_dropout_prob,
            max_position_embeddings=self.max_position_embeddings,
            type_vocab_size=self.type_vocab_size,
            initializer_range=self.initializer_range,
            layer_norm_eps=self.layer_norm_eps,
            pad_token_id=self.pad_token_id,
            position_embedding_type=self.position_embedding_type,
            use_cache=self.use_cache,
        )
        if self.id2label:
            common["id2label"] = dict(self.id2label)
        if self.model_type == "electra":
            return ElectraConfig(embedding_size=self.embedding_size or self.hidden_size, **common)
        return BertConfig(**common)
