from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

import torch
from torch import nn

from ..config import TokenClassificationConfig
from ..constants import CONFIG_FILENAME, PTH_WEIGHTS_FILENAME, SAFETENSORS_WEIGHTS_FILENAME, SEP_TOKEN
from ..errors import TokenizationError
from ..utils.bilou import BILOU, EntityGroup, LabelParser, decode_entity_groups
from ..utils.weights import load_weights
from .backbones import BertLikeBackbone, get_backbone_cls

logger = logging.getLogger(__name__)

# Checkpoint prefixes used by HF *ForTokenClassification models -> our module names.
_CHECKPOINT_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("bert.", "backbone.encoder."),
    ("electra.", "backbone.encoder."),
)


def remap_checkpoint_keys(state_dict: Mapping[str, torch.Tensor]) -> dict:
    """
    Rename HF token-classification checkpoint keys to TokenClassificationHead keys.

    - "bert.*" / "electra.*" -> "backbone.encoder.*"
    - legacy LayerNorm "gamma"/"beta" -> "weight"/"bias"
    - pooler weights are dropped (the head has no pooler)
    """
    out = {}
    for key, value in state_dict.items():
        new_key = key
        for old, new in _CHECKPOINT_PREFIXES:
            if key.startswith(old):
                new_key = new + key[len(old):]
                break
        if ".pooler." in new_key:
            continue
        if new_key.endswith(".gamma"):
            new_key = new_key[: -len("gamma")] + "weight"
        elif new_key.endswith(".beta"):
            new_key = new_key[: -len("beta")] + "bias"
        out[new_key] = value
    return out


class TokenClassificationHead(nn.Module):
    """
    Token classification: backbone -> dropout -> linear classifier.

    Inference goes through:
      - classify_tokens: token ids -> arg-max label index per token
      - classify: raw text -> entity groups (tokenize, classify, decode)
    """

    def __init__(self, backbone: BertLikeBackbone, hidden_size: int, num_labels: int, dropout: float):
        super().__init__()
        self.num_labels = int(num_labels)
        self.backbone = backbone
        self.dropout = nn.Dropout(dropout)
        self.classifier = nn.Linear(hidden_size, self.num_labels)

    @classmethod
    def load(
        cls,
        cfg: TokenClassificationConfig,
        state_dict: Optional[Mapping[str, torch.Tensor]] = None,
    ) -> "TokenClassificationHead":
        """
        Build the head for `cfg.model_type` and optionally load checkpoint weights.

        `state_dict` may use either HF checkpoint names ("bert.*", "classifier.*")
        or this module's own names.
        """
        backbone = get_backbone_cls(cfg.model_type).from_config(cfg)
        head = cls(backbone, cfg.hidden_size, cfg.num_labels, cfg.classifier_dropout_prob)
        if state_dict is not None:
            head.load_checkpoint(state_dict)
        return head.eval()

    @classmethod
    def from_pretrained(cls, path: Union[str, Path]) -> "TokenClassificationHead":
        """
        Load a full checkpoint directory: config.json plus model.safetensors
        (preferred) or pytorch_model.bin.
        """
        path = Path(path)
        cfg = TokenClassificationConfig.from_json_file(path / CONFIG_FILENAME)
        for name in (SAFETENSORS_WEIGHTS_FILENAME, PTH_WEIGHTS_FILENAME):
            if (path / name).is_file():
                return cls.load(cfg, load_weights(path / name))
        raise FileNotFoundError(
            f"no {SAFETENSORS_WEIGHTS_FILENAME} or {PTH_WEIGHTS_FILENAME} in {path}"
        )

    def load_checkpoint(self, state_dict: Mapping[str, torch.Tensor]) -> None:
        result = self.load_state_dict(remap_checkpoint_keys(state_dict), strict=False)
        # position_ids is a non-persistent buffer in recent transformers releases
        missing = [k for k in result.missing_keys if not k.endswith("position_ids")]
        if missing:
            logger.warning("Checkpoint is missing %d weights, e.g. %s", len(missing), missing[:5])
        if result.unexpected_keys:
            logger.debug("Ignoring %d unexpected checkpoint keys: %s", len(result.unexpected_keys), result.unexpected_keys[:5])

    @property
    def device(self) -> torch.device:
        return self.backbone.device

    def forward(
        self,
        input_ids: torch.LongTensor,
        token_type_ids: Optional[torch.LongTensor] = None,
        attention_mask: Optional[torch.LongTensor] = None,
    ) -> torch.Tensor:
        """Token logits [bs, L, C]."""
        sequence_output = self.backbone(input_ids, token_type_ids, attention_mask).sequence_output
        return self.classifier(self.dropout(sequence_output))

    @torch.no_grad()
    def classify_tokens(
        self,
        token_ids: Sequence[int],
        token_type_ids: Optional[Sequence[int]] = None,
        attention_mask: Optional[Sequence[int]] = None,
    ) -> List[int]:
        """
        Arg-max label index for every token of a single sequence.

        Args:
          token_ids: ids including the tokenizer's boundary tokens
          token_type_ids: segment ids; all zero when omitted
          attention_mask: 1 for real tokens, 0 for padding; all ones when omitted

        Errors raised by torch (shape, device) propagate unchanged.
        """
        if len(token_ids) == 0:
            raise ValueError("token_ids must not be empty")
        if token_type_ids is not None and len(token_type_ids) != len(token_ids):
            raise ValueError(
                f"token_type_ids has length {len(token_type_ids)}, expected {len(token_ids)}"
            )
        if attention_mask is not None and len(attention_mask) != len(token_ids):
            raise ValueError(
                f"attention_mask has length {len(attention_mask)}, expected {len(token_ids)}"
            )

        input_ids = torch.tensor([list(token_ids)], dtype=torch.long, device=self.device)
        if token_type_ids is None:
            segment_ids = torch.zeros_like(input_ids)
        else:
            segment_ids = torch.tensor([list(token_type_ids)], dtype=torch.long, device=self.device)
        mask = None
        if attention_mask is not None:
            mask = torch.tensor([list(attention_mask)], dtype=torch.long, device=self.device)

        logits = self.forward(input_ids, segment_ids, mask).squeeze(0)
        scores = torch.softmax(logits, dim=-1)
        return [int(x) for x in scores.argmax(dim=-1).tolist()]

    def classify(
        self,
        text: str,
        labels: Sequence[str],
        tokenizer: Any,
        *,
        end_marker: str = SEP_TOKEN,
        parse: LabelParser = BILOU.from_entity_name,
    ) -> List[EntityGroup]:
        """
        Classify `text` and aggregate neighbouring tokens into entity groups.

        Args:
          text: source text; group offsets index into it
          labels: label table, labels[i] for classifier output i
          tokenizer: `tokenizers.Tokenizer` (encode + id_to_token)

        Raises:
          TokenizationError: the tokenizer rejected `text`
          LabelIndexError: the model predicted an index outside `labels`
        """
        try:
            encoding = tokenizer.encode(text, add_special_tokens=True)
        except Exception as e:
            raise TokenizationError(f"failed to tokenize input: {e}") from e

        token_ids = list(encoding.ids)
        if not token_ids:
            return []
        # padded encodings carry zeros after the real tokens
        mask = getattr(encoding, "attention_mask", None)
        label_indices = self.classify_tokens(
            token_ids, attention_mask=list(mask) if mask is not None else None
        )
        token_strings = [tokenizer.id_to_token(t) for t in token_ids]

        groups = decode_entity_groups(
            text,
            list(encoding.offsets),
            token_strings,
            label_indices,
            labels,
            end_marker=end_marker,
            parse=parse,
        )
        logger.debug("Decoded %d tokens into %d entity groups", len(token_ids), len(groups))
        return groups
