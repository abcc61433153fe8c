"""
Shared test fixtures.

Everything here is built offline:
- a WordLevel tokenizer that wraps inputs in [CLS] ... [SEP]
- a tiny model configuration (random weights, a few hundred parameters)
"""

from typing import Dict

import pytest
import torch
from tokenizers import Tokenizer
from tokenizers.models import WordLevel
from tokenizers.pre_tokenizers import Whitespace
from tokenizers.processors import TemplateProcessing

from tokcls.config import TokenClassificationConfig

VOCAB: Dict[str, int] = {
    "[PAD]": 0,
    "[UNK]": 1,
    "[CLS]": 2,
    "[SEP]": 3,
    "John": 4,
    "Smith": 5,
    "is": 6,
    "in": 7,
    "Paris": 8,
    "Berlin": 9,
    "lives": 10,
}

LABELS = ["O", "B-PER", "I-PER", "B-LOC", "I-LOC"]


def make_tokenizer() -> Tokenizer:
    tokenizer = Tokenizer(WordLevel(VOCAB, unk_token="[UNK]"))
    tokenizer.pre_tokenizer = Whitespace()
    tokenizer.post_processor = TemplateProcessing(
        single="[CLS] $A [SEP]",
        special_tokens=[("[CLS]", VOCAB["[CLS]"]), ("[SEP]", VOCAB["[SEP]"])],
    )
    return tokenizer


def make_config(model_type: str = "bert") -> TokenClassificationConfig:
    return TokenClassificationConfig(
        vocab_size=len(VOCAB),
        hidden_size=16,
        num_hidden_layers=1,
        num_attention_heads=2,
        intermediate_size=32,
        max_position_embeddings=64,
        model_type=model_type,
        id2label=dict(enumerate(LABELS)),
    )


@pytest.fixture
def tokenizer() -> Tokenizer:
    return make_tokenizer()


@pytest.fixture
def padded_tokenizer() -> Tokenizer:
    tokenizer = make_tokenizer()
    tokenizer.enable_padding(length=10, pad_id=VOCAB["[PAD]"], pad_token="[PAD]")
    return tokenizer


@pytest.fixture
def tiny_config() -> TokenClassificationConfig:
    return make_config("bert")


@pytest.fixture(autouse=True)
def _seed():
    torch.manual_seed(7)
