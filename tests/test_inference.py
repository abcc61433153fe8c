"""Tests for the inference demo CLI (inference.py)."""

import pytest
import torch

from conftest import LABELS, make_tokenizer
from tokcls import inference
from tokcls.modeling.heads import TokenClassificationHead
from tokcls.utils.bilou import BILOU
from tokcls.utils.device import select_device


@pytest.fixture
def fake_model(monkeypatch, tiny_config):
    model = TokenClassificationHead.load(tiny_config)
    seen = {}

    # [CLS] John Smith is [SEP]
    def classify_tokens(token_ids, token_type_ids=None, attention_mask=None):
        return [0, 1, 2, 0, 0]

    monkeypatch.setattr(model, "classify_tokens", classify_tokens)
    monkeypatch.setattr(inference, "fetch_model_files", lambda *a, **kw: seen.setdefault("files", (a, kw)))
    monkeypatch.setattr(
        inference,
        "build_model_and_tokenizer",
        lambda files, device: (model, make_tokenizer(), LABELS),
    )
    return seen


class TestParser:
    def test_defaults(self):
        args = inference.build_parser().parse_args([])
        assert args.use_pth is True
        assert args.n == 1
        assert args.model_id is None
        assert not args.cpu

    def test_no_use_pth(self):
        args = inference.build_parser().parse_args(["--no-use-pth", "--n", "3"])
        assert args.use_pth is False
        assert args.n == 3


class TestMain:
    def test_prints_groups(self, fake_model, capsys):
        inference.main(["--cpu", "--prompt", "John Smith is"])
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 2
        assert out[0].endswith("John Smith")
        assert "I-PER" in out[0]
        assert out[1].endswith("is")

    def test_typed_only(self, fake_model, capsys):
        inference.main(["--cpu", "--prompt", "John Smith is", "--typed-only"])
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 1
        assert out[0].endswith("John Smith")

    def test_model_flags_forwarded(self, fake_model):
        inference.main(["--cpu", "--prompt", "John Smith is", "--model-id", "org/m", "--no-use-pth"])
        args, kwargs = fake_model["files"]
        assert args == ("org/m", None)
        assert kwargs == {"use_pth": False}

    def test_strict_bilou_flag(self, fake_model, capsys, monkeypatch):
        seen = []
        original = TokenClassificationHead.classify

        def spy(self, text, labels, tokenizer, **kwargs):
            seen.append(kwargs["parse"])
            return original(self, text, labels, tokenizer, **kwargs)

        monkeypatch.setattr(TokenClassificationHead, "classify", spy)
        inference.main(["--cpu", "--prompt", "John Smith is", "--strict-bilou"])
        assert seen == [BILOU.from_entity_name_strict]


def test_select_device_cpu():
    assert select_device(cpu=True) == torch.device("cpu")
