from __future__ import annotations


class TokClsError(Exception):
    """Base class for errors raised by tokcls itself."""


class TokenizationError(TokClsError, ValueError):
    """The tokenizer rejected the input text."""


class LabelIndexError(TokClsError, IndexError):
    """
    A predicted label index has no entry in the label table.

    This means the model and the label table do not belong together.
    """

    def __init__(self, index: int, num_labels: int, position: int):
        super().__init__(
            f"label index {index} at token position {position} is out of range "
            f"for a label table of size {num_labels}"
        )
        self.index = index
        self.num_labels = num_labels
        self.position = position


class ConfigError(TokClsError, ValueError):
    """The model configuration is malformed."""
