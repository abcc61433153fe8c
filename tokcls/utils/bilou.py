from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..constants import BILOU_OUTSIDE, SEP_TOKEN
from ..errors import LabelIndexError


class Prefix(str, Enum):
    BEGIN = "B"
    INSIDE = "I"
    LAST = "L"
    OUTSIDE = "O"
    UNIT = "U"


@dataclass(frozen=True)
class BILOU:
    """
    A parsed BILOU tag: position prefix + entity type.

    `tag` is the entity type string (e.g. "PER"); two tokens belong to the same
    run when their `tag` values are equal.
    """

    prefix: Prefix
    tag: str

    @property
    def is_begin(self) -> bool:
        return self.prefix is Prefix.BEGIN

    @classmethod
    def from_entity_name(cls, entity_name: str) -> "BILOU":
        """
        Parse a label the way the released models expect.

        Only "B-" and "I-" are recognised. Any other label, including "L-x",
        "U-x", "O-x" and bare types such as "O", becomes Inside with the whole
        label as its type.
        """
        if entity_name.startswith("B-"):
            return cls(Prefix.BEGIN, entity_name[2:])
        if entity_name.startswith("I-"):
            return cls(Prefix.INSIDE, entity_name[2:])
        return cls(Prefix.INSIDE, entity_name)

    @classmethod
    def from_entity_name_strict(cls, entity_name: str) -> "BILOU":
        """
        Parse all five BILOU prefixes.

        A bare "O" is Outside with type "O"; other bare types are Inside.
        Not the default: "L-"/"U-" labels split runs differently than
        `from_entity_name` does.
        """
        if len(entity_name) > 2 and entity_name[1] == "-":
            try:
                return cls(Prefix(entity_name[0]), entity_name[2:])
            except ValueError:
                pass
        if entity_name == BILOU_OUTSIDE:
            return cls(Prefix.OUTSIDE, entity_name)
        return cls(Prefix.INSIDE, entity_name)

    def __str__(self) -> str:
        return f"{self.prefix.value}-{self.tag}"


LabelParser = Callable[[str], BILOU]


@dataclass(frozen=True)
class EntityGroup:
    """
    A contiguous run of tokens merged into one span of the source text.

    Invariant: text == source[start:end].
    """

    text: str
    start: int
    end: int
    label: BILOU

    @property
    def entity_type(self) -> str:
        return self.label.tag


def decode_entity_groups(
    text: str,
    offsets: Sequence[Tuple[int, int]],
    token_strings: Sequence[Optional[str]],
    label_indices: Sequence[int],
    labels: Sequence[str],
    *,
    end_marker: str = SEP_TOKEN,
    parse: LabelParser = BILOU.from_entity_name,
) -> List[EntityGroup]:
    """
    Aggregate per-token label predictions into entity groups.

    Positions 0 and len-1 are the encoder's boundary tokens and are skipped.
    Decoding stops at the first `end_marker` token. A run is closed when the
    entity type changes or a Begin tag arrives; the closed group carries the
    tag of its last token.

    Notes:
      - Outside runs are emitted like any other type; use `filter_entities`
        to keep only typed entities.
      - Raises LabelIndexError before producing any group if a label index
        falls outside `labels`.
    """
    n = len(label_indices)
    if len(offsets) != n or len(token_strings) != n:
        raise ValueError(
            "offsets, token_strings and label_indices must have the same length "
            f"(got {len(offsets)}, {len(token_strings)}, {n})"
        )

    # every index before the end marker must be valid
    stop = n - 1
    for i in range(1, n - 1):
        if token_strings[i] == end_marker:
            stop = i
            break
        idx = int(label_indices[i])
        if not 0 <= idx < len(labels):
            raise LabelIndexError(idx, len(labels), i)

    groups: List[EntityGroup] = []
    run: List[Tuple[int, int]] = []
    last: Optional[BILOU] = None

    def close() -> None:
        start = run[0][0]
        end = run[-1][1]
        groups.append(EntityGroup(text=text[start:end], start=start, end=end, label=last))
        run.clear()

    for i in range(1, stop):
        bi = parse(labels[int(label_indices[i])])
        if last is not None and run and (bi.tag != last.tag or bi.is_begin):
            close()
        start, end = offsets[i]
        run.append((int(start), int(end)))
        last = bi

    if run:
        close()
    return groups


def filter_entities(
    groups: Iterable[EntityGroup],
    exclude: Iterable[str] = (BILOU_OUTSIDE,),
) -> List[EntityGroup]:
    """Drop groups whose entity type is in `exclude`."""
    skip = set(exclude)
    return [g for g in groups if g.entity_type not in skip]
