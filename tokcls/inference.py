"""
Inference demo: download a token-classification checkpoint and print the
entity groups found in a prompt.

    python -m tokcls.inference --prompt "John Smith lives in Berlin" --model-id dslim/bert-base-NER
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

from .constants import DEFAULT_PROMPT
from .hub import build_model_and_tokenizer, fetch_model_files
from .utils.bilou import BILOU, filter_entities
from .utils.device import select_device

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokcls",
        description="Token classification with BILOU entity aggregation",
    )
    parser.add_argument("--cpu", action="store_true", help="Run on CPU rather than on GPU")
    parser.add_argument("--model-id", default=None, help="HuggingFace model id")
    parser.add_argument("--revision", default=None, help="Model revision (default: main)")
    parser.add_argument("--prompt", default=DEFAULT_PROMPT, help="Text to classify")
    parser.add_argument(
        "--use-pth",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Use the pytorch weights rather than the safetensors ones",
    )
    parser.add_argument("--n", type=int, default=1, help="Number of times to run the prompt")
    parser.add_argument("--typed-only", action="store_true", help="Drop groups tagged O")
    parser.add_argument("--strict-bilou", action="store_true", help="Parse L-/U-/O- prefixes too")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    device = select_device(args.cpu)
    files = fetch_model_files(args.model_id, args.revision, use_pth=args.use_pth)
    model, tokenizer, labels = build_model_and_tokenizer(files, device)
    parse = BILOU.from_entity_name_strict if args.strict_bilou else BILOU.from_entity_name

    for run in range(max(1, args.n)):
        t0 = time.time()
        groups = model.classify(args.prompt, labels, tokenizer, parse=parse)
        logger.info("run %d: %d groups in %.3fs", run, len(groups), time.time() - t0)

    if args.typed_only:
        groups = filter_entities(groups)
    for g in groups:
        print(f"[{g.start:>4}, {g.end:>4})  {str(g.label):<12} {g.text}")


if __name__ == "__main__":
    main()
