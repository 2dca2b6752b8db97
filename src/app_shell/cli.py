import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from src.adapters.delivery import DeliveryError, create_delivery_url_builder
from src.components.video import VideoTagInput, run
from src.rules.loader import load_rules
from src.rules.models import VideoRules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"


def get_rules(path: str) -> VideoRules:
    if not Path(path).exists():
        logger.error(f"Rules file {path} not found.")
        sys.exit(1)

    return load_rules(Path(path))


def parse_option(raw: str) -> tuple[str, Any]:
    """Parse ``key=value``; the value is read as JSON when possible."""
    key, sep, value = raw.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected key=value, got {raw!r}")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def handle_tag(rules: VideoRules, args: argparse.Namespace) -> int:
    options: dict[str, Any] = dict(args.option or [])
    options["publicId"] = args.public_id
    if args.format:
        formats = args.format.split(",")
        options["sourceTypes"] = formats[0] if args.single else formats

    builder = create_delivery_url_builder(**rules.delivery.model_dump())
    try:
        result = run(
            VideoTagInput(options=options, context=rules.context_layer()),
            url_builder=builder,
            tag_builder=builder,
            default_source_types=rules.video.source_types,
        )
    except DeliveryError as e:
        logger.error(f"Cannot build video tag: {e}")
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Video Tags CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # tag
    tag_parser = subparsers.add_parser("tag", help="Derive video tag attributes and sources")
    tag_parser.add_argument("public_id", help="Public id of the video asset")
    tag_parser.add_argument("--format", help="Comma-separated source types, e.g. mp4,ogv")
    tag_parser.add_argument(
        "--single", action="store_true", help="Use the first format as the src attribute"
    )
    tag_parser.add_argument(
        "--option",
        action="append",
        type=parse_option,
        help="Extra option as key=value (repeatable)",
    )

    args = parser.parse_args()

    rules = get_rules(args.rules)

    if args.command == "tag":
        sys.exit(handle_tag(rules, args))


if __name__ == "__main__":
    main()
