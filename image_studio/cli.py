"""Command line front end for the Image Studio client."""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from .client.controller import StudioController
from .client.history_store import HistoryStore
from .client.relay_client import RelayClient
from .config.settings import get_settings
from .domain.entities.generation import ASPECT_RATIO_LABELS, ASPECT_RATIOS, MAX_IMAGES, MIN_IMAGES
from .domain.entities.style_preset import STYLE_PRESETS
from .domain.errors import ValidationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_RATE_LIMITED = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="image-studio", description="Generate images through the Image Studio relay")
    parser.add_argument("--relay-url", dest="relay_url", help="Relay base URL (default: RELAY_BASE_URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate images from a prompt")
    generate.add_argument("prompt", nargs="?", default="", help="Prompt text")
    generate.add_argument(
        "--aspect-ratio",
        dest="aspect_ratio",
        choices=ASPECT_RATIOS,
        help="Aspect ratio of the images",
    )
    generate.add_argument(
        "-n",
        "--count",
        type=int,
        choices=range(MIN_IMAGES, MAX_IMAGES + 1),
        help="Number of images to generate",
    )
    generate.add_argument("--style", action="append", default=[], help="Style preset to append (repeatable)")
    generate.add_argument(
        "--from-history",
        dest="from_history",
        type=int,
        metavar="N",
        help="Reuse prompt and settings of history entry N (1 = newest)",
    )
    generate.add_argument(
        "-o",
        "--output-dir",
        dest="output_dir",
        default="images",
        help="Directory the images are saved to",
    )

    enhance = sub.add_parser("enhance", help="Rewrite a prompt to be more descriptive")
    enhance.add_argument("prompt", help="Prompt text")

    sub.add_parser("surprise", help="Suggest a random prompt")
    sub.add_parser("styles", help="List style presets")

    history = sub.add_parser("history", help="List past generations")
    history.add_argument("--limit", type=int, default=10, help="Number of entries to show")

    return parser


def _print_failure(controller: StudioController) -> int:
    print(f"Error: {controller.state.error}", file=sys.stderr)
    if controller.state.is_rate_limited:
        print(f"Try again in {controller.state.countdown_seconds}s", file=sys.stderr)
        return EXIT_RATE_LIMITED
    return EXIT_FAILED


async def _generate(controller: StudioController, args: argparse.Namespace) -> int:
    if args.from_history is not None:
        history = controller.history
        if not 1 <= args.from_history <= len(history):
            print(f"Error: history has {len(history)} entries", file=sys.stderr)
            return EXIT_FAILED
        controller.reuse_history(history[args.from_history - 1])
    if args.prompt:
        controller.set_prompt(args.prompt)
    if args.aspect_ratio:
        controller.set_aspect_ratio(args.aspect_ratio)
    if args.count:
        controller.set_number_of_images(args.count)
    for style in args.style:
        try:
            controller.apply_style_preset(style)
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return EXIT_FAILED

    print(f"Prompt: {controller.state.prompt}")
    urls = await controller.generate()
    if urls is None:
        return _print_failure(controller)

    for url in urls:
        print(controller.save_image(url, args.output_dir))
    return EXIT_OK


async def _enhance(controller: StudioController, args: argparse.Namespace) -> int:
    controller.set_prompt(args.prompt)
    await controller.enhance()
    if controller.state.error:
        return _print_failure(controller)
    print(controller.state.prompt)
    return EXIT_OK


async def _surprise(controller: StudioController, args: argparse.Namespace) -> int:
    await controller.surprise_me()
    if controller.state.error:
        return _print_failure(controller)
    print(controller.state.prompt)
    return EXIT_OK


def _print_styles() -> int:
    category = None
    for preset in STYLE_PRESETS:
        if preset.category != category:
            category = preset.category
            print(f"\n{category}")
            print("-" * len(category))
        print(f"  {preset.name:<18} {preset.keywords}")
    return EXIT_OK


def _print_history(controller: StudioController, limit: int) -> int:
    history = controller.history
    if not history:
        print("No generations yet.")
        return EXIT_OK
    for index, entry in enumerate(history[: max(0, limit)], 1):
        created = datetime.fromtimestamp(entry.created_at_millis / 1000).strftime("%Y-%m-%d %H:%M")
        ratio = ASPECT_RATIO_LABELS.get(entry.aspect_ratio, entry.aspect_ratio)
        print(f"{index:>2}. [{created}] {entry.prompt}")
        print(f"    {ratio}, {entry.number_of_images} image(s)")
    return EXIT_OK


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    client = RelayClient(base_url=args.relay_url, settings=settings)
    controller = StudioController(client, HistoryStore.from_settings(settings), settings=settings)
    try:
        if args.command == "generate":
            return await _generate(controller, args)
        if args.command == "enhance":
            return await _enhance(controller, args)
        if args.command == "surprise":
            return await _surprise(controller, args)
        return _print_history(controller, args.limit)
    finally:
        await controller.close()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.command == "styles":
        return _print_styles()
    try:
        return asyncio.run(_run(args))
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILED
    except KeyboardInterrupt:
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
