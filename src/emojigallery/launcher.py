"""Launcher for `python -m emojigallery` and the `emojigallery` console script."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

from emojigallery.app.bootstrap import create_app, single_instance
from emojigallery.config import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="emojigallery", description=settings.APP_NAME)
    parser.add_argument(
        "--data-dir",
        default=settings.DATA_DIR,
        help="Directory holding the preference file (env EMOJIGALLERY_DATA_DIR)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help="Logging level (env EMOJIGALLERY_LOG_LEVEL)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Print the current display state as JSON and exit",
    )
    return parser


def run_headless(args: argparse.Namespace) -> int:
    ctx = create_app(
        headless=True,
        data_dir=args.data_dir,
        log_level=args.log_level,
        configure_console_logging=True,
    )
    try:
        print(json.dumps(asdict(ctx.viewmodel.current), indent=2, sort_keys=True))
    finally:
        ctx.close()
    return 0


def run_gui(args: argparse.Namespace) -> int:  # pragma: no cover - runtime
    from emojigallery.views.emoji_screen import EmojiMainWindow

    with single_instance() as acquired:
        if not acquired:
            print("Another Emoji Release instance is already running.")  # noqa: T201
            return 1
        ctx = create_app(
            headless=False,
            data_dir=args.data_dir,
            log_level=args.log_level,
            install_error_hooks=True,
            configure_console_logging=True,
        )
        try:
            win = EmojiMainWindow(ctx.viewmodel)
            win.show()
            return ctx.qt_app.exec()
        finally:
            ctx.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.headless:
        return run_headless(args)
    return run_gui(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
