"""Command-line entrypoint that serves the API with uvicorn."""

import argparse

import uvicorn

from macrolens.api.app import create_app
from macrolens.config import Settings
from macrolens.containers import build_container


def build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="macrolens", description="Serve the MacroLens / PartyPlanner API."
    )
    parser.add_argument("--host", default=None, help="Override HOST.")
    parser.add_argument("--port", type=int, default=None, help="Override PORT.")
    parser.add_argument(
        "--variant",
        choices=["nutrition", "planner"],
        default=None,
        help="Override APP_VARIANT.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Build the app from the environment and run it."""
    args = build_parser().parse_args(argv)
    overrides: dict[str, object] = {}
    if args.variant:
        overrides["app_variant"] = args.variant
    settings = Settings(**overrides)
    app = create_app(build_container(settings))
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


if __name__ == "__main__":
    main()
