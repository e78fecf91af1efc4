from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from .config import Settings
from .data.catalog import CatalogStore
from .features.commands.loop import CommandLoop
from .features.play.channels import ConsoleChannel
from .features.play.host import SessionHost
from .log import configure_logging
from .server import QuizServer
from .ui.presenters import RichPresenter, make_console

_COMMANDS = ("console", "serve", "http")


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--db", type=Path, default=None, help="Quiz catalog file (JSON)")
    # If omitted, every round gets a fresh random seed.
    p.add_argument("--seed", type=int, default=None, help="Master RNG seed for reproducible rounds")
    p.add_argument("--no-color", action="store_true", help="Disable colored output (default is colored)")
    p.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
    p.add_argument("--host", default=None, help="Bind address for serve/http")
    p.add_argument("--port", type=int, default=None, help="TCP port for serve, HTTP port for http")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quizplay", description="Trivia quiz console, TCP and HTTP front ends")
    parser.add_argument("command", nargs="?", choices=_COMMANDS, default="console", help="Front end to run")
    _add_common_args(parser)
    return parser


def resolve_settings(args: argparse.Namespace, base: Settings | None = None) -> Settings:
    settings = base or Settings.from_env()
    overrides: dict[str, object] = {}
    if args.db is not None:
        overrides["db_path"] = args.db
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.no_color:
        overrides["no_color"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["http_port" if args.command == "http" else "port"] = args.port
    return replace(settings, **overrides)


async def run_console(settings: Settings) -> None:
    catalog = CatalogStore(settings.db_path)
    host = SessionHost(catalog, seed=settings.seed)
    console = make_console(no_color=settings.no_color)
    await CommandLoop(
        client_id="console",
        catalog=catalog,
        host=host,
        channel=ConsoleChannel(console),
        presenter=RichPresenter(console),
    ).run()


async def run_server(settings: Settings) -> None:
    catalog = CatalogStore(settings.db_path)
    host = SessionHost(catalog, seed=settings.seed)
    server = QuizServer(catalog, host, bind=settings.host, port=settings.port, no_color=settings.no_color)
    try:
        await server.serve_forever()
    finally:
        await server.close()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    settings = resolve_settings(args)
    configure_logging(settings.log_level, no_color=settings.no_color)

    if args.command == "http":
        from .web.app import run

        run(settings)
        return
    try:
        if args.command == "serve":
            asyncio.run(run_server(settings))
        else:
            asyncio.run(run_console(settings))
    except KeyboardInterrupt:
        raise SystemExit(130) from None


if __name__ == "__main__":
    main()
