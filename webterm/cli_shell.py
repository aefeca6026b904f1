import argparse
import asyncio
import logging
import os

from rich.console import Console
from rich.markup import escape

from webterm.config.settings import BACKENDS, Settings
from webterm.container import DependencyContainer
from webterm.entities.command import HistoryEntry
from webterm.exceptions import BaseAppError
from webterm.use_cases.shell.session import ShellSession
from webterm.use_cases.shell.tokenizer import tokenize

EXIT_WORDS = {"exit", "quit"}


def build_settings(args: argparse.Namespace) -> Settings:
    cfg = Settings()
    if args.backend:
        cfg.backend = args.backend
    if args.root:
        cfg.local_root = os.path.abspath(os.path.expanduser(args.root))
    if args.api_url:
        cfg.api_url = args.api_url.rstrip("/")
    if args.user:
        cfg.user = args.user
    return cfg


def prompt_for(session: ShellSession) -> str:
    return f"[bold cyan]{escape(session.user)}@system[/]:[bold blue]{escape(session.working_path)}[/]$ "


def render(console: Console, entry: HistoryEntry) -> None:
    if entry.succeeded and tokenize(entry.command)[0] == "clear":
        console.clear()
    style = "green" if entry.succeeded else "red"
    for line in entry.output:
        console.print(escape(line), style=style, highlight=False, soft_wrap=True)


async def run_once(session: ShellSession, console: Console, command: str) -> int:
    try:
        entry = await session.submit(command)
    finally:
        await session.aclose()
    if entry is None:
        return 0
    render(console, entry)
    return 0 if entry.succeeded else 1


async def repl(session: ShellSession, console: Console) -> int:
    console.print(
        f"Connected as [bold]{escape(session.user)}[/]. Type 'help' for commands, 'exit' to leave."
    )
    try:
        while True:
            try:
                line = await asyncio.to_thread(console.input, prompt_for(session))
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            if line.strip().lower() in EXIT_WORDS:
                break
            entry = await session.submit(line)
            if entry is not None:
                render(console, entry)
    finally:
        await session.aclose()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="webterm",
        description="Interactive terminal over the web desktop file storage.",
    )
    parser.add_argument(
        "--backend", choices=list(BACKENDS), default=None, help="Storage backend"
    )
    parser.add_argument("--root", default=None, help="Directory served by the local backend")
    parser.add_argument("--api-url", default=None, help="Base URL of the storage API")
    parser.add_argument("--user", default=None, help="Caller identity")
    parser.add_argument(
        "-c", "--command", default=None, help="Run one command line and exit"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    console = Console()
    try:
        session = DependencyContainer(build_settings(args)).create_session()
    except BaseAppError as e:
        console.print(f"Error: {escape(str(e))}", style="red", soft_wrap=True)
        return 2

    if args.command is not None:
        return asyncio.run(run_once(session, console, args.command))
    try:
        return asyncio.run(repl(session, console))
    except KeyboardInterrupt:
        console.print()
        return 130


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
