"""
CLI entrypoint: ``task list [--page N]``.

Reads the API key from task.ini, fetches one page of tasks and prints
one line per task. Any failure is logged and exits with status 1.
"""

import argparse
import logging
import sys

import httpx
from pydantic import ValidationError

from todo_api.logging_utils import setup_logging

from .api import ApiClient
from .config import DEFAULT_CONFIG_FILE, CliConfigError, load_config
from .models import Task

logger = logging.getLogger("todo_cli")


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    created = task.date_created.strftime("%Y-%m-%d %H:%M")
    return f"[{mark}] {task.id:>5}  {task.title}  ({created})"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="task", description="Command-line client for the todo API")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE, help="Path to the INI file with the API key")
    parser.add_argument("--host", default=None, help="Override the API host from the config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    p_list = sub.add_parser("list", help="List your tasks")
    p_list.add_argument("--page", type=int, default=0, help="Page index (0-based)")
    return parser


def cmd_list(client: ApiClient, page: int) -> int:
    result = client.list(page)
    logger.info("Retrieved %s of %s tasks", len(result.items), result.total_count)
    for task in result.items:
        print(format_task(task))
    return 0


def main(argv: list[str] | None = None, *, transport: httpx.BaseTransport | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "INFO", stream=sys.stderr)

    if args.page < 0:
        logger.error("Page must be greater than or equal to 0")
        return 1

    try:
        config = load_config(args.config)
    except CliConfigError as exc:
        logger.error("%s", exc)
        return 1

    host = args.host or config.host
    try:
        with ApiClient(config.api_key, host, transport=transport) as client:
            return cmd_list(client, args.page)
    except httpx.HTTPStatusError:
        # already logged by the client
        return 1
    except httpx.HTTPError as exc:
        logger.error("Request to %s failed: %s", host, exc)
        return 1
    except ValidationError as exc:
        logger.error("Unexpected response from %s: %s", host, exc)
        return 1


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
