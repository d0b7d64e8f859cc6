"""Command-line management for prompt templates.

Usage:
    prompt-server list
    prompt-server info <name>
    prompt-server render <name> --args '{"who": "World"}' [--json]
    prompt-server check
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from src.config import settings
from src.prompting.errors import PromptServerError
from src.prompting.registry import PromptRegistry
from src.prompting.validators import find_unbound_references
from src.server.handlers import PromptHandlers
from src.utils.monitoring import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prompt template management")
    parser.add_argument(
        "--prompts-dir",
        action="append",
        default=None,
        help=(
            "Prompt directory to scan (repeatable). Defaults to "
            "`settings.prompts_dirs`."
        ),
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to settings.log_level).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List loaded prompt names")

    info = sub.add_parser("info", help="Show details of one prompt")
    info.add_argument("name")

    render = sub.add_parser("render", help="Render a prompt")
    render.add_argument("name")
    render.add_argument(
        "--args",
        default="{}",
        help="JSON object with argument values.",
    )
    render.add_argument(
        "--json",
        action="store_true",
        help="Print the full response as JSON instead of message text.",
    )

    sub.add_parser(
        "check", help="Report template variables with no declared argument"
    )
    return parser


def _write(text: str) -> None:
    sys.stdout.write(f"{text}\n")


def _tool_text(result: dict) -> str:
    return "\n".join(part["text"] for part in result["content"])


def _cmd_list(handlers: PromptHandlers) -> int:
    _write(_tool_text(handlers.get_prompt_names()))
    return 0


def _cmd_info(handlers: PromptHandlers, args: argparse.Namespace) -> int:
    result = handlers.get_prompt_info(args.name)
    _write(_tool_text(result))
    return 1 if result["isError"] else 0


def _cmd_render(handlers: PromptHandlers, args: argparse.Namespace) -> int:
    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as exc:
        logger.error("--args is not valid JSON: {}", exc)
        return 2
    if not isinstance(arguments, dict):
        logger.error("--args must be a JSON object")
        return 2

    try:
        payload = handlers.get_prompt(args.name, arguments)
    except PromptServerError as exc:
        logger.error("{}", exc)
        return 1

    if args.json:
        _write(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0
    for message in payload["messages"]:
        _write(f"[{message['role']}]\n{message['content']['text']}\n")
    return 0


def _cmd_check(registry: PromptRegistry) -> int:
    problems = 0
    for template in registry.list_templates():
        for error in find_unbound_references(template, {}):
            problems += 1
            _write(f"{template.name}: {error}")
    logger.info("Checked {} prompt(s), {} problem(s)", len(registry), problems)
    return 1 if problems else 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for prompt management.

    Args:
        argv: Optional argv list (excluding program name).

    Returns:
        Process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        args.log_level or settings.log_level,
        settings.logging.file,
        rotation=settings.logging.rotation,
        retention=settings.logging.retention,
    )
    directories = (
        [Path(d) for d in args.prompts_dir]
        if args.prompts_dir
        else settings.prompts_dirs
    )
    registry = PromptRegistry(
        directories, strict_references=settings.strict_references
    )
    handlers = PromptHandlers(registry)

    if args.command == "list":
        return _cmd_list(handlers)
    if args.command == "info":
        return _cmd_info(handlers, args)
    if args.command == "render":
        return _cmd_render(handlers, args)
    if args.command == "check":
        return _cmd_check(registry)
    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
