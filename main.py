#!/usr/bin/env python
"""CLI for Corporate Chronicles."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from chronicles.app import CompanyExplorer
from chronicles.config import create_from_config, get_default_config_path, load_config
from chronicles.errors import ConfigurationError
from chronicles.render import (
    render_branch,
    render_message,
    render_org_tree,
    render_sources,
    render_summary,
    render_timeline,
)
from chronicles.run_logger import RunLogger

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  /timeline       show the history timeline
  /structure      show the organizational structure
  /find UNIT      show one unit and everything under it
  /sources        show sources & references
  /search NAME    analyze another company
  /quit           exit
Anything else is sent to the AI assistant.\
"""


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    query: str
    config: Path
    chat: bool = False
    log: bool = False
    log_dir: str = "logs"

    @field_validator("query")
    @classmethod
    def query_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Company name must not be empty")
        return v.strip()

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


def show_company(explorer: CompanyExplorer) -> None:
    if explorer.error:
        print(f"\nError: {explorer.error}\n")
        return
    data = explorer.data
    if data is None:
        return
    print()
    print(render_summary(data))
    print("\n--- History Timeline ---")
    print(render_timeline(data.timeline))
    print("\n--- Org Structure ---")
    print(render_org_tree(data.structure))
    print("\n--- Sources & References ---")
    print(render_sources(data.sources))
    print()


async def chat_loop(explorer: CompanyExplorer) -> None:
    """Read chat input until /quit or EOF."""
    print(HELP_TEXT)
    for message in explorer.messages:
        print(render_message(message))

    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            return
        line = line.strip()
        if not line:
            continue

        data = explorer.data
        if line == "/quit":
            return
        if line == "/help":
            print(HELP_TEXT)
        elif line == "/timeline" and data is not None:
            print(render_timeline(data.timeline))
        elif line == "/structure" and data is not None:
            print(render_org_tree(data.structure))
        elif line == "/sources" and data is not None:
            print(render_sources(data.sources))
        elif line.startswith("/find ") and data is not None:
            unit = line.removeprefix("/find ")
            print(render_branch(data.structure, unit) or f"No unit named {unit.strip()!r}")
        elif line.startswith("/search "):
            print("Gathering intelligence from the web...")
            await explorer.search(line.removeprefix("/search "))
            show_company(explorer)
            for message in explorer.messages:
                print(render_message(message))
        elif line.startswith("/"):
            print(f"Unknown command: {line} (try /help)")
        elif data is None:
            print("Search for a company first: /search NAME")
        else:
            reply = await explorer.send_chat(line)
            if reply is not None:
                print(render_message(reply))


def log_usage(explorer: CompanyExplorer, run_logger: RunLogger | None) -> None:
    usage = explorer.usage
    logger.info("\n--- Usage Summary ---")
    logger.info(f"API calls: {len(usage.api_calls)}")
    logger.info(f"Input tokens: {usage.input_tokens:,}")
    logger.info(f"Output tokens: {usage.output_tokens:,}")
    if usage.cache_creation_input_tokens:
        logger.info(f"Cache write tokens: {usage.cache_creation_input_tokens:,}")
    if usage.cache_read_input_tokens:
        logger.info(f"Cache read tokens: {usage.cache_read_input_tokens:,}")
    if usage.web_searches:
        logger.info(f"Web searches: {usage.web_searches}")
    logger.info(f"Estimated cost: ${usage.estimated_cost:.4f}")

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


async def run(args: CLIArgs) -> None:
    """Analyze the company and optionally open the chat.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    explorer, run_logger, _price_cache = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Analyzing: {args.query}")
    logger.info(f"Config: {args.config}")
    print("Gathering intelligence from the web...")

    await explorer.search(args.query)
    show_company(explorer)

    try:
        if args.chat:
            await chat_loop(explorer)
    finally:
        explorer.close()
        log_usage(explorer, run_logger)


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Explore the history and organizational structure of a company."
    )
    parser.add_argument(
        "query",
        help="Company name (e.g. Nintendo, Alphabet, SpaceX)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--chat",
        action="store_true",
        default=False,
        help="Open the AI assistant after the analysis",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Write a JSON run log of the session",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            query=ns.query,
            config=config_path,
            chat=ns.chat,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(2)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
