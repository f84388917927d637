from __future__ import annotations

import argparse
import asyncio
import json
import logging

from .client import PostsClient
from .config import Config, ConfigError, load_config
from .landing import ExecutionContext, LandingState
from .tag_cloud import build_tag_cloud
from .utils import configure_logging, json_dumps, log_event
from .view import compose_landing


async def _live_state(config: Config) -> LandingState:
    async with PostsClient(config.api.base_url, user_agent=config.api.user_agent) as client:
        state = LandingState(client, context=ExecutionContext.CLIENT)
        await state.mount()
    return state


def _load(args: argparse.Namespace, logger: logging.Logger) -> Config | None:
    try:
        return load_config(args.config)
    except ConfigError as exc:
        log_event(logger, logging.ERROR, "config_error", error=str(exc))
        return None


def _print_section(name: str, section: dict) -> None:
    print(f"== {name}")
    status = section["status"]
    if status == "failed":
        print(f"  error: {section['error']} (retry: newsdesk landing)")
        return
    if status != "success":
        print(f"  {status}")
        return
    items = section["items"]
    if not items:
        print(f"  {section['empty_message']}")
        return
    for item in items:
        if isinstance(item, dict):
            print(f"  {item['title']}  {item['href']}")
        else:
            print(f"  {item.label}  {item.size}")


def _cmd_landing(args: argparse.Namespace, logger: logging.Logger) -> int:
    config = _load(args, logger)
    if config is None:
        return 1
    state = asyncio.run(_live_state(config))
    if args.json:
        print(json.dumps(state.snapshot(), indent=2, sort_keys=True))
    else:
        view = compose_landing(state, config=config)
        print(view["title"])
        for name in ("news", "gallery", "top", "tag_cloud"):
            _print_section(name, view[name])
    failed = [name for name, slot in state.bundle.items() if slot.is_failed]
    return 2 if failed else 0


def _cmd_tags(args: argparse.Namespace, logger: logging.Logger) -> int:
    config = _load(args, logger)
    if config is None:
        return 1
    state = asyncio.run(_live_state(config))
    return state.top.match(
        empty=lambda: 1,
        loading=lambda: 1,
        success=lambda page: _print_tags(page.posts, args.json),
        failed=lambda error: _report_failure(logger, "top", error.message),
    )


def _print_tags(posts, as_json: bool) -> int:
    entries = build_tag_cloud(posts)
    if as_json:
        print(json_dumps(entries))
        return 0
    for entry in entries:
        print(f"{entry.label}\t{entry.count}\t{entry.size:.2f}")
    return 0


def _report_failure(logger: logging.Logger, feed: str, message: str) -> int:
    log_event(logger, logging.ERROR, "feed_unavailable", feed=feed, error=message)
    return 2


def _cmd_serve(args: argparse.Namespace, logger: logging.Logger) -> int:
    import uvicorn

    log_event(logger, logging.INFO, "serve", host=args.host, port=args.port)
    uvicorn.run("newsdesk.web:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="newsdesk", description="Newsdesk CLI")
    parser.add_argument(
        "--config",
        dest="config",
        default=None,
        help="Path to config.yml (defaults to NEWSDESK_CONFIG_PATH or built-in defaults)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    landing_parser = subparsers.add_parser("landing", help="Fetch all feeds and print the landing page")
    landing_parser.add_argument("--json", action="store_true", help="Print the feed snapshot as JSON")
    landing_parser.set_defaults(func=_cmd_landing)

    tags_parser = subparsers.add_parser("tags", help="Print the tag cloud of the top local posts")
    tags_parser.add_argument("--json", action="store_true", help="Print entries as JSON")
    tags_parser.set_defaults(func=_cmd_tags)

    serve_parser = subparsers.add_parser("serve", help="Run the landing page web app")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=_cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = configure_logging("newsdesk")
    return args.func(args, logger)


if __name__ == "__main__":
    raise SystemExit(main())
