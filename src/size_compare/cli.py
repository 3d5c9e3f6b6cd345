"""Command line entrypoint for running size-compare inside GitHub Actions."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

import httpx

from size_compare.collect.sizes import SizeCollector
from size_compare.config import ActionConfig, CliOverrides, load_effective_config
from size_compare.github.client import GitHubClient
from size_compare.github.context import EventContext, load_event_context
from size_compare.github.workflow import WorkflowCommandHandler, WorkflowCommands
from size_compare.history.store import HistoryStore
from size_compare.logging import JsonlAuditLogger
from size_compare.reconcile import Reconciler, ReconcileResult

logger = logging.getLogger("size_compare")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for startup overrides."""
    parser = argparse.ArgumentParser(prog="size-compare", description=__doc__)
    parser.add_argument("--working-dir", required=False, default=".")
    parser.add_argument(
        "--files",
        action="append",
        default=None,
        help="Glob pattern of files to track. Repeat for several patterns.",
    )
    parser.add_argument("--gist-id", required=False, default=None)
    parser.add_argument("--history-file", required=False, default=None)
    parser.add_argument("--audit-log", required=False, default=None)
    parser.add_argument("--debug", action="store_true", help="Emit ::debug:: traces.")
    return parser


def configure_logging(commands: WorkflowCommands, debug: bool) -> None:
    """Route package logs through workflow commands."""
    handler = WorkflowCommandHandler(commands)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False


async def run_action(
    config: ActionConfig,
    context: EventContext,
    commands: WorkflowCommands,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ReconcileResult:
    """Wire real collaborators and reconcile one event."""
    audit_logger = JsonlAuditLogger(config.audit_log) if config.audit_log is not None else None
    async with (
        GitHubClient(config.github.token, config.github.api_url, transport=transport) as repo_api,
        GitHubClient(
            config.github.gist_token, config.github.api_url, transport=transport
        ) as gist_api,
    ):
        reconciler = Reconciler(
            collector=SizeCollector(),
            history=HistoryStore(gist_api, config.store.gist_id, config.store.history_file),
            comments=repo_api,
            commit_comments=repo_api,
            annotator=commands,
            patterns=config.files,
            working_dir=config.working_dir,
            server_url=config.github.server_url,
            audit_logger=audit_logger,
        )
        return await reconciler.run(context)


def write_step_summary(body: str, environ: Mapping[str, str]) -> None:
    """Append the report to the job summary when the runner provides one."""
    summary_path = environ.get("GITHUB_STEP_SUMMARY")
    if not summary_path:
        return
    with Path(summary_path).open("a", encoding="utf-8") as handle:
        handle.write(body.replace("\r\n", "\n"))
        handle.write("\n")


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    """Entrypoint; returns a process exit code."""
    env = os.environ if environ is None else environ
    args = build_arg_parser().parse_args(argv)
    commands = WorkflowCommands()
    configure_logging(commands, debug=args.debug or env.get("RUNNER_DEBUG") == "1")

    overrides = CliOverrides(
        files=tuple(args.files) if args.files else None,
        gist_id=args.gist_id,
        history_file=args.history_file,
        audit_log=Path(args.audit_log).resolve() if args.audit_log else None,
    )
    try:
        config = load_effective_config(Path(args.working_dir), env, overrides)
        logger.debug("Effective config: %s", json.dumps(config.to_public_dict(), sort_keys=True))
        context = load_event_context(env)
        result = asyncio.run(run_action(config, context, commands))
    except Exception as error:
        commands.error(str(error) or type(error).__name__)
        return 1

    logger.info("size-compare finished: %s", result.kind)
    if result.body is not None:
        write_step_summary(result.body, env)
    return 0


if __name__ == "__main__":
    sys.exit(main())
