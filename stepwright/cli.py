"""
stepwright command line.

    stepwright run examples/search.yml --var QUERY=playwright --strict
    stepwright run examples/search.yml --dry-run
    stepwright logs --workflow search
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from playwright.async_api import async_playwright

from stepwright.core.config import StepwrightConfig, configure_logging
from stepwright.core.exceptions import StepwrightError, StrictModeAbortError
from stepwright.selectors.digest import DOMDigestCollector
from stepwright.target.page import PlaywrightTarget
from stepwright.workflow.executor import ExecutionOptions, WorkflowExecutor
from stepwright.workflow.loader import load_workflow
from stepwright.workflow.runlog import build_run_log, format_run_log
from stepwright.workflow.store import RunLogStore
from stepwright.workflow.types import StepResult, WorkflowExecutionResult, WorkflowStep
from stepwright.workflow.variables import parse_assignments

logger = logging.getLogger(__name__)


def _print_step(result: StepResult) -> None:
    status = "ok  " if result.success else "FAIL"
    line = f"  [{status}] {result.step_number}. {result.command} ({result.duration_ms:.0f} ms)"
    if result.output:
        line += f" - {result.output}"
    print(line)
    if result.error:
        for error_line in result.error.splitlines():
            print(f"         {error_line}")


def _print_summary(result: WorkflowExecutionResult) -> None:
    print()
    print(
        f"  {result.successful_steps}/{result.total_steps} steps succeeded, "
        f"{result.failed_steps} failed ({result.total_duration_ms:.0f} ms)"
    )
    for cp in result.checkpoints:
        print(f"  checkpoint {cp.name or cp.id} @ step {cp.step_number}: {cp.page_state.url}")


def _print_plan(steps: list[WorkflowStep]) -> None:
    print(f"  Workflow is valid ({len(steps)} steps):")
    for number, step in enumerate(steps, start=1):
        print(f"  {number}. {step.command.value}: {step.args!r}")


async def _run(args: argparse.Namespace, config: StepwrightConfig) -> int:
    steps = load_workflow(args.workflow)
    if args.dry_run:
        _print_plan(steps)
        return 0

    options = ExecutionOptions(
        strict=args.strict,
        variables=parse_assignments(args.var),
        timeout_ms=args.timeout,
        on_step_complete=_print_step,
    )
    headless = config.headless if args.headless is None else args.headless

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            target = PlaywrightTarget(page, default_timeout_ms=config.default_timeout_ms)
            executor = WorkflowExecutor(target, config)
            try:
                result = await executor.execute(steps, options)
            except StrictModeAbortError as exc:
                print(f"\n  {exc}")
                result = exc.result

            _print_summary(result)

            if args.save_log:
                digest = await DOMDigestCollector(target).collect()
                run_log = build_run_log(
                    result,
                    url=await target.current_url(),
                    workflow_id=Path(args.workflow).stem,
                    dom_digest=digest,
                )
                path = RunLogStore(config.run_log_dir).save(run_log)
                print(f"  Run log saved → {path}")
        finally:
            await browser.close()

    return 0 if result.success else 1


def _logs(args: argparse.Namespace, config: StepwrightConfig) -> int:
    store = RunLogStore(config.run_log_dir)
    runs = store.list_runs(args.workflow)
    if not runs:
        print("  No run logs found.")
        return 0
    if args.show:
        for run_log in runs[: args.show]:
            print(format_run_log(run_log))
            print()
        return 0
    for run_log in runs:
        when = datetime.fromtimestamp(run_log.timestamp).strftime("%Y-%m-%d %H:%M:%S")
        status = "ok  " if run_log.success else "FAIL"
        print(f"  [{status}] {when}  {run_log.id}  {run_log.workflow_id or '-'}  {run_log.url}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stepwright",
        description="Run declarative browser workflows.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--log-level", default=None, help="Override STEPWRIGHT_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Execute a workflow file")
    run_parser.add_argument("workflow", help="Path to a YAML/JSON workflow")
    run_parser.add_argument(
        "--var", action="append", default=[], metavar="KEY=VALUE", help="Workflow variable (repeatable)"
    )
    strictness = run_parser.add_mutually_exclusive_group()
    strictness.add_argument("--strict", dest="strict", action="store_true", help="Abort on the first failing step")
    strictness.add_argument(
        "--continue-on-error", dest="strict", action="store_false", help="Record failures and keep going (default)"
    )
    run_parser.add_argument("--timeout", type=int, default=None, metavar="MS", help="Default per-step timeout")
    run_parser.add_argument("--dry-run", action="store_true", help="Validate and print the steps without a browser")
    headedness = run_parser.add_mutually_exclusive_group()
    headedness.add_argument("--headless", dest="headless", action="store_true", default=None)
    headedness.add_argument("--headed", dest="headless", action="store_false")
    run_parser.add_argument("--save-log", action="store_true", help="Store a run log after the run")
    run_parser.set_defaults(strict=False)

    logs_parser = subparsers.add_parser("logs", help="List stored run logs")
    logs_parser.add_argument("--workflow", default=None, help="Only runs of this workflow id")
    logs_parser.add_argument("--show", type=int, default=0, metavar="N", help="Print the N newest logs in full")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = StepwrightConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    try:
        config.validate()
    except ValueError as exc:
        print(f"stepwright: {exc}", file=sys.stderr)
        return 2
    configure_logging(config.log_level)

    try:
        if args.command == "run":
            return asyncio.run(_run(args, config))
        return _logs(args, config)
    except StepwrightError as exc:
        print(f"stepwright: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
