"""Workflow execution engine: runs step lists against a live target."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import math
import re
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, Mapping

from stepwright.core.config import StepwrightConfig
from stepwright.core.exceptions import (
    AssertionFailedError,
    InvalidSelectorError,
    StepArgumentError,
    StepwrightError,
    StrictModeAbortError,
    TargetOperationError,
    TimeoutExceededError,
    is_timeout_error,
)
from stepwright.selectors.disambiguator import SelectorDisambiguator, format_matches
from stepwright.selectors.normalizer import (
    format_selector_for_error,
    is_valid_selector,
    looks_like_selector_error,
    normalize_selector,
    suggest_selector_fix,
)
from stepwright.selectors.ranker import SelectorRanker
from stepwright.target.base import BaseTarget
from stepwright.workflow.types import (
    Checkpoint,
    Command,
    PageSnapshot,
    RunState,
    StepResult,
    WorkflowExecutionResult,
    WorkflowStep,
)
from stepwright.workflow.variables import substitute

logger = logging.getLogger(__name__)

StepStartObserver = Callable[[int, str, Any], Any]
StepCompleteObserver = Callable[[StepResult], Any]
InputProvider = Callable[[str], Any]

_JS_SCROLL_BOTTOM = "() => window.scrollTo(0, document.body.scrollHeight)"
_JS_SCROLL_TOP = "() => window.scrollTo(0, 0)"
_JS_SCROLL_PERCENT = "(p) => window.scrollTo(0, document.body.scrollHeight * p / 100)"
_JS_SCROLL_BY = "(px) => window.scrollBy(0, px)"
_JS_SCROLL_INTO_VIEW = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    el.scrollIntoView({ block: 'center' });
    return true;
}
"""

_MULTIPLE_MATCH_MARKERS = ("multiple elements", "strict mode violation")


@dataclass
class ExecutionOptions:
    """Per-run options for ``WorkflowExecutor.execute``."""

    strict: bool = False
    variables: Mapping[str, str] = field(default_factory=dict)
    timeout_ms: int | None = None  # falls back to config.default_timeout_ms
    strict_variables: bool = False
    suggest_alternatives: bool = False
    disambiguate: bool = False
    on_step_start: StepStartObserver | None = None
    on_step_complete: StepCompleteObserver | None = None
    input_provider: InputProvider | None = None


@dataclass
class _StepContext:
    number: int
    command: str
    timeout: int
    options: ExecutionOptions
    selector: str | None = None
    checkpoint: Checkpoint | None = None


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _default_input(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


def _raw_command_name(raw: Any) -> str:
    if isinstance(raw, WorkflowStep):
        return raw.command.value
    if isinstance(raw, Mapping) and len(raw) == 1:
        return str(next(iter(raw)))
    if isinstance(raw, str):
        return raw
    return "<invalid>"


def _field(args: Any, *keys: str, default: Any = None) -> Any:
    """First present key of a mapping argument payload."""
    if not isinstance(args, Mapping):
        return default
    for key in keys:
        if key in args and args[key] is not None:
            return args[key]
    return default


def _split_shorthand(args: str) -> tuple[str, str]:
    """``"selector rest of text"`` -> ``("selector", "rest of text")``."""
    selector, _, rest = args.strip().partition(" ")
    return selector, rest


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def _number(value: Any, ctx: _StepContext, name: str, cast: Callable[[Any], Any] = float) -> Any:
    """Convert a numeric step argument, reporting bad input as an argument error."""
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise StepArgumentError(ctx.command, f"{name} must be a number, got {value!r}") from None


_LEADING_NUMBER = re.compile(r"\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


def _leading_number(text: str) -> float | None:
    """Numeric prefix of ``text`` (``"42 items"`` -> 42.0), or None."""
    match = _LEADING_NUMBER.match(text)
    return float(match.group()) if match else None


def _same_value(actual: Any, expected: Any) -> bool:
    # True == 1 in Python but not in JavaScript.
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


def _js_falsy(value: Any) -> bool:
    """JavaScript falsiness for a value returned by ``evaluate``."""
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or math.isnan(value)
    return False


_TEXT_CHECKS = ("equals", "text", "contains", "matches", "greater_than", "greater-than", "less_than", "less-than")


def _compare(subject: str, content: str, raw: Any, args: Mapping[str, Any], ctx: _StepContext) -> str | None:
    """
    Apply the first text comparison present in ``args`` to ``content``.

    ``raw`` is the untouched value (a script result, or the text itself).
    Returns the success message, or None when ``args`` holds no comparison.
    """
    expected = _field(args, "equals", "text")
    if expected is not None:
        expected_text = _stringify(expected)
        if not (_same_value(raw, expected) or content == expected_text):
            left, right = _leading_number(content), _leading_number(expected_text)
            if left is None or right is None or left != right:
                raise AssertionFailedError(
                    f'{subject} "{content}" does not equal "{expected_text}"', expected, raw
                )
        return f'{subject} equals "{expected_text}"'

    if "contains" in args:
        expected_text = _stringify(args["contains"])
        if expected_text not in content:
            raise AssertionFailedError(
                f'{subject} "{content}" does not contain "{expected_text}"', expected_text, content
            )
        return f'{subject} contains "{expected_text}"'

    if "matches" in args:
        pattern = str(args["matches"])
        try:
            found = re.search(pattern, content)
        except re.error as exc:
            raise StepArgumentError(ctx.command, f"invalid pattern {pattern!r}: {exc}") from None
        if not found:
            raise AssertionFailedError(f'{subject} "{content}" does not match pattern "{pattern}"', pattern, content)
        return f'{subject} matches pattern "{pattern}"'

    for keys, symbol, word in (
        (("greater_than", "greater-than"), ">", "greater"),
        (("less_than", "less-than"), "<", "less"),
    ):
        threshold = _field(args, *keys)
        if threshold is None:
            continue
        value, limit = _leading_number(content), _leading_number(_stringify(threshold))
        if value is None or limit is None:
            raise AssertionFailedError(
                f'Cannot compare non-numeric values: "{content}" {symbol} "{_stringify(threshold)}"',
                threshold,
                content,
            )
        passed = value > limit if symbol == ">" else value < limit
        if not passed:
            raise AssertionFailedError(f"{subject} {value:g} is not {word} than {limit:g}", threshold, value)
        return f"{subject} ({value:g}) is {word} than {limit:g}"

    return None


class WorkflowExecutor:
    """
    Executes an ordered list of workflow steps against a target.

    Steps run strictly one at a time. Each produces exactly one
    ``StepResult``. Without ``strict`` a failing step is recorded and the
    run continues; with ``strict`` the failing step is recorded and
    ``StrictModeAbortError`` is raised carrying the partial result.

    One executor drives one target; a second concurrent ``execute`` on the
    same instance is refused.
    """

    def __init__(self, target: BaseTarget, config: StepwrightConfig | None = None) -> None:
        self._target = target
        self._config = config or StepwrightConfig()
        self._ranker = SelectorRanker(target, self._config.ranking)
        self._disambiguator = SelectorDisambiguator(target)
        self._checkpoints: list[Checkpoint] = []
        self._running = False
        self.state = RunState.PENDING

        self._handlers: dict[Command, Callable[[Any, _StepContext], Awaitable[str | None]]] = {
            Command.NAVIGATE: self._navigate,
            Command.CLICK: self._click,
            Command.TYPE: self._type,
            Command.WAIT: self._wait,
            Command.SCREENSHOT: self._screenshot,
            Command.EVALUATE: self._evaluate,
            Command.SCROLL: self._scroll,
            Command.SELECT: self._select,
            Command.HOVER: self._hover,
            Command.FILL: self._fill,
            Command.PRESS: self._press,
            Command.ASSERT: self._assert,
            Command.CHECKPOINT: self._checkpoint,
            Command.RELOAD: self._reload,
            Command.BACK: self._back,
            Command.FORWARD: self._forward,
        }

    @property
    def checkpoints(self) -> list[Checkpoint]:
        """Checkpoints created by the current (or last) run."""
        return list(self._checkpoints)

    async def execute(
        self,
        steps: Iterable[Mapping[str, Any] | WorkflowStep],
        options: ExecutionOptions | None = None,
    ) -> WorkflowExecutionResult:
        """
        Run ``steps`` in order and return the aggregate result.

        Parameters
        ----------
        steps:
            ``{command: args}`` mappings or parsed ``WorkflowStep`` objects.
        options:
            Strictness, variables, default timeout and observers.

        Raises
        ------
        StrictModeAbortError
            Only with ``options.strict`` and only after the failing step's
            result has been recorded.
        """
        if self._running:
            raise RuntimeError("execute() is already running on this executor")
        options = options or ExecutionOptions()
        step_list = list(steps)
        timeout = options.timeout_ms if options.timeout_ms is not None else self._config.default_timeout_ms

        self._running = True
        self._checkpoints = []
        self.state = RunState.RUNNING
        results: list[StepResult] = []
        total_start = time.monotonic()
        logger.info(f"Executing workflow with {len(step_list)} steps (strict={options.strict})")

        try:
            for number, raw in enumerate(step_list, start=1):
                result = await self._run_step(number, raw, options, timeout)
                results.append(result)
                if options.on_step_complete is not None:
                    await _maybe_await(options.on_step_complete(result))

                if result.success:
                    logger.info(f"[{number}/{len(step_list)}] {result.command}: ok")
                else:
                    logger.warning(f"[{number}/{len(step_list)}] {result.command} failed: {result.error}")
                    if options.strict:
                        self.state = RunState.ABORTED
                        partial = self._build_result(step_list, results, total_start)
                        raise StrictModeAbortError(number, result.error or "failed", partial)

                if number < len(step_list) and self._config.step_delay_ms > 0:
                    await self._target.wait_for_timeout(self._config.step_delay_ms)
            self.state = RunState.COMPLETED
        finally:
            self._running = False
            if self.state == RunState.RUNNING:
                # An observer or the inter-step wait raised.
                self.state = RunState.ABORTED

        final = self._build_result(step_list, results, total_start)
        logger.info(
            f"Workflow finished: {final.successful_steps}/{final.total_steps} steps succeeded "
            f"in {final.total_duration_ms:.0f}ms"
        )
        return final

    def _build_result(
        self,
        step_list: list[Any],
        results: list[StepResult],
        total_start: float,
    ) -> WorkflowExecutionResult:
        succeeded = sum(1 for r in results if r.success)
        failed = len(results) - succeeded
        return WorkflowExecutionResult(
            success=failed == 0,
            total_steps=len(step_list),
            successful_steps=succeeded,
            failed_steps=failed,
            steps=list(results),
            total_duration_ms=(time.monotonic() - total_start) * 1000,
            checkpoints=list(self._checkpoints),
            state=self.state,
        )

    # ------------------------------------------------------------------
    # Single step
    # ------------------------------------------------------------------

    async def _run_step(
        self,
        number: int,
        raw: Any,
        options: ExecutionOptions,
        timeout: int,
    ) -> StepResult:
        step_start = time.monotonic()
        ctx = _StepContext(number=number, command=_raw_command_name(raw), timeout=timeout, options=options)
        args: Any = raw.get(ctx.command) if isinstance(raw, Mapping) else None

        def record(success: bool, output: str | None = None, error: str | None = None) -> StepResult:
            return StepResult(
                step_number=number,
                command=ctx.command,
                args=args,
                success=success,
                output=output,
                error=error,
                duration_ms=(time.monotonic() - step_start) * 1000,
                checkpoint=ctx.checkpoint,
            )

        # Parse + substitute; failures here never reach the target.
        try:
            step = WorkflowStep.from_mapping(raw)
            ctx.command = step.command.value
            args = substitute(step.args, options.variables, options.strict_variables)
        except StepwrightError as exc:
            return record(False, error=str(exc))

        if options.on_step_start is not None:
            await _maybe_await(options.on_step_start(number, ctx.command, args))

        try:
            output = await self._handlers[step.command](args, ctx)
        except TargetOperationError as exc:
            await self._enrich(exc, ctx)
            return record(False, error=str(exc))
        except StepwrightError as exc:
            return record(False, error=str(exc))
        except Exception as exc:
            wrapped = self._wrap(exc, ctx)
            await self._enrich(wrapped, ctx)
            return record(False, error=str(wrapped))

        return record(True, output=output)

    @staticmethod
    def _wrap(exc: Exception, ctx: _StepContext) -> TargetOperationError:
        """Wrap a raw target failure into the error taxonomy."""
        cls = TimeoutExceededError if is_timeout_error(exc) else TargetOperationError
        where = f" ({ctx.selector})" if ctx.selector else ""
        return cls(
            f"Failed to {ctx.command}: {exc}{where}",
            operation=ctx.command,
            selector=ctx.selector,
            original_error=exc,
        )

    async def _enrich(self, exc: TargetOperationError, ctx: _StepContext) -> None:
        """Attach selector-fix suggestions when the failure looks selector related."""
        selector = exc.selector or ctx.selector
        if not selector or not looks_like_selector_error(exc.message):
            return

        for suggestion in suggest_selector_fix(selector, exc.message):
            if suggestion not in exc.suggestions:
                exc.suggestions.append(suggestion)

        lowered = exc.message.lower()
        try:
            if ctx.options.disambiguate and any(m in lowered for m in _MULTIPLE_MATCH_MARKERS):
                resolved = await self._disambiguator.resolve(selector)
                if resolved.elements:
                    exc.suggestions.append(format_matches(resolved.elements))
            elif ctx.options.suggest_alternatives:
                alternatives = await self._ranker.find_alternatives(selector)
                if alternatives:
                    exc.suggestions.append(f"Selectors that match on this page: {', '.join(alternatives)}")
        except StepwrightError as probe_error:
            logger.debug(f"Could not probe alternatives for {selector!r}: {probe_error}")

    # ------------------------------------------------------------------
    # Argument helpers
    # ------------------------------------------------------------------

    def _selector(self, value: Any, ctx: _StepContext) -> str:
        """Normalize and validate a selector argument before it reaches the target."""
        if not isinstance(value, str) or not value.strip():
            raise StepArgumentError(ctx.command, "a selector is required")
        selector = normalize_selector(value)
        if not is_valid_selector(selector):
            hints = suggest_selector_fix(value)
            message = f"Invalid selector: {format_selector_for_error(value)}"
            if hints:
                message += "\nSuggestions:\n" + "\n".join(f"  - {h}" for h in hints)
            raise InvalidSelectorError(value, message)
        ctx.selector = selector
        return selector

    @staticmethod
    def _timeout(args: Any, ctx: _StepContext) -> int:
        value = _field(args, "timeout")
        return _number(value, ctx, "timeout", int) if value is not None else ctx.timeout

    @staticmethod
    def _wait_until(args: Any) -> str:
        return _field(args, "wait_until", "waitUntil", default="load")

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------

    async def _navigate(self, args: Any, ctx: _StepContext) -> str:
        url = args if isinstance(args, str) else _field(args, "url")
        if not url:
            raise StepArgumentError(ctx.command, "a url is required")
        await self._target.navigate(url, wait_until=self._wait_until(args), timeout=self._timeout(args, ctx))
        return f"Navigated to {url}"

    async def _click(self, args: Any, ctx: _StepContext) -> str:
        selector = self._selector(args if isinstance(args, str) else _field(args, "selector"), ctx)
        await self._target.click(
            selector,
            button=_field(args, "button", default="left"),
            click_count=_number(_field(args, "click_count", "clickCount", default=1), ctx, "click_count", int),
            timeout=self._timeout(args, ctx),
        )
        return f"Clicked {selector}"

    async def _type(self, args: Any, ctx: _StepContext) -> str:
        if isinstance(args, str):
            raw_selector, text = _split_shorthand(args)
        else:
            raw_selector, text = _field(args, "selector"), _field(args, "text", "value")
        selector = self._selector(raw_selector, ctx)
        if text is None:
            raise StepArgumentError(ctx.command, "text is required")
        text = str(text)
        timeout = self._timeout(args, ctx)

        await self._target.type(
            selector,
            text,
            delay=_number(_field(args, "delay", default=0), ctx, "delay", int),
            clear_first=bool(_field(args, "clear", "clear_first", "clearFirst", default=False)),
            timeout=timeout,
        )
        if _field(args, "enter", "submit", "press_enter", default=False):
            await self._target.press(selector, "Enter", timeout=timeout)
        return f'Typed "{text}" into {selector}'

    async def _wait(self, args: Any, ctx: _StepContext) -> str:
        # Mode priority: selector, fixed duration, url pattern, operator message.
        if isinstance(args, str):
            selector = self._selector(args, ctx)
            await self._target.wait_for_selector(selector, state="visible", timeout=ctx.timeout)
            return f"Waited for selector: {selector}"
        if isinstance(args, (int, float)) and not isinstance(args, bool):
            await self._target.wait_for_timeout(args)
            return f"Waited {args}ms"
        if not isinstance(args, Mapping):
            raise StepArgumentError(ctx.command, "expected a selector, a duration or a mapping")

        if "selector" in args:
            selector = self._selector(args["selector"], ctx)
            state = _field(args, "state", default="visible")
            await self._target.wait_for_selector(selector, state=state, timeout=self._timeout(args, ctx))
            return f"Waited for selector: {selector} ({state})"
        if "time" in args or "ms" in args:
            ms = _field(args, "time", "ms")
            await self._target.wait_for_timeout(_number(ms, ctx, "time"))
            return f"Waited {ms}ms"
        if "url" in args:
            pattern = str(args["url"])
            await self._target.wait_for_url(pattern, timeout=self._timeout(args, ctx))
            return f"Waited for URL: {pattern}"
        if "message" in args:
            message = str(args["message"])
            provider = ctx.options.input_provider or _default_input
            # No engine timeout: the operator decides when to continue.
            await _maybe_await(provider(f"{message}\nPress Enter to continue... "))
            return f"Resumed after: {message}"
        raise StepArgumentError(ctx.command, "one of selector, time/ms, url or message is required")

    async def _screenshot(self, args: Any, ctx: _StepContext) -> str:
        path = args if isinstance(args, str) else _field(args, "path")
        if not path:
            raise StepArgumentError(ctx.command, "a path is required")
        full_page = _field(args, "full_page", "fullPage", default=True) is not False
        image_format = _field(args, "type", "format", default="png")
        await self._target.screenshot(path, full_page=full_page, image_format=image_format)
        return f"Screenshot saved to {path}"

    async def _evaluate(self, args: Any, ctx: _StepContext) -> str | None:
        script = args if isinstance(args, str) else _field(args, "script", "code", "expression")
        if not script:
            raise StepArgumentError(ctx.command, "a script is required")
        result = await self._target.evaluate(script)
        if result is None:
            return None
        return _stringify(result)

    async def _scroll(self, args: Any, ctx: _StepContext) -> str:
        if args is None or isinstance(args, str):
            if isinstance(args, str) and args.strip().lower() == "top":
                await self._target.evaluate(_JS_SCROLL_TOP)
                return "Scrolled to top"
            await self._target.evaluate(_JS_SCROLL_BOTTOM)
            return "Scrolled to bottom"
        if not isinstance(args, Mapping):
            raise StepArgumentError(ctx.command, "expected a direction or a mapping")

        if "selector" in args:
            selector = self._selector(args["selector"], ctx)
            found = await self._target.evaluate(_JS_SCROLL_INTO_VIEW, selector)
            if found is False:
                raise TargetOperationError(
                    f"No element matches selector: {selector}", operation="scroll", selector=selector
                )
            return f"Scrolled to {selector}"
        if "to" in args:
            to = str(args["to"]).strip().lower()
            if to == "top":
                await self._target.evaluate(_JS_SCROLL_TOP)
                return "Scrolled to top"
            if to == "bottom":
                await self._target.evaluate(_JS_SCROLL_BOTTOM)
                return "Scrolled to bottom"
            try:
                percentage = float(to.rstrip("%"))
            except ValueError:
                raise StepArgumentError(ctx.command, f"cannot scroll to {args['to']!r}") from None
            await self._target.evaluate(_JS_SCROLL_PERCENT, percentage)
            return f"Scrolled to {percentage:g}%"
        if "by" in args:
            pixels = _number(args["by"], ctx, "by")
            await self._target.evaluate(_JS_SCROLL_BY, pixels)
            return f"Scrolled by {pixels:g}px"
        raise StepArgumentError(ctx.command, "one of selector, to or by is required")

    async def _select(self, args: Any, ctx: _StepContext) -> str:
        if isinstance(args, str):
            raw_selector, value = _split_shorthand(args)
        else:
            raw_selector, value = _field(args, "selector"), _field(args, "value")
        selector = self._selector(raw_selector, ctx)
        if value is None:
            raise StepArgumentError(ctx.command, "a value is required")
        await self._target.select(selector, str(value), timeout=self._timeout(args, ctx))
        return f'Selected "{value}" in {selector}'

    async def _hover(self, args: Any, ctx: _StepContext) -> str:
        selector = self._selector(args if isinstance(args, str) else _field(args, "selector"), ctx)
        await self._target.hover(selector, position=_field(args, "position"), timeout=self._timeout(args, ctx))
        return f"Hovered over {selector}"

    async def _fill(self, args: Any, ctx: _StepContext) -> str:
        timeout = self._timeout(args, ctx)
        form = _field(args, "form")
        if isinstance(form, Mapping):
            for name, value in form.items():
                selector = self._selector(f'[name="{name}"]', ctx)
                await self._target.fill(selector, "" if value is None else str(value), timeout=timeout)
            return f"Filled {len(form)} fields"

        if isinstance(args, str):
            raw_selector, value = _split_shorthand(args)
        else:
            raw_selector, value = _field(args, "selector"), _field(args, "value", "text")
        selector = self._selector(raw_selector, ctx)
        if value is None:
            raise StepArgumentError(ctx.command, "a value is required")
        await self._target.fill(selector, str(value), timeout=timeout)
        return f"Filled {selector}"

    async def _press(self, args: Any, ctx: _StepContext) -> str:
        key = args if isinstance(args, str) else _field(args, "key")
        if not key:
            raise StepArgumentError(ctx.command, "a key is required")
        raw_selector = _field(args, "selector")
        selector = self._selector(raw_selector, ctx) if raw_selector is not None else None
        await self._target.press(selector, key, timeout=self._timeout(args, ctx))
        return f"Pressed {key}" + (f" on {selector}" if selector else "")

    async def _assert(self, args: Any, ctx: _StepContext) -> str:
        if isinstance(args, str):
            args = {"selector": args}
        if not isinstance(args, Mapping):
            raise StepArgumentError(ctx.command, "expected a selector or a mapping")
        try:
            return await self._check(args, ctx)
        except AssertionFailedError as exc:
            custom = _field(args, "message")
            if custom:
                raise AssertionFailedError(str(custom), exc.expected, exc.actual) from exc
            raise

    async def _check(self, args: Mapping[str, Any], ctx: _StepContext) -> str:
        if "selector" in args:
            selector = self._selector(args["selector"], ctx)
            count = await self._target.query_count(selector)

            if "count" in args:
                expected = _number(args["count"], ctx, "count", int)
                if count != expected:
                    raise AssertionFailedError(
                        f"Expected {expected} elements matching {selector}, found {count}", expected, count
                    )
                return f"Element count equals {expected}: {selector}"

            if "visible" in args or args.get("not_visible") or args.get("hidden"):
                want_visible = bool(args.get("visible", True)) and not (
                    args.get("not_visible") or args.get("hidden")
                )
                visible = count > 0 and await self._target.query_visible(selector)
                if want_visible and not visible:
                    raise AssertionFailedError(f"Element is not visible: {selector}", True, False)
                if not want_visible and visible:
                    raise AssertionFailedError(f"Element is visible: {selector}", False, True)
                return f"Element is {'visible' if want_visible else 'not visible'}: {selector}"

            if count == 0:
                raise AssertionFailedError(f"Element not found: {selector}", "at least 1 element", 0)

            if "value" in args:
                expected = str(args["value"])
                actual = await self._target.query_input_value(selector)
                if actual != expected:
                    raise AssertionFailedError(
                        f'Input value "{actual}" does not equal "{expected}"', expected, actual
                    )
                return f'Input value equals "{expected}"'

            if any(key in args for key in _TEXT_CHECKS):
                text = await self._target.query_text(selector)
                outcome = _compare("Element text", text, text, args, ctx)
                if outcome is not None:
                    return outcome

            return f"Element exists: {selector}"

        script = _field(args, "script", "eval", "expression")
        if script:
            result = await self._target.evaluate(script)
            actual = _stringify(result)
            outcome = _compare("Evaluation result", actual, result, args, ctx)
            if outcome is not None:
                return outcome
            if _js_falsy(result):
                raise AssertionFailedError(f"Script result is not truthy: {actual}", "truthy", result)
            return "Script result is truthy"

        raise StepArgumentError(ctx.command, "a selector or a script is required")

    async def _checkpoint(self, args: Any, ctx: _StepContext) -> str:
        name = args if isinstance(args, str) else _field(args, "name")
        checkpoint = Checkpoint(
            id=uuid.uuid4().hex[:12],
            name=str(name) if name else None,
            page_state=PageSnapshot(
                url=await self._target.current_url(),
                title=await self._target.title(),
                timestamp=datetime.now(timezone.utc).isoformat(),
            ),
            step_number=ctx.number,
        )
        self._checkpoints.append(checkpoint)
        ctx.checkpoint = checkpoint
        logger.debug(f"Checkpoint {checkpoint.id} ({checkpoint.name}) at step {ctx.number}")
        return f"Checkpoint created: {checkpoint.name or checkpoint.id}"

    async def _reload(self, args: Any, ctx: _StepContext) -> str:
        await self._target.reload(wait_until=self._wait_until(args), timeout=self._timeout(args, ctx))
        return "Reloaded page"

    async def _back(self, args: Any, ctx: _StepContext) -> str:
        await self._target.go_back(wait_until=self._wait_until(args), timeout=self._timeout(args, ctx))
        return "Navigated back"

    async def _forward(self, args: Any, ctx: _StepContext) -> str:
        await self._target.go_forward(wait_until=self._wait_until(args), timeout=self._timeout(args, ctx))
        return "Navigated forward"
