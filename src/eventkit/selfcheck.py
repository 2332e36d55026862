"""Behavioural self-check of Event and Subscription.

Each check drives a fresh Event through a scripted scenario and raises
:class:`SelfCheckError` on the first deviation. ``run_checks`` collects the
outcome of every check for reporting by the CLI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from eventkit.config import EventkitConfig
from eventkit.errors import SelfCheckError
from eventkit.event import ArgMode, Event, Subscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    name: str
    passed: bool
    detail: str = ""


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise SelfCheckError(message)


def check_basic_operations() -> None:
    """Bind, permanently bind and release callbacks, some of them mid-fire."""
    event: Event[[]] = Event()
    event.fire()

    flags = dict.fromkeys("abcd", False)
    subscriptions: dict[str, Subscription] = {}

    def setter(
        name: str, then: Callable[[], None] | None = None
    ) -> Callable[[], None]:
        def callback() -> None:
            _expect(not flags[name], f"callback {name} ran twice in one firing")
            flags[name] = True
            if then is not None:
                then()

        return callback

    def reset(*names: str) -> None:
        for name in names:
            flags[name] = False

    subscriptions["a"] = event.bind(setter("a"))
    event.fire()
    _expect(flags["a"], "bound callback a did not run")

    reset("a")
    event.permanent_bind(setter("b"))
    event.fire()
    _expect(flags["a"] and flags["b"], "callbacks a and b did not both run")

    reset("a", "b")
    subscriptions["c"] = event.bind(setter("c", then=subscriptions["a"].release))
    event.fire()
    _expect(
        flags["a"] and flags["b"] and flags["c"],
        "a callback released later in the firing should still have run",
    )

    reset("a", "b", "c")
    event.fire()
    _expect(not flags["a"], "released callback a ran again")
    _expect(flags["b"] and flags["c"], "callbacks b and c did not run")

    reset("b", "c")
    subscriptions["d"] = event.bind(
        setter("d", then=lambda: subscriptions["c"].release())
    )

    def never() -> None:
        raise SelfCheckError("callback released before its turn was invoked")

    previous = subscriptions["c"]
    subscriptions["c"] = event.bind(never)
    previous.release()
    event.fire()
    _expect(not flags["a"], "released callback a ran")
    _expect(flags["b"], "permanent callback b did not run")
    _expect(not flags["c"], "released callback c ran")
    _expect(flags["d"], "callback d did not run")


def check_arguments() -> None:
    """Fire with one argument of each passing mode."""
    event: Event[[list[str], list[str], list[str]]] = Event(
        ArgMode.VALUE, ArgMode.REF, ArgMode.READONLY
    )
    a, b, c = ["a"], ["b"], ["c"]
    event.fire(a, b, c)

    executed: list[bool] = []

    def callback(pa: list[str], pb: list[str], pc: list[str]) -> None:
        _expect(not executed, "callback ran twice in one firing")
        executed.append(True)
        _expect(pa == a and pb == b and pc == c, "arguments differ from those fired")

        a.append("z")
        _expect(pa is not a and pa != a, "value argument shares state with the caller")

        b.append("y")
        _expect(pb is b and pb == b, "reference argument is not the caller's object")

        _expect(pc is c, "read-only argument is not the caller's object")

    event.permanent_bind(callback)
    event.fire(a, b, c)
    _expect(bool(executed), "permanent callback did not run")


CHECKS: dict[str, Callable[[], None]] = {
    "basic_operations": check_basic_operations,
    "arguments": check_arguments,
}


def run_checks(config: EventkitConfig | None = None) -> list[CheckResult]:
    """Run every registered check and return one result per check run."""
    config = config or EventkitConfig()
    results: list[CheckResult] = []
    for name, check in CHECKS.items():
        try:
            check()
        except SelfCheckError as exc:
            logger.error("Check %s failed: %s", name, exc)
            results.append(CheckResult(name=name, passed=False, detail=str(exc)))
            if config.fail_fast:
                break
        else:
            logger.info("Check %s passed", name)
            results.append(CheckResult(name=name, passed=True))
    return results
