"""Typed synchronous events with scoped subscriptions.

An :class:`Event` holds an ordered set of callbacks and invokes them when
fired. Callbacks may be bound and unbound at any time, including from inside
a callback that is running because the same Event is being fired.
"""

from __future__ import annotations

import copy
import itertools
import logging
import weakref
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any, Callable, Generic, ParamSpec

from eventkit.errors import ArgumentMismatchError, EventClosedError

logger = logging.getLogger(__name__)

P = ParamSpec("P")


class ArgMode(Enum):
    """How a positional argument of :meth:`Event.fire` reaches callbacks."""

    VALUE = "value"
    REF = "ref"
    READONLY = "readonly"


class _SubscriptionState(Enum):
    ACTIVE = "active"
    RELEASED = "released"
    ORPHANED = "orphaned"


@dataclass(eq=False)
class _Binding:
    callback: Callable[..., None]
    bound: bool = True


class Subscription:
    """Ownership of one callback bound to an :class:`Event`.

    Releasing the subscription unbinds the callback. Release happens on
    :meth:`release`, on leaving a ``with`` block, or when the last reference
    to the subscription is dropped. If the Event was closed first the
    subscription is orphaned and releasing it does nothing.

    Subscriptions are created by :meth:`Event.bind`; the constructor is
    internal.
    """

    def __init__(self, event: Event[Any], key: int) -> None:
        self._event_ref = weakref.ref(event)
        self._key = key
        self._state = _SubscriptionState.ACTIVE

    @property
    def active(self) -> bool:
        """True while the bound callback is still registered."""
        return (
            self._state is _SubscriptionState.ACTIVE
            and self._event_ref() is not None
        )

    def release(self) -> None:
        """Unbind the callback. Does nothing if no longer active."""
        if self._state is not _SubscriptionState.ACTIVE:
            return
        event = self._event_ref()
        if event is None:
            self._state = _SubscriptionState.ORPHANED
            return
        self._state = _SubscriptionState.RELEASED
        event._release(self)

    def _orphan(self) -> None:
        assert self._state is _SubscriptionState.ACTIVE
        self._state = _SubscriptionState.ORPHANED

    def __enter__(self) -> Subscription:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __del__(self) -> None:
        self.release()

    def __copy__(self) -> Subscription:
        raise TypeError(f"{type(self).__name__} cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> Subscription:
        raise TypeError(f"{type(self).__name__} cannot be copied")

    def __repr__(self) -> str:
        return f"Subscription(key={self._key}, state={self._state.value})"


class Event(Generic[P]):
    """Synchronous event dispatching to callbacks in registration order.

    ``fire`` works on a snapshot of the callbacks registered when it starts:
    callbacks bound during a firing first run on the next one, and callbacks
    unbound during a firing are skipped if they have not run yet.

    Passing modes may be declared per positional argument::

        event: Event[[int, list[int]]] = Event(ArgMode.VALUE, ArgMode.REF)

    ``VALUE`` arguments are deep-copied when the firing starts and again for
    each callback, so no callback sees another one's changes. ``REF`` and
    ``READONLY`` arguments are passed through as the same object.
    """

    def __init__(self, *modes: ArgMode) -> None:
        self._modes: tuple[ArgMode, ...] | None = modes or None
        self._bindings: dict[int, _Binding] = {}
        self._keys = itertools.count()
        self._subscriptions: weakref.WeakSet[Subscription] = weakref.WeakSet()
        self._closed = False

    # --- registration ---------------------------------------------------------

    def permanent_bind(self, callback: Callable[P, None]) -> None:
        """Bind *callback* for the rest of the Event's lifetime."""
        self._ensure_open("permanent_bind")
        key = self._append(callback)
        logger.debug("Permanently bound %r as %d", callback, key)

    def bind(self, callback: Callable[P, None]) -> Subscription:
        """Bind *callback* until the returned subscription is released."""
        self._ensure_open("bind")
        key = self._append(callback)
        subscription = Subscription(self, key)
        self._subscriptions.add(subscription)
        logger.debug("Bound %r as %d", callback, key)
        return subscription

    def _append(self, callback: Callable[..., None]) -> int:
        key = next(self._keys)
        self._bindings[key] = _Binding(callback)
        return key

    def _release(self, subscription: Subscription) -> None:
        binding = self._bindings.pop(subscription._key, None)
        assert binding is not None, f"no binding under key {subscription._key}"
        binding.bound = False
        self._subscriptions.discard(subscription)
        logger.debug("Released binding %d", subscription._key)

    # --- firing ---------------------------------------------------------------

    def fire(self, *args: P.args, **kwargs: P.kwargs) -> None:
        """Invoke every callback bound when the call starts, in order.

        Exceptions raised by callbacks propagate; callbacks after the failing
        one are not invoked for this firing.
        """
        self._ensure_open("fire")
        call_args = self._prepare(args, kwargs)
        snapshot = [weakref.ref(binding) for binding in self._bindings.values()]
        for ref in snapshot:
            binding = ref()
            if binding is None or not binding.bound:
                logger.debug("Skipping binding unbound during fire")
                continue
            binding.callback(*self._copy_values(call_args), **kwargs)

    def _prepare(
        self, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> tuple[Any, ...]:
        if self._modes is None:
            return args
        expected = len(self._modes)
        if kwargs:
            raise ArgumentMismatchError(
                f"fire() takes positional arguments only, got {sorted(kwargs)}",
                expected=expected,
                received=len(args) + len(kwargs),
            )
        if len(args) != expected:
            raise ArgumentMismatchError(
                f"fire() takes {expected} argument(s), got {len(args)}",
                expected=expected,
                received=len(args),
            )
        return self._copy_values(args)

    def _copy_values(self, args: tuple[Any, ...]) -> tuple[Any, ...]:
        if self._modes is None or ArgMode.VALUE not in self._modes:
            return args
        return tuple(
            copy.deepcopy(arg) if mode is ArgMode.VALUE else arg
            for arg, mode in zip(args, self._modes)
        )

    # --- lifetime -------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Unbind everything and orphan all outstanding subscriptions.

        Safe to call from a callback: the rest of the running firing is
        skipped. Calling it again does nothing.
        """
        if self._closed:
            return
        self._closed = True
        orphaned = list(self._subscriptions)
        for subscription in orphaned:
            subscription._orphan()
        self._subscriptions.clear()
        for binding in self._bindings.values():
            binding.bound = False
        self._bindings.clear()
        logger.debug("Closed event, orphaned %d subscription(s)", len(orphaned))

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise EventClosedError(operation)

    def __enter__(self) -> Event[P]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"bindings={len(self._bindings)}"
        return f"Event({state})"
