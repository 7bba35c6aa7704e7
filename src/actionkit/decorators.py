"""Dispatcher decorators for recording and stubbing.

RecordingDispatcher wraps another dispatcher and keeps an ordered log of every
action it saw. StubDispatcher replaces a dispatcher entirely with canned
results, which makes it the test double for code that takes a Dispatcher.

Example:
    >>> stubs = StubTable().add(GetUser("octocat"), UserDetails(name="octocat", orgs=[]))
    >>> api = RecordingDispatcher(StubDispatcher(stubs))
    >>> api.invoke(GetUser("octocat"))
    UserDetails(name='octocat', orgs=[])
    >>> api.recorded
    (GetUser(username='octocat'),)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from actionkit.action import Action
from actionkit.dispatcher import Dispatcher
from actionkit.errors import UnhandledActionError

logger = logging.getLogger(__name__)

R = TypeVar("R")


class RecordingDispatcher(Dispatcher):
    """Records every action, then delegates to the wrapped dispatcher.

    The action is appended before delegating, so actions whose dispatch
    raises are recorded too. Duplicates are kept. The log only grows for the
    lifetime of the instance.
    """

    def __init__(self, inner: Dispatcher) -> None:
        self.inner = inner
        self._recorded: list[Action[Any]] = []
        self._lock = threading.Lock()

    def invoke(self, action: Action[R]) -> R:
        with self._lock:
            self._recorded.append(action)
            position = len(self._recorded)
        logger.debug("recorded action #%d", position, extra={"action": action})
        return self.inner.invoke(action)

    @property
    def recorded(self) -> tuple[Action[Any], ...]:
        """Snapshot of the recorded actions in call order."""
        with self._lock:
            return tuple(self._recorded)

    def __len__(self) -> int:
        with self._lock:
            return len(self._recorded)


class StubTable:
    """Typed builder for the action -> result pairs of a StubDispatcher.

    ``add`` ties each result to its action's result type, so a type checker
    rejects a stub whose value could never come back from that action. Keys
    are the action values themselves: type plus every field.
    """

    def __init__(self) -> None:
        self._entries: dict[Action[Any], Any] = {}

    def add(self, action: Action[R], result: R) -> StubTable:
        self._entries[action] = result
        return self

    def __contains__(self, action: object) -> bool:
        return action in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def as_mapping(self) -> Mapping[Action[Any], Any]:
        return dict(self._entries)


class StubDispatcher(Dispatcher):
    """Returns canned results without building requests or touching a transport.

    Raises:
        UnhandledActionError: From ``invoke`` when the action was never stubbed.
    """

    def __init__(self, stubs: StubTable | Mapping[Action[Any], Any]) -> None:
        entries = stubs.as_mapping() if isinstance(stubs, StubTable) else dict(stubs)
        self._stubs: Mapping[Action[Any], Any] = MappingProxyType(entries)

    def handles(self, action: Action[Any]) -> bool:
        return action in self._stubs

    def invoke(self, action: Action[R]) -> R:
        try:
            result = self._stubs[action]
        except KeyError:
            logger.error("no stub configured for %r", action, extra={"action": action})
            raise UnhandledActionError(action) from None
        return result
