"""Confirmation protocol for mutating provider verbs."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional


class ConfirmChoice(str, Enum):
    YES = "yes"
    YES_TO_ALL = "yes_to_all"
    NO = "no"
    NO_TO_ALL = "no_to_all"


ConfirmCallback = Callable[[str, str], ConfirmChoice]


class ConfirmationPolicy:
    """
    Decides whether mutating steps go ahead.

    - `should_process(target, action)` gates a whole verb (e.g. Remove-Item
      on one path). It always asks the callback and ignores earlier
      YES_TO_ALL / NO_TO_ALL answers.
    - `should_continue(query, caption)` is asked for each step inside a verb
      (a page of objects while emptying a bucket, an object inside a folder).
      A YES_TO_ALL / NO_TO_ALL answer is remembered until `reset()`, which
      the provider calls at the start of every mutating verb.

    Without a callback, or with `force=True`, everything is confirmed.
    """

    def __init__(
        self,
        callback: Optional[ConfirmCallback] = None,
        *,
        force: bool = False,
    ) -> None:
        self._callback = callback
        self._force = force
        self._yes_to_all = False
        self._no_to_all = False

    @property
    def refused_all(self) -> bool:
        """True once a step was answered NO_TO_ALL since the last reset."""
        return self._no_to_all

    def should_process(self, target: str, action: str) -> bool:
        if self._force or self._callback is None:
            return True
        choice = self._callback(
            f"Performing the operation \"{action}\" on target \"{target}\".",
            action,
        )
        return choice in (ConfirmChoice.YES, ConfirmChoice.YES_TO_ALL)

    def should_continue(self, query: str, caption: str) -> bool:
        if self._force or self._callback is None or self._yes_to_all:
            return True
        if self._no_to_all:
            return False
        return self._record(self._callback(query, caption))

    def reset(self) -> None:
        """Forget remembered *_TO_ALL answers."""
        self._yes_to_all = False
        self._no_to_all = False

    def _record(self, choice: ConfirmChoice) -> bool:
        if choice is ConfirmChoice.YES_TO_ALL:
            self._yes_to_all = True
            return True
        if choice is ConfirmChoice.NO_TO_ALL:
            self._no_to_all = True
            return False
        return choice is ConfirmChoice.YES
