"""
Shared engine plumbing.

Engine operations raise CalculatorError subclasses internally. The
user_action decorator is the engine boundary: it restores the state the
action started from, logs the failure, and hands the caller an ActionResult
with a notice instead of an exception.
"""

import functools
import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel

from flipcalc.errors import CalculatorError
from flipcalc.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class Notice(BaseModel):
    """Message shown to the user after an action."""

    level: str  # success, info, warning, error
    kind: str
    message: str


class ActionResult(BaseModel):
    """Outcome of a user action."""

    ok: bool = True
    notice: Optional[Notice] = None


def user_action(func: Callable[..., Optional[str]]) -> Callable[..., ActionResult]:
    """
    Wrap an engine operation so failures never leave the engine.

    The wrapped method returns an optional success message. On
    CalculatorError the engine state is rolled back to its value before the
    call.
    """

    @functools.wraps(func)
    def wrapper(self: "CalculatorEngine", *args: Any, **kwargs: Any) -> ActionResult:
        snapshot = self.state.model_copy(deep=True)
        try:
            message = func(self, *args, **kwargs)
        except CalculatorError as e:
            self.state = snapshot
            logger.info(f"{type(self).__name__}.{func.__name__} rejected: {e.message}")
            return ActionResult(
                ok=False,
                notice=Notice(level=e.level, kind=e.kind, message=e.message),
            )

        notice = Notice(level="success", kind="ok", message=message) if message else None
        return ActionResult(ok=True, notice=notice)

    return wrapper


class CalculatorEngine:
    """Base for the three calculators: live form state plus an injected store."""

    state_class = BaseModel

    def __init__(
        self,
        store: RecordStore,
        state: Optional[BaseModel] = None,
        require_confirmation: bool = True,
    ):
        self.store = store
        self.state = state if state is not None else self.state_class()
        self.require_confirmation = require_confirmation

    def results(self) -> dict:
        """Derived figures for the current state."""
        raise NotImplementedError
