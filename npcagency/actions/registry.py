"""Action dispatch registry: runtime-extensible table of action handlers.

New gameplay actions are added by registering a handler under an action-type
name; the pipeline never needs to know the full vocabulary.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Awaitable, Callable

from npcagency.actions.types import Action, ActionResult, normalize_action_type
from npcagency.cancellation import CancellationToken
from npcagency.errors import ValidationError

logger = logging.getLogger(__name__)

ActionHandler = Callable[[Action, CancellationToken], Awaitable[ActionResult]]
SyncActionHandler = Callable[[Action], ActionResult]


class ActionRegistry:
    """Maps action-type names to handlers, with uniform failure containment.

    Keys are case-folded at registration and lookup. The handler table is
    lock-protected so independent agent pipelines can dispatch concurrently,
    and a handler fault always comes back as a failed ActionResult.
    """

    def __init__(self):
        self._handlers: dict[str, ActionHandler] = {}
        self._names: dict[str, str] = {}  # canonical key -> name as registered
        self._lock = threading.Lock()

    def register(self, action_type: str, handler: ActionHandler) -> None:
        """Register an async handler. Re-registering a name replaces the old handler.

        Usage:
            async def move_to(action, cancel) -> ActionResult: ...
            registry.register("MoveTo", move_to)
        """
        if not isinstance(action_type, str) or not action_type.strip():
            raise ValidationError("Action type cannot be empty")
        if handler is None or not callable(handler):
            raise ValidationError(f"Handler for '{action_type}' must be callable")

        key = normalize_action_type(action_type)
        with self._lock:
            if key in self._handlers:
                logger.warning(f"Action '{action_type}' already registered, overriding")
            self._handlers[key] = handler
            self._names[key] = action_type.strip()
        logger.debug(f"Registered action: {action_type}")

    def register_sync(self, action_type: str, handler: SyncActionHandler) -> None:
        """Register a synchronous handler that takes only the action."""
        if handler is None or not callable(handler):
            raise ValidationError(f"Handler for '{action_type}' must be callable")
        if inspect.iscoroutinefunction(handler):
            raise ValidationError(
                f"Handler for '{action_type}' is a coroutine function, use register()"
            )
        self.register(action_type, _adapt_sync(handler))

    def handler(self, action_type: str):
        """Decorator form of register/register_sync.

        Usage:
            @registry.handler("Trade")
            def trade(action) -> ActionResult:
                ...
        """

        def decorator(fn: Callable) -> Callable:
            if inspect.iscoroutinefunction(fn):
                self.register(action_type, fn)
            else:
                self.register_sync(action_type, fn)
            return fn

        return decorator

    def unregister(self, action_type: str) -> bool:
        """Drop a handler. Returns whether one was registered."""
        if not isinstance(action_type, str):
            return False
        key = normalize_action_type(action_type)
        with self._lock:
            self._names.pop(key, None)
            return self._handlers.pop(key, None) is not None

    def can_execute(self, action_type: str) -> bool:
        """Whether a handler is registered for this type, ignoring case."""
        if not isinstance(action_type, str) or not action_type.strip():
            return False
        with self._lock:
            return normalize_action_type(action_type) in self._handlers

    def action_types(self) -> list[str]:
        """Registered names, as they were spelled at registration."""
        with self._lock:
            return sorted(self._names.values())

    async def execute(self, action: Action, cancel: CancellationToken | None = None) -> ActionResult:
        """Run the handler for `action`. Never raises for handler faults.

        A missing handler is a normal failed result naming the action type.
        A handler that ends in CancelledError also fails; the error is only
        re-raised when the task running `execute` is itself being cancelled.
        """
        if action is None:
            raise ValidationError("Action cannot be None")
        cancel = cancel or CancellationToken()

        with self._lock:
            handler = self._handlers.get(action.key)
        if handler is None:
            return ActionResult.failed(
                f"No handler registered for action type: {action.action_type}"
            )

        try:
            result = await handler(action, cancel)
        except asyncio.CancelledError as e:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            logger.warning(f"Handler for {action.action_type} was cancelled")
            return ActionResult.failed(f"Action {action.action_type} was cancelled", e)
        except Exception as e:
            logger.warning(f"Handler for {action.action_type} raised {type(e).__name__}: {e}")
            return ActionResult.failed(f"Error executing action {action.action_type}: {e}", e)

        if not isinstance(result, ActionResult):
            logger.warning(
                f"Handler for {action.action_type} returned {type(result).__name__}, "
                f"expected ActionResult"
            )
            return ActionResult.failed(
                f"Handler for action {action.action_type} returned no result"
            )
        return result

    def clear(self) -> None:
        """Remove every handler. Useful for testing."""
        with self._lock:
            self._handlers.clear()
            self._names.clear()
        logger.debug("Cleared all action handlers")

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)


def _adapt_sync(handler: SyncActionHandler) -> ActionHandler:
    """Wrap a sync handler in the async handler shape."""

    async def adapted(action: Action, cancel: CancellationToken) -> ActionResult:
        return handler(action)

    adapted.__name__ = getattr(handler, "__name__", "adapted")
    adapted.__wrapped__ = handler
    return adapted
