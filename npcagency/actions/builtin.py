"""Built-in handlers for the standard NPC action vocabulary.

These stand in for game bindings: each handler reads its own parameters and
reports what it would have done. Hosts replace them by registering their own
handler under the same name.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter

from npcagency.actions.registry import ActionRegistry
from npcagency.actions.types import Action, ActionResult
from npcagency.cancellation import CancellationToken

logger = logging.getLogger(__name__)

BUILTIN_ACTIONS = [
    "Wait",
    "LogReasoning",
    "StartSiege",
    "GiveGold",
    "ChangeRelation",
    "MoveArmy",
    "RecruitTroops",
    "Trade",
    "Patrol",
    "Retreat",
    "Attack",
    "Defend",
    "Hide",
    "Work",
]


class BuiltinActionLog:
    """Counts built-in action executions, per action type."""

    def __init__(self):
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def record(self, action: Action) -> None:
        with self._lock:
            self._counts[action.action_type] += 1
        detail = action.get("detail")
        if detail is not None:
            logger.info(f"[{action.action_type}] {action.get('agentId', '?')}: {detail}")
        else:
            logger.info(f"[{action.action_type}] {action.get('agentId', '?')}")

    @property
    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def count(self, action_type: str) -> int:
        with self._lock:
            return self._counts[action_type]


def register_builtin_actions(
    registry: ActionRegistry, log: BuiltinActionLog | None = None, delay: float = 0.0
) -> BuiltinActionLog:
    """Register every built-in handler on `registry`. Returns the execution log."""
    log = log or BuiltinActionLog()

    def simple(message: str):
        def handle(action: Action) -> ActionResult:
            log.record(action)
            return ActionResult.succeeded(message)

        return handle

    registry.register("Wait", _timed(_execute_wait, log, delay))
    registry.register_sync("LogReasoning", simple("Reasoning logged"))
    registry.register_sync("StartSiege", _logged(_execute_start_siege, log))
    registry.register_sync("GiveGold", _logged(_execute_give_gold, log))
    registry.register_sync("ChangeRelation", simple("Relation changed"))
    registry.register_sync("MoveArmy", _logged(_execute_move_army, log))
    registry.register_sync("RecruitTroops", _logged(_execute_recruit_troops, log))
    registry.register_sync("Trade", simple("Trade completed"))
    registry.register_sync("Patrol", simple("Patrol completed"))
    registry.register_sync("Retreat", simple("Retreated successfully"))
    registry.register_sync("Attack", simple("Attack initiated"))
    registry.register_sync("Defend", simple("Defense position taken"))
    registry.register_sync("Hide", simple("Hidden successfully"))
    registry.register_sync("Work", simple("Work completed"))
    return log


def _logged(execute, log: BuiltinActionLog):
    def handle(action: Action) -> ActionResult:
        log.record(action)
        return execute(action)

    handle.__name__ = execute.__name__
    return handle


def _timed(execute, log: BuiltinActionLog, delay: float):
    """Async handler that simulates game-side latency before executing."""

    async def handle(action: Action, cancel: CancellationToken) -> ActionResult:
        await cancel.sleep(delay)
        log.record(action)
        return execute(action)

    handle.__name__ = execute.__name__
    return handle


def _execute_wait(action: Action) -> ActionResult:
    """Execute a Wait action. Duration in seconds, default 60."""
    duration = action.get("duration", 60)
    return ActionResult.succeeded(f"Agent waiting for {duration} seconds")


def _execute_start_siege(action: Action) -> ActionResult:
    settlement = action.get("settlementId") or "unknown castle"
    return ActionResult.succeeded(f"Siege started on {settlement}")


def _execute_give_gold(action: Action) -> ActionResult:
    amount = action.get("amount", "?")
    if isinstance(amount, (int, float)) and not isinstance(amount, bool) and amount <= 0:
        return ActionResult.failed(f"Cannot transfer {amount} gold")
    return ActionResult.succeeded(f"Transferred {amount} gold")


def _execute_move_army(action: Action) -> ActionResult:
    target = action.get("targetLocation") or "unknown location"
    return ActionResult.succeeded(f"Army moving to {target}")


def _execute_recruit_troops(action: Action) -> ActionResult:
    count = action.get("troopCount", "?")
    return ActionResult.succeeded(f"Recruited {count} troops")
