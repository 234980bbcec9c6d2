"""Actions: value types, the dispatch registry and built-in handlers."""

from npcagency.actions.builtin import (
    BUILTIN_ACTIONS,
    BuiltinActionLog,
    register_builtin_actions,
)
from npcagency.actions.registry import ActionHandler, ActionRegistry, SyncActionHandler
from npcagency.actions.types import Action, ActionResult, ParamValue

__all__ = [
    "Action",
    "ActionResult",
    "ParamValue",
    "ActionHandler",
    "SyncActionHandler",
    "ActionRegistry",
    "BUILTIN_ACTIONS",
    "BuiltinActionLog",
    "register_builtin_actions",
]
