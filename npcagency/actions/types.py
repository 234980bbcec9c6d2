"""Action and result value types exchanged between reasoning and dispatch.

Actions are abstract, parameterized intentions. Their parameters are a small
tagged union (`ParamValue`) rather than arbitrary objects, so handlers can
match on the value kinds they accept.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Union

from npcagency.errors import ValidationError

ParamValue = Union[str, int, float, bool, Sequence["ParamValue"], Mapping[str, "ParamValue"]]


def freeze_param(value: object, path: str = "") -> ParamValue:
    """Validate a parameter value and return an immutable copy of it.

    Mappings become read-only proxies, non-string sequences become tuples.
    Anything outside the ParamValue union is rejected.
    """
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        frozen = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValidationError(f"Parameter key at '{path}' must be a string, got {key!r}")
            frozen[key] = freeze_param(item, f"{path}.{key}" if path else key)
        return MappingProxyType(frozen)
    if isinstance(value, (list, tuple)):
        return tuple(freeze_param(item, f"{path}[{i}]") for i, item in enumerate(value))
    raise ValidationError(
        f"Unsupported parameter value at '{path}': {type(value).__name__}"
    )


def thaw_param(value: ParamValue) -> object:
    """Plain dict/list copy of a frozen parameter value (for JSON, logging)."""
    if isinstance(value, Mapping):
        return {key: thaw_param(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw_param(item) for item in value]
    return value


@dataclass(frozen=True)
class Action:
    """An intention to be carried out in the world.

    `action_type` is matched case-insensitively against registered handlers;
    `parameters` are interpreted by the handler alone.
    """

    action_type: str
    parameters: Mapping[str, ParamValue] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if not isinstance(self.action_type, str) or not self.action_type.strip():
            raise ValidationError("Action type cannot be empty")
        if self.parameters is None:
            raise ValidationError("Action parameters cannot be None")
        object.__setattr__(self, "parameters", freeze_param(dict(self.parameters)))

    @property
    def key(self) -> str:
        """Canonical (case-folded) form of the action type."""
        return normalize_action_type(self.action_type)

    def get(self, name: str, default: ParamValue | None = None) -> ParamValue | None:
        """Parameter lookup with a default."""
        return self.parameters.get(name, default)

    def with_parameter(self, name: str, value: ParamValue) -> Action:
        """Copy of this action with one parameter added or replaced."""
        merged = dict(self.parameters)
        merged[name] = value
        return replace(self, parameters=merged)

    def to_dict(self) -> dict:
        return {"action_type": self.action_type, "parameters": thaw_param(self.parameters)}

    def __str__(self) -> str:
        if not self.parameters:
            return self.action_type
        args = ", ".join(f"{k}={v!r}" for k, v in thaw_param(self.parameters).items())
        return f"{self.action_type}({args})"


@dataclass(frozen=True)
class ActionResult:
    """The outcome of attempting one action."""

    success: bool
    message: str
    error: BaseException | None = None

    def __post_init__(self):
        if not isinstance(self.message, str) or not self.message.strip():
            raise ValidationError("Action result message cannot be empty")

    @classmethod
    def succeeded(cls, message: str) -> ActionResult:
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, message: str, error: BaseException | None = None) -> ActionResult:
        return cls(success=False, message=message, error=error)


def normalize_action_type(action_type: str) -> str:
    """Canonical key used for every handler registration and lookup."""
    return action_type.strip().casefold()
