"""Perception: world snapshots and the sensors that produce them."""

from npcagency.perception.sensor import MockWorldSensor, WorldSensor
from npcagency.perception.types import (
    EconomicState,
    Perception,
    Weather,
    relation_label,
)

__all__ = [
    "Perception",
    "Weather",
    "EconomicState",
    "relation_label",
    "WorldSensor",
    "MockWorldSensor",
]
