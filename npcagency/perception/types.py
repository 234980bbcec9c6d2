"""Value objects describing what an agent perceives at one instant."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from npcagency.errors import ValidationError


@dataclass(frozen=True)
class Weather:
    """Weather tag plus temperature in degrees Celsius."""

    type: str = "Clear"
    temperature: int = 20

    def __post_init__(self):
        if not self.type:
            object.__setattr__(self, "type", "Clear")

    def __str__(self) -> str:
        return f"{self.type} ({self.temperature}°C)"


@dataclass(frozen=True)
class EconomicState:
    """Economic indicators. Plain integers; no range is enforced here."""

    prosperity: int
    food_supply: int
    tax_rate: int


@dataclass(frozen=True)
class Perception:
    """Immutable snapshot of world facts relevant to one agent.

    Produced by a WorldSensor; never mutated by the pipeline. `relations`
    maps faction/person identifiers to a signed relation score and keeps the
    insertion order it was given.
    """

    timestamp: datetime
    weather: Weather
    economy: EconomicState
    relations: Mapping[str, int] = field(default_factory=dict)
    location: str = ""

    def __post_init__(self):
        if not isinstance(self.location, str) or not self.location.strip():
            raise ValidationError("Perception location cannot be empty")
        if self.weather is None:
            object.__setattr__(self, "weather", Weather())
        if self.relations is None:
            raise ValidationError("Perception relations cannot be None")
        object.__setattr__(self, "relations", MappingProxyType(dict(self.relations)))

    def to_semantic_summary(self) -> str:
        """Render every field as the plain-text context handed to a reasoning backend."""
        relations_text = ", ".join(f"{key}: {value}" for key, value in self.relations.items())
        lines = [
            f"Current Time: {self.timestamp:%Y-%m-%d %H:%M}",
            f"Location: {self.location}",
            f"Weather: {self.weather}",
            (
                f"Economy: Prosperity {self.economy.prosperity}, "
                f"Food {self.economy.food_supply}, "
                f"Tax {self.economy.tax_rate}%"
            ),
            f"Relations: {relations_text}",
        ]
        return "\n".join(lines)

    def most_hostile(self) -> tuple[str, int] | None:
        """The relation with the lowest score, if any."""
        if not self.relations:
            return None
        return min(self.relations.items(), key=lambda item: item[1])

    def most_friendly(self) -> tuple[str, int] | None:
        """The relation with the highest score, if any."""
        if not self.relations:
            return None
        return max(self.relations.items(), key=lambda item: item[1])


def relation_label(score: int) -> str:
    """Coarse bucket for a relation score."""
    if score >= 50:
        return "Allied"
    elif score >= 0:
        return "Neutral"
    elif score >= -50:
        return "Tense"
    else:
        return "Hostile"
