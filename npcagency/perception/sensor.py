"""World sensors: how an agent perceives the world."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from npcagency.cancellation import CancellationToken
from npcagency.perception.types import EconomicState, Perception, Weather

logger = logging.getLogger(__name__)


@runtime_checkable
class WorldSensor(Protocol):
    """Pluggable sensing, implemented by the host's game bindings."""

    async def perceive(self, agent_id: str, cancel: CancellationToken) -> Perception:
        """Build a Perception snapshot for this agent.

        May raise SensingError, or OperationCancelled once `cancel` trips.
        """
        ...


WEATHER_TYPES = ["Clear", "Cloudy", "Rainy", "Snowy", "Foggy", "Stormy", "Windy"]

# Lord seat by faction keyword in the agent id
FACTION_SEATS = {
    "Battania": "Marunath Castle",
    "Vlandia": "Pravend",
    "Empire": "Epicrotea",
    "Sturgia": "Balgard",
    "Aserai": "Qasira",
    "Khuzait": "Makeb",
}


class MockWorldSensor:
    """Scenario generator standing in for live game bindings.

    The scenario is picked from keywords in the agent id (lord, merchant,
    commander, villager, soldier). Numbers are drawn from a private RNG so a
    fixed seed yields repeatable perceptions.
    """

    def __init__(self, seed: int | None = None, delay: float = 0.05, clock=None):
        """Initialize the sensor.

        Args:
            seed: RNG seed (None = nondeterministic)
            delay: Simulated sensing latency in seconds
            clock: Optional zero-arg callable returning the perception timestamp
        """
        self._rng = random.Random(seed)
        self.delay = delay
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def perceive(self, agent_id: str, cancel: CancellationToken) -> Perception:
        """Simulate an async world query and return a scenario for this agent."""
        await cancel.sleep(self.delay)
        return self.scenario_for(agent_id)

    def scenario_for(self, agent_id: str) -> Perception:
        """Pick and build the scenario matching the agent id."""
        lowered = agent_id.lower()
        if "king" in lowered or "lord" in lowered:
            return self._lord_scenario(agent_id)
        elif "merchant" in lowered or "trader" in lowered:
            return self._merchant_scenario()
        elif "commander" in lowered or "general" in lowered:
            return self._commander_scenario()
        elif "villager" in lowered or "peasant" in lowered:
            return self._villager_scenario()
        elif "archer" in lowered or "soldier" in lowered:
            return self._soldier_scenario()
        return self._default_scenario()

    def _between(self, low: int, high: int) -> int:
        # Half-open like the game's RNG
        return self._rng.randrange(low, high)

    def _lord_scenario(self, agent_id: str) -> Perception:
        """Political decisions: war, peace, alliances."""
        location = seat_for(agent_id)
        logger.debug(f"Lord scenario for {agent_id} at {location}")
        return Perception(
            timestamp=self._clock(),
            weather=Weather("Clear", 18),
            economy=EconomicState(
                prosperity=self._between(3000, 6000),
                food_supply=self._between(100, 300),
                tax_rate=self._between(10, 25),
            ),
            relations={
                "Empire": self._between(-80, -20),
                "Vlandia": self._between(-50, 30),
                "Sturgia": self._between(20, 80),
                "Aserai": self._between(-30, 50),
                "Khuzait": self._between(-100, -50),
            },
            location=location,
        )

    def _merchant_scenario(self) -> Perception:
        """Trade opportunities in a rich town."""
        return Perception(
            timestamp=self._clock(),
            weather=Weather("Sunny", 22),
            economy=EconomicState(
                prosperity=self._between(4000, 8000),
                food_supply=self._between(50, 150),
                tax_rate=self._between(5, 15),
            ),
            relations={
                "LocalGuild": self._between(50, 100),
                "Nobility": self._between(20, 60),
                "CommonFolk": self._between(60, 90),
                "Bandits": self._between(-100, -70),
            },
            location="Pravend Market",
        )

    def _commander_scenario(self) -> Perception:
        """Front line under siege, short on food."""
        return Perception(
            timestamp=self._clock(),
            weather=Weather("Stormy", 12),
            economy=EconomicState(
                prosperity=self._between(1000, 3000),
                food_supply=self._between(20, 80),
                tax_rate=self._between(20, 40),
            ),
            relations={
                "EnemyArmy": -100,
                "AlliedForces": self._between(70, 100),
                "LocalPopulation": self._between(-20, 40),
                "Mercenaries": self._between(30, 70),
            },
            location="Front Line - Under Siege",
        )

    def _villager_scenario(self) -> Perception:
        """Poor village, heavy taxes, bandits nearby."""
        return Perception(
            timestamp=self._clock(),
            weather=Weather("Rainy", 8),
            economy=EconomicState(
                prosperity=self._between(500, 1500),
                food_supply=self._between(30, 70),
                tax_rate=self._between(25, 40),
            ),
            relations={
                "VillageLord": self._between(-30, 20),
                "OtherVillagers": self._between(50, 80),
                "TaxCollector": self._between(-80, -40),
                "Bandits": self._between(-100, -60),
            },
            location="Omor Village",
        )

    def _soldier_scenario(self) -> Perception:
        """Patrol on the steppe. Soldiers pay no tax."""
        return Perception(
            timestamp=self._clock(),
            weather=Weather("Windy", 5),
            economy=EconomicState(
                prosperity=self._between(2000, 4000),
                food_supply=self._between(40, 100),
                tax_rate=0,
            ),
            relations={
                "Commander": self._between(60, 100),
                "FellowSoldiers": self._between(70, 95),
                "Enemy": -100,
                "Civilians": self._between(20, 50),
            },
            location="Khuzait Steppe - Patrol",
        )

    def _default_scenario(self) -> Perception:
        return Perception(
            timestamp=self._clock(),
            weather=Weather(self._rng.choice(WEATHER_TYPES), self._between(-5, 30)),
            economy=EconomicState(
                prosperity=self._between(1000, 5000),
                food_supply=self._between(50, 200),
                tax_rate=self._between(5, 30),
            ),
            relations={
                "Faction1": self._between(-100, 100),
                "Faction2": self._between(-100, 100),
                "Faction3": self._between(-100, 100),
            },
            location="Unknown Location",
        )


def seat_for(agent_id: str) -> str:
    """Location of a lord's seat, from the faction named in the id."""
    for faction, seat in FACTION_SEATS.items():
        if faction in agent_id:
            return seat
    return "Calradia"
