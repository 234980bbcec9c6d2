"""Shared test fixtures for the npcagency test suite."""

from __future__ import annotations

from datetime import datetime

import pytest

from npcagency.actions.registry import ActionRegistry
from npcagency.agents.identity import Agent, AgentCategory
from npcagency.cancellation import CancellationToken
from npcagency.config import AgencyConfig
from npcagency.perception.sensor import MockWorldSensor
from npcagency.perception.types import EconomicState, Perception, Weather


@pytest.fixture
def config() -> AgencyConfig:
    """Config with no sensing or action latency, for fast tests."""
    return AgencyConfig(sensor_seed=42, sensor_delay=0.0, action_delay=0.0)


@pytest.fixture
def perception() -> Perception:
    """A fixed perception at Marunath Castle."""
    return Perception(
        timestamp=datetime(1084, 3, 15, 10, 30),
        weather=Weather("Clear", 18),
        economy=EconomicState(prosperity=4500, food_supply=120, tax_rate=15),
        relations={"Empire": -40, "Sturgia": 65},
        location="Marunath Castle",
    )


@pytest.fixture
def lord() -> Agent:
    return Agent("king_caladog_Battania", "Caladog", AgentCategory.LORD)


@pytest.fixture
def villager() -> Agent:
    return Agent("villager_omor", "Omor", AgentCategory.VILLAGER)


@pytest.fixture
def registry() -> ActionRegistry:
    """An empty action registry."""
    return ActionRegistry()


@pytest.fixture
def sensor() -> MockWorldSensor:
    """Seeded mock sensor without latency."""
    return MockWorldSensor(seed=42, delay=0.0)


@pytest.fixture
def cancel() -> CancellationToken:
    return CancellationToken()
