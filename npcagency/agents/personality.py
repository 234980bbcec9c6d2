"""Lord personality traits that colour reasoning, dialogue and persuasion."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

TRAIT_MIN = 0
TRAIT_MAX = 100

# trait -> (>= 75, >= 60, <= 25, <= 40) phrases
TRAIT_PHRASES: dict[str, tuple[str, str, str, str]] = {
    "valor": (
        "BRAVE and FEARLESS - never backs down from a fight",
        "courageous in battle",
        "CAUTIOUS and RISK-AVERSE - avoids unnecessary danger",
        "prefers to fight only when odds are favorable",
    ),
    "honor": (
        "HONORABLE - keeps promises, fights fairly, values reputation",
        "respects tradition and oaths",
        "PRAGMATIC - will break promises if beneficial",
        "flexible with moral boundaries",
    ),
    "mercy": (
        "MERCIFUL - spares enemies, releases prisoners",
        "shows compassion when possible",
        "RUTHLESS - shows no mercy to enemies",
        "harsh but not cruel",
    ),
    "generosity": (
        "GENEROUS - shares wealth, rewards followers well",
        "fair with gold distribution",
        "GREEDY - hoards gold, reluctant to spend",
        "careful with money",
    ),
    "calculating": (
        "CALCULATING - thinks ahead, strategic",
        "plans before acting",
        "IMPULSIVE - acts on emotion",
        "sometimes acts rashly",
    ),
    "ambition": (
        "AMBITIOUS - desires power and glory",
        "seeks advancement",
        "CONTENT - happy with current position",
        "modest goals",
    ),
    "loyalty": (
        "LOYAL - devoted to kingdom and liege",
        "generally faithful",
        "SELF-SERVING - will defect if beneficial",
        "loyalty can be bought",
    ),
    "aggression": (
        "WARLIKE - prefers military solutions",
        "favors strength",
        "PEACEFUL - prefers diplomacy",
        "avoids conflict when possible",
    ),
    "charm": (
        "CHARISMATIC - skilled diplomat, persuasive",
        "socially adept",
        "BLUNT - poor with words, direct",
        "straightforward speaker",
    ),
    "pride": (
        "PROUD - sensitive to slights, values status",
        "conscious of reputation",
        "HUMBLE - doesn't seek glory",
        "modest demeanor",
    ),
}

# Kingdom keyword -> trait shifts; first match wins
CULTURE_MODIFIERS: list[tuple[tuple[str, ...], dict[str, int]]] = [
    (("battania", "celtic"), {"valor": 15, "pride": 10, "honor": 5}),
    (("vlandia", "feudal"), {"ambition": 10, "calculating": 10, "honor": 5}),
    (("empire", "roman"), {"calculating": 15, "charm": 10, "aggression": -5}),
    (("sturgia", "nord"), {"valor": 20, "aggression": 15, "loyalty": 10}),
    (("khuzait", "mongol"), {"calculating": 10, "ambition": 10, "honor": -10}),
    (("aserai", "desert"), {"charm": 15, "generosity": 10, "calculating": 5}),
]


@dataclass
class LordPersonality:
    """Trait vector for one lord. Each trait is 0-100, 50 is unremarkable.

    Traits bias what the model is told about the character; they never
    pick actions on their own.
    """

    valor: int = 50  # 0=cautious, 100=brave
    honor: int = 50  # 0=pragmatic, 100=honorable
    mercy: int = 50  # 0=ruthless, 100=merciful
    generosity: int = 50  # 0=greedy, 100=generous
    calculating: int = 50  # 0=impulsive, 100=strategic
    ambition: int = 50  # 0=content, 100=power-seeking
    loyalty: int = 50  # 0=self-serving, 100=loyal
    aggression: int = 50  # 0=peaceful, 100=warlike
    charm: int = 50  # 0=blunt, 100=diplomatic
    pride: int = 50  # 0=humble, 100=proud

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def shift_trait(self, trait: str, delta: int) -> None:
        """Shift a trait by delta, clamping to [0, 100]."""
        current = getattr(self, trait)
        setattr(self, trait, max(TRAIT_MIN, min(TRAIT_MAX, current + delta)))

    def describe(self) -> str:
        """Comma-separated trait phrases for prompts."""
        phrases = []
        for trait, (very_high, high, very_low, low) in TRAIT_PHRASES.items():
            value = getattr(self, trait)
            if value >= 75:
                phrases.append(very_high)
            elif value >= 60:
                phrases.append(high)
            elif value <= 25:
                phrases.append(very_low)
            elif value <= 40:
                phrases.append(low)
        if not phrases:
            return "balanced personality with no extreme traits"
        return ", ".join(phrases)

    def action_tendencies(self) -> str:
        """Which actions this personality leans towards or shies away from."""
        tendencies = []

        if self.valor >= 70 and self.aggression >= 70:
            tendencies.append("Prefers ATTACK over defense")
        elif self.valor <= 30 or self.aggression <= 30:
            tendencies.append("Prefers DEFEND and RETREAT over risky attacks")

        if self.generosity <= 30:
            tendencies.append("Reluctant to GIVE GOLD or PAY RANSOM")
        elif self.generosity >= 70:
            tendencies.append("Willing to spend gold for allies and causes")

        if self.honor >= 70 and self.loyalty >= 70:
            tendencies.append("Will NOT DEFECT from kingdom easily")
        elif self.loyalty <= 30 and self.ambition >= 70:
            tendencies.append("May DEFECT if offered better position")

        if self.mercy >= 70:
            tendencies.append("Prefers to release prisoners")
        elif self.mercy <= 30:
            tendencies.append("May execute or ransom prisoners")

        if self.calculating >= 70:
            tendencies.append("MARRIAGE decisions based on strategic value")
        elif self.calculating <= 30:
            tendencies.append("May marry for love or impulse")

        if not tendencies:
            return "No strong action preferences"
        return ". ".join(tendencies)


def stable_hash(text: str) -> int:
    """Hash that is identical across processes (unlike `hash()` on str)."""
    value = 17
    for char in text:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    return value


class PersonalityGenerator:
    """Hands out one personality per lord id, generated once and cached.

    Generation is seeded from the id, so the same lord gets the same traits
    in every run. Kings and faction leaders get role boosts, and a known
    kingdom applies its culture's shifts.
    """

    def __init__(self):
        self._personalities: dict[str, LordPersonality] = {}
        self._lock = threading.Lock()

    def personality_for(
        self,
        lord_id: str,
        kingdom_name: str | None = None,
        is_faction_leader: bool = False,
        is_king: bool = False,
    ) -> LordPersonality:
        key = lord_id.casefold()
        with self._lock:
            personality = self._personalities.get(key)
            if personality is None:
                personality = generate_personality(
                    key, kingdom_name, is_faction_leader, is_king
                )
                self._personalities[key] = personality
                logger.debug(f"Generated personality for {lord_id}: {personality.as_dict()}")
        return personality

    def for_agent(self, agent_id: str) -> LordPersonality:
        """Personality for an agent id like "king_caladog_Battania".

        The id doubles as the kingdom hint, and a "king" keyword marks a king.
        """
        return self.personality_for(
            agent_id, kingdom_name=agent_id, is_king="king" in agent_id.lower()
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._personalities)


def generate_personality(
    lord_id: str,
    kingdom_name: str | None = None,
    is_faction_leader: bool = False,
    is_king: bool = False,
) -> LordPersonality:
    """Deterministic traits for `lord_id`, adjusted for role and culture."""
    rng = random.Random(stable_hash(lord_id))
    personality = LordPersonality(
        valor=rng.randint(20, 79),
        honor=rng.randint(20, 79),
        mercy=rng.randint(20, 79),
        generosity=rng.randint(20, 79),
        calculating=rng.randint(20, 79),
        ambition=rng.randint(20, 79),
        loyalty=rng.randint(30, 89),
        aggression=rng.randint(20, 79),
        charm=rng.randint(20, 79),
        pride=rng.randint(20, 79),
    )

    if is_king:
        personality.shift_trait("ambition", 20)
        personality.shift_trait("pride", 15)
        personality.shift_trait("calculating", 10)
    elif is_faction_leader:
        personality.shift_trait("ambition", 10)
        personality.shift_trait("loyalty", 10)

    if kingdom_name:
        lowered = kingdom_name.lower()
        for keywords, shifts in CULTURE_MODIFIERS:
            if any(word in lowered for word in keywords):
                for trait, delta in shifts.items():
                    personality.shift_trait(trait, delta)
                break

    return personality
