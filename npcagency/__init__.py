"""npcagency: autonomous NPC agency and dialogue for open-world simulations."""

__version__ = "0.1.0"
