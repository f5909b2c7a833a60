"""Pet/plant attribute simulation."""

from hearhome.pet.engine import ActionType, Attributes, apply_action, set_intimacy, tick_decay

__all__ = ["ActionType", "Attributes", "apply_action", "set_intimacy", "tick_decay"]
