"""Target resolver: maps a cast event + effect definition to actor ids.

Mode precedence (highest first):

1. The cast event's per-effect override.
2. The effect definition's own default target.
3. The cast event's target mode.

STUDENT mode takes the id list of whichever level supplied the mode,
then falls back through override ids, definition ids, event ids, and
finally the casting actor.  ENEMY mode always yields the enemy alone.
Resolved ids are filtered against the known universe of actors; an
empty result falls back to the casting actor.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from castline.core.timeline.models.cast_event import CastEvent
from castline.core.timeline.models.skill import EffectDefinition
from castline.core.timeline.vocabulary import ENEMY_ID, TargetMode

logger = logging.getLogger(__name__)


class TargetResolver:
    """Resolves which actors one effect of one cast event applies to.

    Args:
        student_ids: Ids of every student actor, in display order.
        enemy_id: Id of the fixed enemy actor.
    """

    def __init__(self, student_ids: Sequence[str], enemy_id: str = ENEMY_ID) -> None:
        self._student_ids = list(student_ids)
        self._enemy_id = enemy_id
        self._valid_ids = {*self._student_ids, enemy_id}

    def resolve_mode(self, event: CastEvent, effect: EffectDefinition) -> TargetMode:
        """Pick the effective target mode for one effect of one event."""
        override = event.effect_targets.get(effect.id)
        if override is not None:
            return override.target
        if effect.target is not None:
            return effect.target
        return event.target

    def resolve(self, event: CastEvent, effect: EffectDefinition) -> list[str]:
        """Resolve the deduplicated target ids for one effect of one event.

        Args:
            event: Cast event carrying the effect.
            effect: Effect definition on the event's skill.

        Returns:
            Non-empty list of valid target actor ids.
        """
        mode = self.resolve_mode(event, effect)

        if mode is TargetMode.ENEMY:
            return [self._enemy_id]

        if mode is TargetMode.ALL:
            raw = list(self._student_ids)
        elif mode is TargetMode.STUDENT:
            raw = self._explicit_ids(event, effect)
        else:
            raw = [event.actor_id]

        targets = self._filter_valid(raw)
        if not targets:
            logger.debug(
                "No valid targets for event %s effect %s (mode=%s), falling back to caster",
                event.id,
                effect.id,
                mode.value,
            )
            return [event.actor_id]
        return targets

    def _explicit_ids(self, event: CastEvent, effect: EffectDefinition) -> list[str]:
        override = event.effect_targets.get(effect.id)
        override_ids = override.target_actor_ids if override is not None else ()

        # The level that chose STUDENT supplies its own list first.
        if override is not None:
            chain = (override_ids, effect.target_actor_ids, event.target_actor_ids)
        elif effect.target is not None:
            chain = (effect.target_actor_ids, event.target_actor_ids)
        else:
            chain = (event.target_actor_ids,)

        for ids in chain:
            if ids:
                return list(ids)
        return [event.actor_id]

    def _filter_valid(self, ids: Iterable[str]) -> list[str]:
        seen: set[str] = set()
        result: list[str] = []
        for target_id in ids:
            if target_id in self._valid_ids and target_id not in seen:
                seen.add(target_id)
                result.append(target_id)
        return result


__all__ = [
    "TargetResolver",
]
