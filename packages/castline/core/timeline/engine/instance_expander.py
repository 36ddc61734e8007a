"""Instance expander: turns placed cast events into effect instances.

Each (cast event x effect definition x resolved target) triple becomes
one ``EffectInstance`` clipped to the visible timeline.  Stale events
(whose actor or skill no longer exists) are skipped, not rejected, so
the expander stays usable while an edit is half-applied.
"""

from __future__ import annotations

import logging

from castline.core.timeline.engine.target_resolver import TargetResolver
from castline.core.timeline.models.actor import Actor
from castline.core.timeline.models.cast_event import CastEvent
from castline.core.timeline.models.effect_instance import EffectInstance, make_instance_id
from castline.core.timeline.models.results import EngineDiagnostic
from castline.core.timeline.models.skill import (
    EffectDefinition,
    InstantSkill,
    PersistentSkill,
)
from castline.core.timeline.models.timeline import TimelineConfig, TimelineState
from castline.core.timeline.vocabulary import EffectKind

logger = logging.getLogger(__name__)


class InstanceExpander:
    """Expands a timeline state into raw (unresolved) effect instances.

    Args:
        config: Timeline extent and grid used for clipping and clamping.
    """

    def __init__(self, config: TimelineConfig) -> None:
        self._config = config

    def expand(
        self,
        state: TimelineState,
        diagnostics: list[EngineDiagnostic] | None = None,
    ) -> list[EffectInstance]:
        """Expand every cast event of ``state``.

        Args:
            state: Actors, skills and cast events.
            diagnostics: Optional accumulator for warnings and notes.

        Returns:
            Raw instances in event order; may overlap within a slot.
        """
        if diagnostics is None:
            diagnostics = []

        resolver = TargetResolver(state.student_ids, state.enemy.id)
        actors = {a.id: a for a in state.actors}
        instances: list[EffectInstance] = []
        warned_effects: set[tuple[str, str, str]] = set()

        for event in state.events:
            actor = actors.get(event.actor_id)
            skill = actor.find_skill(event.skill_kind, event.skill_id) if actor else None
            if actor is None or skill is None:
                logger.debug(
                    "Skipping event %s: missing actor %s or skill %s",
                    event.id,
                    event.actor_id,
                    event.skill_id,
                )
                diagnostics.append(
                    EngineDiagnostic(
                        level="info",
                        message=(
                            f"event references missing actor '{event.actor_id}' "
                            f"or skill '{event.skill_id}'"
                        ),
                        event_id=event.id,
                    )
                )
                continue

            if event.duration is not None and event.duration <= 0:
                diagnostics.append(
                    EngineDiagnostic(
                        level="warning",
                        message=f"event has non-positive duration {event.duration}",
                        event_id=event.id,
                    )
                )

            for effect in skill.effects:
                key = (actor.id, skill.id, effect.id)
                if key not in warned_effects:
                    warned_effects.add(key)
                    diagnostics.extend(
                        EngineDiagnostic(
                            level="warning",
                            message=problem,
                            event_id=event.id,
                            effect_id=effect.id,
                        )
                        for problem in effect.warnings
                    )

                instances.extend(
                    self._expand_effect(event, actor, skill, effect, resolver, diagnostics)
                )

        return instances

    def effect_duration(self, event: CastEvent, effect: EffectDefinition) -> float:
        """Duration an effect of ``event`` lasts, before clipping.

        Attacks are pulses lasting their nominal duration, at least one
        tick.  Buffs and debuffs last the cast duration when it is set,
        otherwise their nominal duration.  Every result is clamped to at
        least one tick.
        """
        tick = self._config.resolution_s
        if effect.kind is EffectKind.ATTACK:
            return max(tick, effect.duration)
        if event.duration is not None:
            return max(tick, event.duration)
        if effect.duration > 0:
            return max(tick, effect.duration)
        return tick

    def _expand_effect(
        self,
        event: CastEvent,
        actor: Actor,
        skill: InstantSkill | PersistentSkill,
        effect: EffectDefinition,
        resolver: TargetResolver,
        diagnostics: list[EngineDiagnostic],
    ) -> list[EffectInstance]:
        start = event.start
        end = min(start + self.effect_duration(event, effect), self._config.length_s)
        if end <= start:
            logger.debug("Dropping effect %s of event %s: empty after clipping", effect.id, event.id)
            diagnostics.append(
                EngineDiagnostic(
                    level="info",
                    message="effect lies outside the timeline",
                    event_id=event.id,
                    effect_id=effect.id,
                )
            )
            return []

        stack_group = skill.stack_group_for(effect)
        return [
            EffectInstance(
                id=make_instance_id(event.id, effect.id, target_id),
                event_id=event.id,
                effect_id=effect.id,
                skill_id=skill.id,
                skill_kind=skill.skill_kind,
                source_actor_id=actor.id,
                target_id=target_id,
                name=effect.name,
                kind=effect.kind,
                stat=effect.stat,
                magnitude=effect.magnitude,
                stack_group=stack_group,
                start=start,
                end=end,
            )
            for target_id in resolver.resolve(event, effect)
        ]


def expand_instances(
    state: TimelineState,
    diagnostics: list[EngineDiagnostic] | None = None,
) -> list[EffectInstance]:
    """Expand ``state`` using its own timeline config."""
    return InstanceExpander(state.config).expand(state, diagnostics)


__all__ = [
    "InstanceExpander",
    "expand_instances",
]
