"""Pure editing operations on a TimelineState.

Every function returns a new state; inputs are never mutated.  Times
are snapped to the state's resolution grid and clamped into the
timeline the same way interactive drag and resize edits are.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from uuid import uuid4

from castline.core.timeline.models.actor import Actor
from castline.core.timeline.models.cast_event import CastEvent, TargetOverride
from castline.core.timeline.models.skill import InstantSkill, PersistentSkill
from castline.core.timeline.models.timeline import TimelineState
from castline.core.timeline.vocabulary import (
    DEFAULT_CAST_DURATION_S,
    MAX_TIME_RESOLUTION_S,
    MAX_TIMELINE_LENGTH_S,
    MIN_TIME_RESOLUTION_S,
    MIN_TIMELINE_LENGTH_S,
    SkillKind,
    TargetMode,
)
from castline.core.utils.math import clamp, snap_to_grid

logger = logging.getLogger(__name__)


class EditError(ValueError):
    """Raised when an edit names something that does not exist or is not allowed."""


def new_event_id() -> str:
    """Generate a fresh cast event id."""
    return f"evt_{uuid4().hex[:12]}"


def default_cast_duration(
    skill: InstantSkill | PersistentSkill,
    resolution_s: float,
    fallback_s: float = DEFAULT_CAST_DURATION_S,
) -> float:
    """Duration given to a freshly placed cast of ``skill``.

    The longest positive effect duration on the skill, or
    ``max(resolution_s, fallback_s)`` when there is none.
    """
    longest = max((e.duration for e in skill.effects if e.duration > 0), default=0.0)
    return longest if longest > 0 else max(resolution_s, fallback_s)


def clamp_event(event: CastEvent, length_s: float, resolution_s: float) -> CastEvent:
    """Clamp one event so it starts and ends inside the timeline."""
    if event.duration is None:
        start = clamp(event.start, 0.0, max(0.0, length_s - resolution_s))
        return event.model_copy(update={"start": start})

    max_start = max(0.0, length_s - event.duration)
    start = clamp(event.start, 0.0, max_start)
    duration = clamp(event.duration, resolution_s, length_s - start)
    return event.model_copy(update={"start": start, "duration": duration})


def clamp_events_to_timeline(
    events: Iterable[CastEvent], length_s: float, resolution_s: float
) -> tuple[CastEvent, ...]:
    """Clamp every event into ``[0, length_s]``."""
    return tuple(clamp_event(e, length_s, resolution_s) for e in events)


def place_skill(
    state: TimelineState,
    actor_id: str,
    skill_kind: SkillKind,
    skill_id: str,
    start: float,
    event_id: str | None = None,
    fallback_duration_s: float = DEFAULT_CAST_DURATION_S,
) -> TimelineState:
    """Place a skill of ``actor_id`` on the timeline.

    Args:
        state: Current state.
        actor_id: Owning student (never the enemy).
        skill_kind: Variant of the skill.
        skill_id: Skill id on the actor.
        start: Requested start; snapped to the grid and clamped.
        event_id: Id for the new event (generated when omitted).
        fallback_duration_s: Cast duration when the skill has no positive
            effect duration.

    Returns:
        New state with the event appended.

    Raises:
        EditError: If the actor or skill does not exist.
    """
    actor = _require_student(state, actor_id)
    skill = actor.find_skill(skill_kind, skill_id)
    if skill is None:
        raise EditError(f"actor '{actor_id}' has no {skill_kind.value} skill '{skill_id}'")

    cfg = state.config
    duration = default_cast_duration(skill, cfg.resolution_s, fallback_duration_s)
    event = CastEvent(
        id=event_id or new_event_id(),
        actor_id=actor_id,
        skill_kind=skill_kind,
        skill_id=skill_id,
        start=max(0.0, snap_to_grid(start, cfg.resolution_s)),
        duration=duration,
        target=TargetMode.SELF,
        target_actor_ids=(actor_id,),
    )
    event = clamp_event(event, cfg.length_s, cfg.resolution_s)
    logger.debug(
        "Placed %s skill %s for %s at %.3fs", skill_kind.value, skill_id, actor_id, event.start
    )
    return state.model_copy(update={"events": (*state.events, event)})


def move_event(state: TimelineState, event_id: str, start: float) -> TimelineState:
    """Move an event, keeping its duration."""
    event = _require_event(state, event_id)
    cfg = state.config
    span = event.duration if event.duration is not None else cfg.resolution_s
    new_start = clamp(snap_to_grid(start, cfg.resolution_s), 0.0, max(0.0, cfg.length_s - span))
    return _replace_event(state, event.model_copy(update={"start": new_start}))


def resize_event(state: TimelineState, event_id: str, duration: float) -> TimelineState:
    """Change an event's duration, keeping its start."""
    event = _require_event(state, event_id)
    cfg = state.config
    new_duration = clamp(
        snap_to_grid(duration, cfg.resolution_s),
        cfg.resolution_s,
        max(cfg.resolution_s, cfg.length_s - event.start),
    )
    return _replace_event(state, event.model_copy(update={"duration": new_duration}))


def set_event_target(
    state: TimelineState,
    event_id: str,
    target: TargetMode,
    target_actor_ids: Sequence[str] = (),
) -> TimelineState:
    """Set the event-level target mode and explicit ids."""
    event = _require_event(state, event_id)
    ids = tuple(target_actor_ids) if target is TargetMode.STUDENT else ()
    return _replace_event(
        state, event.model_copy(update={"target": target, "target_actor_ids": ids})
    )


def set_event_effect_target(
    state: TimelineState,
    event_id: str,
    effect_id: str,
    target: TargetMode,
    target_actor_ids: Sequence[str] = (),
) -> TimelineState:
    """Override the target of one effect on one cast event."""
    event = _require_event(state, event_id)
    ids = tuple(target_actor_ids) if target is TargetMode.STUDENT else ()
    overrides = {
        **event.effect_targets,
        effect_id: TargetOverride(target=target, target_actor_ids=ids),
    }
    return _replace_event(state, event.model_copy(update={"effect_targets": overrides}))


def remove_event(state: TimelineState, event_id: str) -> TimelineState:
    """Delete one cast event (no-op if it does not exist)."""
    return state.model_copy(
        update={"events": tuple(e for e in state.events if e.id != event_id)}
    )


def upsert_actor(state: TimelineState, actor: Actor) -> TimelineState:
    """Add a student, or replace the one with the same id in place."""
    if actor.is_enemy:
        return state.model_copy(update={"enemy": actor})
    if actor.id == state.enemy.id:
        raise EditError(f"actor id '{actor.id}' is reserved for the enemy")
    if any(a.id == actor.id for a in state.actors):
        actors = tuple(actor if a.id == actor.id else a for a in state.actors)
    else:
        actors = (*state.actors, actor)
    return state.model_copy(update={"actors": actors})


def remove_actor(state: TimelineState, actor_id: str) -> TimelineState:
    """Delete a student and every cast event it owns."""
    ns_enabled = {k: v for k, v in state.ns_enabled.items() if k != actor_id}
    ns_targets = {k: v for k, v in state.ns_targets.items() if k != actor_id}
    return state.model_copy(
        update={
            "actors": tuple(a for a in state.actors if a.id != actor_id),
            "events": tuple(e for e in state.events if e.actor_id != actor_id),
            "ns_enabled": ns_enabled,
            "ns_targets": ns_targets,
        }
    )


def remove_skill(
    state: TimelineState, actor_id: str, skill_kind: SkillKind, skill_id: str
) -> TimelineState:
    """Delete a skill from an actor and every cast event referencing it."""
    actor = _require_student(state, actor_id)
    if skill_kind is SkillKind.INSTANT:
        updated = actor.model_copy(
            update={"instant_skills": tuple(s for s in actor.instant_skills if s.id != skill_id)}
        )
    else:
        ns = actor.persistent_skill
        updated = actor.model_copy(
            update={"persistent_skill": None if ns is not None and ns.id == skill_id else ns}
        )

    events = tuple(
        e
        for e in state.events
        if not (e.actor_id == actor_id and e.skill_kind is skill_kind and e.skill_id == skill_id)
    )
    return upsert_actor(state, updated).model_copy(update={"events": events})


def set_timeline_length(state: TimelineState, seconds: float) -> TimelineState:
    """Resize the timeline (whole seconds, 10-600) and re-clamp events."""
    length = float(clamp(round(seconds), MIN_TIMELINE_LENGTH_S, MAX_TIMELINE_LENGTH_S))
    cfg = state.config.model_copy(update={"length_s": length})
    events = clamp_events_to_timeline(state.events, length, cfg.resolution_s)
    return state.model_copy(update={"config": cfg, "events": events})


def set_time_resolution(state: TimelineState, step: float) -> TimelineState:
    """Change the grid (0.05-1 s, two decimals) and re-snap every event."""
    new_step = clamp(round(step * 100) / 100, MIN_TIME_RESOLUTION_S, MAX_TIME_RESOLUTION_S)
    length = state.config.length_s

    events: list[CastEvent] = []
    for event in state.events:
        start = clamp(snap_to_grid(event.start, new_step), 0.0, length)
        update: dict[str, float] = {"start": start}
        if event.duration is not None:
            update["duration"] = clamp(
                snap_to_grid(event.duration, new_step),
                new_step,
                max(new_step, length - start),
            )
        events.append(event.model_copy(update=update))

    cfg = state.config.model_copy(update={"resolution_s": new_step})
    return state.model_copy(update={"config": cfg, "events": tuple(events)})


def _require_student(state: TimelineState, actor_id: str) -> Actor:
    if actor_id == state.enemy.id:
        raise EditError("the enemy cannot own cast events or skills")
    actor = state.get_actor(actor_id)
    if actor is None:
        raise EditError(f"unknown actor '{actor_id}'")
    return actor


def _require_event(state: TimelineState, event_id: str) -> CastEvent:
    event = state.get_event(event_id)
    if event is None:
        raise EditError(f"unknown event '{event_id}'")
    return event


def _replace_event(state: TimelineState, event: CastEvent) -> TimelineState:
    return state.model_copy(
        update={"events": tuple(event if e.id == event.id else e for e in state.events)}
    )


__all__ = [
    "EditError",
    "clamp_event",
    "clamp_events_to_timeline",
    "default_cast_duration",
    "move_event",
    "new_event_id",
    "place_skill",
    "remove_actor",
    "remove_event",
    "remove_skill",
    "resize_event",
    "set_event_effect_target",
    "set_event_target",
    "set_time_resolution",
    "set_timeline_length",
    "upsert_actor",
]
