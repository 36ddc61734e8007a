"""Timeline state: the complete input snapshot for one recomputation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from castline.core.timeline.models.actor import Actor, make_enemy
from castline.core.timeline.models.cast_event import CastEvent, TargetOverride
from castline.core.timeline.vocabulary import (
    DEFAULT_TIME_RESOLUTION_S,
    DEFAULT_TIMELINE_LENGTH_S,
    ENEMY_ID,
)


class TimelineConfig(BaseModel):
    """Timeline extent and grid.

    Attributes:
        length_s: Visible timeline length in seconds.
        resolution_s: Grid spacing in seconds; also the minimum
            duration of any emitted instance.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    length_s: float = Field(default=DEFAULT_TIMELINE_LENGTH_S, gt=0)
    resolution_s: float = Field(default=DEFAULT_TIME_RESOLUTION_S, gt=0)


class TimelineState(BaseModel):
    """Actors, their skills, placed cast events and timeline config.

    Treated as an immutable snapshot: editing helpers return new states.

    Attributes:
        actors: Student actors in display order (enemy excluded).
        enemy: The fixed enemy actor.
        events: Placed cast events.
        config: Timeline extent and grid.
        ns_enabled: Per-actor persistent-skill toggle kept for the editor.
        ns_targets: Per-actor persistent-skill target kept for the editor.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    actors: tuple[Actor, ...] = Field(default=())
    enemy: Actor = Field(default_factory=make_enemy)
    events: tuple[CastEvent, ...] = Field(default=())
    config: TimelineConfig = Field(default_factory=TimelineConfig)
    ns_enabled: dict[str, bool] = Field(default_factory=dict)
    ns_targets: dict[str, TargetOverride] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_roster(self) -> TimelineState:
        if not self.enemy.is_enemy:
            raise ValueError("enemy slot must hold the enemy actor")
        seen: set[str] = set()
        for actor in self.actors:
            if actor.is_enemy or actor.id == ENEMY_ID:
                raise ValueError("the enemy cannot be listed among actors")
            if actor.id in seen:
                raise ValueError(f"duplicate actor id '{actor.id}'")
            seen.add(actor.id)
        return self

    @property
    def student_ids(self) -> list[str]:
        """Ids of all student actors, in display order."""
        return [a.id for a in self.actors]

    @property
    def all_targets(self) -> list[Actor]:
        """Every actor that can receive effects: students, then the enemy."""
        return [*self.actors, self.enemy]

    def get_actor(self, actor_id: str) -> Actor | None:
        """Look up a student or the enemy by id."""
        if actor_id == self.enemy.id:
            return self.enemy
        return next((a for a in self.actors if a.id == actor_id), None)

    def get_event(self, event_id: str) -> CastEvent | None:
        """Look up a cast event by id."""
        return next((e for e in self.events if e.id == event_id), None)


__all__ = [
    "TimelineConfig",
    "TimelineState",
]
