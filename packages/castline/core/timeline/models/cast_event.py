"""Cast event models: timed placements of a skill on the timeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from castline.core.timeline.vocabulary import SkillKind, TargetMode


class TargetOverride(BaseModel):
    """Target selection attached to one effect of one cast event.

    Attributes:
        target: Target mode for that effect.
        target_actor_ids: Explicit ids, used when ``target`` is STUDENT.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: TargetMode = Field(description="Target mode")
    target_actor_ids: tuple[str, ...] = Field(default=(), description="Explicit target ids")


class CastEvent(BaseModel):
    """A placement of one skill on the timeline for its owning actor.

    Attributes:
        id: Unique event id.
        actor_id: Owning (casting) actor.
        skill_kind: Which skill variant ``skill_id`` refers to.
        skill_id: Skill reference on the owning actor.
        start: Start time in seconds.
        duration: Overall duration in seconds; None defers to each
            effect's nominal duration.
        target: Event-level target mode.
        target_actor_ids: Event-level explicit target ids.
        effect_targets: Per-effect overrides keyed by effect definition id.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1, description="Unique event id")
    actor_id: str = Field(min_length=1, description="Owning actor id")
    skill_kind: SkillKind = Field(default=SkillKind.INSTANT, description="Skill variant")
    skill_id: str = Field(min_length=1, description="Skill id on the owning actor")
    start: float = Field(ge=0, description="Start time in seconds")
    duration: float | None = Field(default=None, description="Duration in seconds")
    target: TargetMode = Field(default=TargetMode.SELF, description="Event target mode")
    target_actor_ids: tuple[str, ...] = Field(default=(), description="Event target ids")
    effect_targets: dict[str, TargetOverride] = Field(
        default_factory=dict,
        description="Per-effect target overrides",
    )

    @property
    def end(self) -> float | None:
        """Nominal end time, or None when the duration is deferred."""
        if self.duration is None:
            return None
        return self.start + self.duration


__all__ = [
    "CastEvent",
    "TargetOverride",
]
