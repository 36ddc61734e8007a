"""Effect instance models: resolved, time-bounded effect applications.

Instances are pure derived data.  They are rebuilt from actors, skills
and cast events on every recomputation and are never persisted.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from castline.core.timeline.vocabulary import EffectKind, SkillKind, Stat


def make_instance_id(event_id: str, effect_id: str, target_id: str) -> str:
    """Deterministic instance id for an (event, effect, target) triple."""
    return f"{event_id}:{effect_id}:{target_id}"


class ModifierSlot(BaseModel):
    """Conflict key: at most one instance per slot is live at any instant."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_id: str
    stat: Stat
    stack_group: str
    kind: EffectKind


class StackKey(BaseModel):
    """Per-target grouping used when aggregating stats at a point in time."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    stat: Stat
    stack_group: str
    kind: EffectKind


class EffectInstance(BaseModel):
    """One effect definition from one cast event applied to one target.

    The interval is closed-open: ``[start, end)``.

    Attributes:
        id: Deterministic id (see :func:`make_instance_id`).
        event_id: Originating cast event.
        effect_id: Originating effect definition.
        skill_id: Skill the effect belongs to.
        skill_kind: Variant of that skill.
        source_actor_id: Casting actor.
        target_id: Affected actor.
        name: Effect display name.
        kind: buff, debuff or attack.
        stat: Affected stat.
        magnitude: Fractional modifier.
        stack_group: Effective stack group.
        start: Start time in seconds (inclusive).
        end: End time in seconds (exclusive).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(description="Deterministic instance id")
    event_id: str = Field(description="Originating cast event id")
    effect_id: str = Field(description="Originating effect definition id")
    skill_id: str = Field(description="Originating skill id")
    skill_kind: SkillKind = Field(description="Originating skill variant")
    source_actor_id: str = Field(description="Casting actor id")
    target_id: str = Field(description="Affected actor id")
    name: str = Field(default="", description="Effect display name")
    kind: EffectKind
    stat: Stat
    magnitude: float
    stack_group: str
    start: float = Field(description="Inclusive start in seconds")
    end: float = Field(description="Exclusive end in seconds")

    @property
    def duration(self) -> float:
        """Interval length in seconds."""
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """True when the interval is empty or inverted."""
        return self.end <= self.start

    @property
    def slot(self) -> ModifierSlot:
        """Modifier slot this instance competes for."""
        return ModifierSlot(
            target_id=self.target_id,
            stat=self.stat,
            stack_group=self.stack_group,
            kind=self.kind,
        )

    @property
    def stack_key(self) -> StackKey:
        """Point-in-time aggregation key."""
        return StackKey(stat=self.stat, stack_group=self.stack_group, kind=self.kind)

    def is_active_at(self, time: float) -> bool:
        """Whether ``time`` falls inside ``[start, end)``."""
        return self.start <= time < self.end

    def overlaps(self, other: EffectInstance) -> bool:
        """Whether the two closed-open intervals intersect."""
        return self.start < other.end and other.start < self.end


__all__ = [
    "EffectInstance",
    "ModifierSlot",
    "StackKey",
    "make_instance_id",
]
