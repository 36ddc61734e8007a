"""Skill and effect definition models.

A skill is a tagged variant: ``InstantSkill`` ("ex", placed any number
of times) or ``PersistentSkill`` ("ns", one per actor with its own stack
group).  Both carry an ordered tuple of ``EffectDefinition``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from castline.core.timeline.vocabulary import (
    INSTANT_STACK_GROUP,
    PERSISTENT_STACK_GROUP,
    EffectKind,
    SkillKind,
    Stat,
    TargetMode,
)


class EffectDefinition(BaseModel):
    """A single stat modifier or attack pulse declared on a skill.

    Attributes:
        id: Identifier, unique within the owning skill.
        name: Display name.
        kind: buff, debuff or attack.
        stat: Affected stat (ignored for attacks).
        magnitude: Fractional modifier (0.3 means +30% for a buff).
        duration: Nominal duration in seconds.
        stack_group: Competition label; empty inherits the skill's group.
        target: Default target mode overriding the cast event's mode.
        target_actor_ids: Explicit ids used when ``target`` is STUDENT.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1, description="Effect definition identifier")
    name: str = Field(default="", description="Display name")
    kind: EffectKind = Field(default=EffectKind.BUFF, description="Effect kind")
    stat: Stat = Field(default=Stat.ATK, description="Affected stat")
    magnitude: float = Field(default=0.0, description="Fractional modifier")
    duration: float = Field(default=0.0, description="Nominal duration in seconds")
    stack_group: str = Field(default="", description="Stack group label")
    target: TargetMode | None = Field(default=None, description="Default target mode")
    target_actor_ids: tuple[str, ...] = Field(
        default=(),
        description="Explicit target ids for STUDENT mode",
    )

    @property
    def warnings(self) -> list[str]:
        """Editor-facing problems; the engine tolerates all of them."""
        problems: list[str] = []
        if self.magnitude <= 0:
            problems.append(f"effect '{self.id}' has non-positive magnitude {self.magnitude}")
        if self.duration <= 0:
            problems.append(f"effect '{self.id}' has non-positive duration {self.duration}")
        return problems


class _SkillBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1, description="Skill identifier")
    name: str = Field(default="", description="Display name")
    effects: tuple[EffectDefinition, ...] = Field(
        default=(),
        description="Ordered effect definitions",
    )

    def find_effect(self, effect_id: str) -> EffectDefinition | None:
        """Look up an effect definition by id."""
        return next((e for e in self.effects if e.id == effect_id), None)


class InstantSkill(_SkillBase):
    """An "ex" skill: every placement is independently timed."""

    kind: Literal["ex"] = "ex"

    @property
    def skill_kind(self) -> SkillKind:
        return SkillKind.INSTANT

    def stack_group_for(self, effect: EffectDefinition) -> str:
        """Stack group an effect of this skill competes in."""
        return effect.stack_group or INSTANT_STACK_GROUP


class PersistentSkill(_SkillBase):
    """An "ns" skill: one per actor, sharing a stack group across placements."""

    kind: Literal["ns"] = "ns"
    stack_group: str = Field(
        default=PERSISTENT_STACK_GROUP,
        description="Stack group shared by every placement of this skill",
    )

    @property
    def skill_kind(self) -> SkillKind:
        return SkillKind.PERSISTENT

    def stack_group_for(self, effect: EffectDefinition) -> str:
        """Stack group an effect of this skill competes in."""
        return effect.stack_group or self.stack_group


Skill = Annotated[InstantSkill | PersistentSkill, Field(discriminator="kind")]


__all__ = [
    "EffectDefinition",
    "InstantSkill",
    "PersistentSkill",
    "Skill",
]
