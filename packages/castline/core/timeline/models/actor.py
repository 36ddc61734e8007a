"""Actor models: students and the fixed enemy."""

from __future__ import annotations

from typing import assert_never

from pydantic import BaseModel, ConfigDict, Field, model_validator

from castline.core.timeline.models.skill import InstantSkill, PersistentSkill
from castline.core.timeline.vocabulary import ENEMY_ID, SkillKind, Stat


class StatBlock(BaseModel):
    """Base values for the modifiable stats."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    atk: float = Field(default=0.0, description="Attack")
    crit: float = Field(default=0.0, description="Critical rate value")
    crit_dmg: float = Field(default=0.0, description="Critical damage value")

    def get(self, stat: Stat) -> float:
        """Return the base value for ``stat``."""
        if stat is Stat.ATK:
            return self.atk
        if stat is Stat.CRIT:
            return self.crit
        if stat is Stat.CRIT_DMG:
            return self.crit_dmg
        assert_never(stat)


class NormalAttack(BaseModel):
    """Normal attack profile. Carried through snapshots; not used by the engine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    hit_rate: float = 1.0
    multiplier: float = 1.0


class Actor(BaseModel):
    """A student character or the fixed enemy.

    Attributes:
        id: Unique actor id.
        name: Display name.
        stats: Base stat vector.
        normal: Normal attack profile.
        instant_skills: "ex" skills, any number.
        persistent_skill: The single "ns" skill, if any.
        is_enemy: True only for the fixed enemy actor.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1, description="Unique actor id")
    name: str = Field(default="", description="Display name")
    stats: StatBlock = Field(default_factory=StatBlock, description="Base stats")
    normal: NormalAttack = Field(default_factory=NormalAttack)
    instant_skills: tuple[InstantSkill, ...] = Field(default=())
    persistent_skill: PersistentSkill | None = Field(default=None)
    is_enemy: bool = Field(default=False, description="Fixed enemy marker")

    @model_validator(mode="after")
    def _check_enemy(self) -> Actor:
        if self.is_enemy and self.id != ENEMY_ID:
            raise ValueError(f"enemy actor must use id '{ENEMY_ID}', got '{self.id}'")
        if self.is_enemy and (self.instant_skills or self.persistent_skill):
            raise ValueError("enemy actor cannot own skills")
        return self

    @property
    def skills(self) -> list[InstantSkill | PersistentSkill]:
        """All skills, instant first."""
        result: list[InstantSkill | PersistentSkill] = list(self.instant_skills)
        if self.persistent_skill is not None:
            result.append(self.persistent_skill)
        return result

    def find_skill(
        self, kind: SkillKind, skill_id: str
    ) -> InstantSkill | PersistentSkill | None:
        """Resolve a skill reference.

        Args:
            kind: Which variant the reference points at.
            skill_id: Skill id.

        Returns:
            The skill, or None if this actor has no such skill.
        """
        if kind is SkillKind.INSTANT:
            return next((s for s in self.instant_skills if s.id == skill_id), None)
        if kind is SkillKind.PERSISTENT:
            ns = self.persistent_skill
            return ns if ns is not None and ns.id == skill_id else None
        assert_never(kind)


def make_enemy(
    name: str = "Enemy",
    atk: float = 1000.0,
    crit: float = 200.0,
    crit_dmg: float = 200.0,
) -> Actor:
    """Build the fixed enemy actor."""
    return Actor(
        id=ENEMY_ID,
        name=name,
        stats=StatBlock(atk=atk, crit=crit, crit_dmg=crit_dmg),
        is_enemy=True,
    )


__all__ = [
    "Actor",
    "NormalAttack",
    "StatBlock",
    "make_enemy",
]
