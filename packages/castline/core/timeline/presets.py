"""Built-in starting roster."""

from __future__ import annotations

from castline.core.config.models import AppConfig
from castline.core.timeline.models.actor import Actor, StatBlock, make_enemy
from castline.core.timeline.models.skill import EffectDefinition, InstantSkill, PersistentSkill
from castline.core.timeline.models.timeline import TimelineConfig, TimelineState
from castline.core.timeline.vocabulary import EffectKind, Stat


def default_actors() -> tuple[Actor, ...]:
    """Two sample students, each with one ex skill and one ns skill."""
    student_a = Actor(
        id="s.student_a",
        name="Student A",
        stats=StatBlock(atk=1050, crit=200, crit_dmg=200),
        persistent_skill=PersistentSkill(
            id="ns_student_a",
            name="NS-1",
            effects=(
                EffectDefinition(
                    id="ns_student_a_atk",
                    name="ATK+",
                    stat=Stat.ATK,
                    magnitude=0.15,
                    duration=10,
                    stack_group="ns",
                ),
            ),
        ),
        instant_skills=(
            InstantSkill(
                id="ex_student_a_1",
                name="EX-1",
                effects=(
                    EffectDefinition(
                        id="ex_student_a_atk",
                        name="ATK+",
                        stat=Stat.ATK,
                        magnitude=0.3,
                        duration=6,
                        stack_group="field",
                    ),
                    EffectDefinition(
                        id="ex_student_a_crit",
                        name="CRIT+",
                        stat=Stat.CRIT,
                        magnitude=0.2,
                        duration=6,
                        stack_group="field",
                    ),
                ),
            ),
        ),
    )
    student_b = Actor(
        id="s.student_b",
        name="Student B",
        stats=StatBlock(atk=820, crit=150, crit_dmg=175),
        persistent_skill=PersistentSkill(
            id="ns_student_b",
            name="NS-1",
            effects=(
                EffectDefinition(
                    id="ns_student_b_atk",
                    name="ATK+",
                    stat=Stat.ATK,
                    magnitude=0.12,
                    duration=12,
                    stack_group="ns",
                ),
            ),
        ),
        instant_skills=(
            InstantSkill(
                id="ex_student_b_1",
                name="EX-1",
                effects=(
                    EffectDefinition(
                        id="ex_student_b_atk",
                        name="ATK+",
                        kind=EffectKind.BUFF,
                        stat=Stat.ATK,
                        magnitude=0.2,
                        duration=8,
                        stack_group="field",
                    ),
                ),
            ),
        ),
    )
    return (student_a, student_b)


def default_state(config: AppConfig | None = None) -> TimelineState:
    """Fresh state: default roster, no events, configured timeline and enemy."""
    config = config or AppConfig()
    enemy = config.enemy
    return TimelineState(
        actors=default_actors(),
        enemy=make_enemy(enemy.name, enemy.atk, enemy.crit, enemy.crit_dmg),
        config=TimelineConfig(
            length_s=config.timeline.length_s,
            resolution_s=config.timeline.resolution_s,
        ),
    )


__all__ = [
    "default_actors",
    "default_state",
]
