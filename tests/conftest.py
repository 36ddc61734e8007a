"""Shared pytest fixtures for castline tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from castline.core.timeline.models import (
    Actor,
    CastEvent,
    EffectDefinition,
    InstantSkill,
    PersistentSkill,
    StatBlock,
    TimelineConfig,
    TimelineState,
    make_enemy,
)
from castline.core.timeline.vocabulary import EffectKind, SkillKind, Stat, TargetMode

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Roster Fixtures
# ============================================================================


@pytest.fixture
def field_buff() -> EffectDefinition:
    """+30% ATK for 6s in the 'field' stack group."""
    return EffectDefinition(
        id="fx_field_atk",
        name="ATK+",
        kind=EffectKind.BUFF,
        stat=Stat.ATK,
        magnitude=0.3,
        duration=6,
        stack_group="field",
    )


@pytest.fixture
def alice(field_buff: EffectDefinition) -> Actor:
    """Student with one ex skill (field ATK buff) and one ns skill."""
    return Actor(
        id="alice",
        name="Alice",
        stats=StatBlock(atk=1000, crit=200, crit_dmg=150),
        instant_skills=(InstantSkill(id="ex_alice", name="EX", effects=(field_buff,)),),
        persistent_skill=PersistentSkill(
            id="ns_alice",
            name="NS",
            effects=(
                EffectDefinition(
                    id="fx_ns_atk",
                    stat=Stat.ATK,
                    magnitude=0.15,
                    duration=10,
                    stack_group="ns",
                ),
            ),
        ),
    )


@pytest.fixture
def bob() -> Actor:
    """Student with a debuff-on-enemy ex skill."""
    return Actor(
        id="bob",
        name="Bob",
        stats=StatBlock(atk=800, crit=100, crit_dmg=200),
        instant_skills=(
            InstantSkill(
                id="ex_bob",
                name="EX",
                effects=(
                    EffectDefinition(
                        id="fx_bob_def_down",
                        kind=EffectKind.DEBUFF,
                        stat=Stat.ATK,
                        magnitude=0.1,
                        duration=5,
                        stack_group="shred",
                        target=TargetMode.ENEMY,
                    ),
                ),
            ),
        ),
    )


@pytest.fixture
def roster_state(alice: Actor, bob: Actor) -> TimelineState:
    """Two students, the enemy, no events, 60s timeline at 0.1s."""
    return TimelineState(
        actors=(alice, bob),
        enemy=make_enemy(atk=1000, crit=200, crit_dmg=200),
        config=TimelineConfig(length_s=60, resolution_s=0.1),
    )


@pytest.fixture
def busy_state(roster_state: TimelineState) -> TimelineState:
    """Roster with overlapping casts across both students."""
    events = (
        CastEvent(id="e1", actor_id="alice", skill_id="ex_alice", start=0, duration=6),
        CastEvent(id="e2", actor_id="alice", skill_id="ex_alice", start=4, duration=6),
        CastEvent(
            id="e3",
            actor_id="alice",
            skill_kind=SkillKind.PERSISTENT,
            skill_id="ns_alice",
            start=2,
            duration=10,
        ),
        CastEvent(id="e4", actor_id="bob", skill_id="ex_bob", start=1, duration=5),
        CastEvent(
            id="e5",
            actor_id="bob",
            skill_id="ex_bob",
            start=3,
            duration=5,
        ),
    )
    return roster_state.model_copy(update={"events": events})
