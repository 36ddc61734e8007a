"""Timeline domain models."""

from castline.core.timeline.models.actor import (
    Actor,
    NormalAttack,
    StatBlock,
    make_enemy,
)
from castline.core.timeline.models.cast_event import CastEvent, TargetOverride
from castline.core.timeline.models.effect_instance import (
    EffectInstance,
    ModifierSlot,
    StackKey,
    make_instance_id,
)
from castline.core.timeline.models.results import (
    EngineDiagnostic,
    LaneAssignment,
    ResolutionResult,
    StatSnapshot,
)
from castline.core.timeline.models.skill import (
    EffectDefinition,
    InstantSkill,
    PersistentSkill,
    Skill,
)
from castline.core.timeline.models.timeline import TimelineConfig, TimelineState

__all__ = [
    "Actor",
    "CastEvent",
    "EffectDefinition",
    "EffectInstance",
    "EngineDiagnostic",
    "InstantSkill",
    "LaneAssignment",
    "ModifierSlot",
    "NormalAttack",
    "PersistentSkill",
    "ResolutionResult",
    "Skill",
    "StackKey",
    "StatBlock",
    "StatSnapshot",
    "TargetOverride",
    "TimelineConfig",
    "TimelineState",
    "make_enemy",
    "make_instance_id",
]
