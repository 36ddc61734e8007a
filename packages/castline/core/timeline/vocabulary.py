"""Timeline vocabulary - controlled enums and constants.

Single source of truth for the enums shared by models, the resolution
engine, and the snapshot codec.
"""

from enum import Enum

ENEMY_ID = "enemy"

DEFAULT_TIMELINE_LENGTH_S = 60.0
DEFAULT_TIME_RESOLUTION_S = 0.1
DEFAULT_CAST_DURATION_S = 1.0

MIN_TIMELINE_LENGTH_S = 10.0
MAX_TIMELINE_LENGTH_S = 600.0
MIN_TIME_RESOLUTION_S = 0.05
MAX_TIME_RESOLUTION_S = 1.0

INSTANT_STACK_GROUP = "ex"
PERSISTENT_STACK_GROUP = "ns"


class TargetMode(str, Enum):
    """Who a cast (or a single effect of a cast) applies to.

    Attributes:
        SELF: The casting actor only.
        ALL: Every student actor (never the enemy).
        STUDENT: An explicit list of actor ids.
        ENEMY: The fixed enemy actor only.
    """

    SELF = "self"
    ALL = "all"
    STUDENT = "student"
    ENEMY = "enemy"


class EffectKind(str, Enum):
    """Effect kinds.

    Attributes:
        BUFF: Adds its magnitude to a stat fraction.
        DEBUFF: Subtracts its magnitude from a stat fraction.
        ATTACK: Damage pulse; never modifies stats.
    """

    BUFF = "buff"
    DEBUFF = "debuff"
    ATTACK = "attack"


class Stat(str, Enum):
    """Modifiable actor stats."""

    ATK = "atk"
    CRIT = "crit"
    CRIT_DMG = "critDmg"


class SkillKind(str, Enum):
    """Skill variants.

    Attributes:
        INSTANT: "ex" skill, placed any number of times.
        PERSISTENT: "ns" (normal-state) skill, one per actor.
    """

    INSTANT = "ex"
    PERSISTENT = "ns"


__all__ = [
    "DEFAULT_CAST_DURATION_S",
    "DEFAULT_TIMELINE_LENGTH_S",
    "DEFAULT_TIME_RESOLUTION_S",
    "ENEMY_ID",
    "INSTANT_STACK_GROUP",
    "MAX_TIMELINE_LENGTH_S",
    "MAX_TIME_RESOLUTION_S",
    "MIN_TIMELINE_LENGTH_S",
    "MIN_TIME_RESOLUTION_S",
    "PERSISTENT_STACK_GROUP",
    "EffectKind",
    "SkillKind",
    "Stat",
    "TargetMode",
]
