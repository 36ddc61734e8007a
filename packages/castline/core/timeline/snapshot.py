"""Shareable snapshot tokens.

A snapshot is the whole editable state (actors, skills, cast events,
timeline config, enemy) serialized as UTF-8 JSON and wrapped in unpadded
URL-safe base64, suitable for a ``?s=`` query parameter.  The JSON uses
the web editor's camelCase layout (``students``, ``events``,
``timelineSeconds``, ``timeStep``...) so links stay interchangeable.

Decoding is strict about the envelope and lenient about events: a token
that does not parse, or lacks ``students``, is rejected as a whole,
while individual events with legacy or partial shapes are normalized
or dropped.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from castline.core.config.models import AppConfig
from castline.core.timeline.editing import clamp_events_to_timeline, default_cast_duration
from castline.core.timeline.models.actor import Actor, NormalAttack, StatBlock, make_enemy
from castline.core.timeline.models.cast_event import CastEvent, TargetOverride
from castline.core.timeline.models.skill import (
    EffectDefinition,
    InstantSkill,
    PersistentSkill,
)
from castline.core.timeline.models.timeline import TimelineConfig, TimelineState
from castline.core.timeline.vocabulary import (
    DEFAULT_CAST_DURATION_S,
    MAX_TIME_RESOLUTION_S,
    MAX_TIMELINE_LENGTH_S,
    MIN_TIME_RESOLUTION_S,
    MIN_TIMELINE_LENGTH_S,
    PERSISTENT_STACK_GROUP,
    EffectKind,
    SkillKind,
    Stat,
    TargetMode,
)
from castline.core.utils.math import clamp

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotDecodeError(Exception):
    """Raised when a snapshot token cannot be turned into a state.

    Attributes:
        reason: What specifically went wrong.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Snapshot decode failed: {reason}")


class SnapshotLoadResult(BaseModel):
    """Outcome of :func:`load_snapshot`.

    Attributes:
        ok: True when the token was applied.
        state: The decoded state, or the untouched current state on failure.
        error: Failure reason when ``ok`` is False.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    state: TimelineState | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# Wire models (camelCase JSON layout)
# ---------------------------------------------------------------------------


class _Wire(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class _WireStats(_Wire):
    atk: float = 0.0
    crit: float = 0.0
    crit_dmg: float = 0.0


class _WireNormal(_Wire):
    hit_rate: float = 1.0
    multiplier: float = 1.0


class _WireTarget(_Wire):
    target: Any = TargetMode.SELF.value
    target_student_ids: list[str] | None = None


class _WireEffect(_Wire):
    id: str = Field(min_length=1)
    name: str = ""
    kind: EffectKind = EffectKind.BUFF
    stat: Stat = Stat.ATK
    value: float = 0.0
    duration: float = 0.0
    stack_group: str = ""
    target: TargetMode | None = None
    target_student_ids: list[str] | None = None


class _WireExSkill(_Wire):
    id: str = Field(min_length=1)
    name: str = ""
    buffs: list[_WireEffect] = Field(default_factory=list)


class _WireNsSkill(_WireExSkill):
    stack_group: str = PERSISTENT_STACK_GROUP


class _WireStudent(_Wire):
    id: str = Field(min_length=1)
    name: str = ""
    stats: _WireStats = Field(default_factory=_WireStats)
    normal: _WireNormal = Field(default_factory=_WireNormal)
    ns: _WireNsSkill | None = None
    ex: list[_WireExSkill] = Field(default_factory=list)


class _WireEnemy(_Wire):
    id: str | None = None
    name: str = ""
    stats: _WireStats = Field(default_factory=_WireStats)


class _WireSnapshot(_Wire):
    version: int = SNAPSHOT_VERSION
    students: list[_WireStudent]
    events: list[Any] = Field(default_factory=list)
    ns_enabled: dict[str, bool] = Field(default_factory=dict)
    ns_targets: dict[str, _WireTarget] | None = None
    timeline_seconds: float | None = None
    time_step: float | None = None
    enemy: _WireEnemy | None = None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _b64url_encode(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def _b64url_decode(token: str) -> str:
    padded = token + "=" * (-len(token) % 4)
    raw = base64.b64decode(padded, altchars=b"-_", validate=True)
    return raw.decode("utf-8")


def _effect_to_wire(effect: EffectDefinition) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": effect.id,
        "name": effect.name,
        "kind": effect.kind.value,
        "stat": effect.stat.value,
        "value": effect.magnitude,
        "duration": effect.duration,
        "stackGroup": effect.stack_group,
    }
    if effect.target is not None:
        data["target"] = effect.target.value
    if effect.target_actor_ids:
        data["targetStudentIds"] = list(effect.target_actor_ids)
    return data


def _stats_to_wire(stats: StatBlock) -> dict[str, float]:
    return {"atk": stats.atk, "crit": stats.crit, "critDmg": stats.crit_dmg}


def _target_to_wire(override: TargetOverride) -> dict[str, Any]:
    data: dict[str, Any] = {"target": override.target.value}
    if override.target_actor_ids:
        data["targetStudentIds"] = list(override.target_actor_ids)
    return data


def _actor_to_wire(actor: Actor) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": actor.id,
        "name": actor.name,
        "stats": _stats_to_wire(actor.stats),
        "normal": {"hitRate": actor.normal.hit_rate, "multiplier": actor.normal.multiplier},
        "ex": [
            {"id": s.id, "name": s.name, "buffs": [_effect_to_wire(e) for e in s.effects]}
            for s in actor.instant_skills
        ],
    }
    ns = actor.persistent_skill
    if ns is not None:
        data["ns"] = {
            "id": ns.id,
            "name": ns.name,
            "stackGroup": ns.stack_group,
            "buffs": [_effect_to_wire(e) for e in ns.effects],
        }
    return data


def _event_to_wire(event: CastEvent) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": event.id,
        "studentId": event.actor_id,
        "skillType": event.skill_kind.value,
        "skillId": event.skill_id,
        "start": event.start,
        # Explicit null keeps "deferred duration" distinct from a legacy
        # event that never had the key.
        "duration": event.duration,
        "target": event.target.value,
    }
    if event.target_actor_ids:
        data["targetStudentIds"] = list(event.target_actor_ids)
    if event.effect_targets:
        data["buffTargets"] = {
            effect_id: _target_to_wire(o) for effect_id, o in event.effect_targets.items()
        }
    return data


def encode_snapshot(state: TimelineState) -> str:
    """Serialize ``state`` into an opaque URL-safe token.

    Args:
        state: State to serialize.

    Returns:
        Unpadded URL-safe base64 token.
    """
    payload = {
        "version": SNAPSHOT_VERSION,
        "students": [_actor_to_wire(a) for a in state.actors],
        "events": [_event_to_wire(e) for e in state.events],
        "nsEnabled": dict(state.ns_enabled),
        "nsTargets": {k: _target_to_wire(v) for k, v in state.ns_targets.items()},
        "timelineSeconds": state.config.length_s,
        "timeStep": state.config.resolution_s,
        "enemy": {
            "id": state.enemy.id,
            "name": state.enemy.name,
            "stats": _stats_to_wire(state.enemy.stats),
        },
    }
    return _b64url_encode(json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _effect_from_wire(wire: _WireEffect) -> EffectDefinition:
    return EffectDefinition(
        id=wire.id,
        name=wire.name,
        kind=wire.kind,
        stat=wire.stat,
        magnitude=wire.value,
        duration=wire.duration,
        stack_group=wire.stack_group,
        target=wire.target,
        target_actor_ids=tuple(wire.target_student_ids or ()),
    )


def _stats_from_wire(wire: _WireStats) -> StatBlock:
    return StatBlock(atk=wire.atk, crit=wire.crit, crit_dmg=wire.crit_dmg)


def _actor_from_wire(wire: _WireStudent) -> Actor:
    ns = None
    if wire.ns is not None:
        ns = PersistentSkill(
            id=wire.ns.id,
            name=wire.ns.name,
            stack_group=wire.ns.stack_group,
            effects=tuple(_effect_from_wire(e) for e in wire.ns.buffs),
        )
    return Actor(
        id=wire.id,
        name=wire.name,
        stats=_stats_from_wire(wire.stats),
        normal=NormalAttack(hit_rate=wire.normal.hit_rate, multiplier=wire.normal.multiplier),
        instant_skills=tuple(
            InstantSkill(
                id=s.id,
                name=s.name,
                effects=tuple(_effect_from_wire(e) for e in s.buffs),
            )
            for s in wire.ex
        ),
        persistent_skill=ns,
    )


def _coerce_mode(value: Any) -> TargetMode:
    try:
        return TargetMode(value)
    except ValueError:
        return TargetMode.SELF


def _coerce_ids(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(v for v in value if isinstance(v, str) and v)


def _coerce_override(value: Any) -> TargetOverride | None:
    if not isinstance(value, dict):
        return None
    return TargetOverride(
        target=_coerce_mode(value.get("target")),
        target_actor_ids=_coerce_ids(value.get("targetStudentIds")),
    )


def _infer_skill_kind(raw: dict[str, Any]) -> SkillKind | None:
    tag = raw.get("skillType")
    if tag is None:
        # Legacy events predate ns skills.
        return SkillKind.INSTANT
    try:
        return SkillKind(tag)
    except ValueError:
        return None


def normalize_event(
    raw: Any,
    actors: dict[str, Actor],
    resolution_s: float,
    fallback_duration_s: float = DEFAULT_CAST_DURATION_S,
) -> CastEvent | None:
    """Best-effort conversion of one wire event.

    Args:
        raw: Decoded JSON value for one event.
        actors: Student actors by id.
        resolution_s: Grid used for the default cast duration.
        fallback_duration_s: Cast duration for legacy events whose skill
            has no positive effect duration.

    Returns:
        A CastEvent, or None when the event cannot be salvaged.
    """
    if not isinstance(raw, dict):
        return None
    event_id = raw.get("id")
    actor_id = raw.get("studentId")
    start = raw.get("start")
    skill_id = raw.get("skillId") or raw.get("exId")
    if not all(isinstance(v, str) and v for v in (event_id, actor_id, skill_id)):
        return None
    if isinstance(start, bool) or not isinstance(start, int | float):
        return None

    actor = actors.get(actor_id)
    if actor is None:
        return None
    skill_kind = _infer_skill_kind(raw)
    if skill_kind is None:
        return None
    skill = actor.find_skill(skill_kind, skill_id)
    if skill is None:
        return None

    target = _coerce_mode(raw.get("target"))
    target_ids = _coerce_ids(raw.get("targetStudentIds"))
    if target is TargetMode.STUDENT and not target_ids:
        target_ids = (actor_id,)

    duration: float | None
    if "duration" not in raw:
        duration = default_cast_duration(skill, resolution_s, fallback_duration_s)
    elif isinstance(raw["duration"], int | float) and not isinstance(raw["duration"], bool):
        duration = float(raw["duration"])
    else:
        duration = None

    effect_targets: dict[str, TargetOverride] = {}
    raw_overrides = raw.get("buffTargets")
    if isinstance(raw_overrides, dict):
        for effect_id, value in raw_overrides.items():
            override = _coerce_override(value)
            if override is not None:
                effect_targets[effect_id] = override

    return CastEvent(
        id=event_id,
        actor_id=actor_id,
        skill_kind=skill_kind,
        skill_id=skill_id,
        start=max(0.0, float(start)),
        duration=duration,
        target=target,
        target_actor_ids=target_ids,
        effect_targets=effect_targets,
    )


def decode_snapshot(token: str, config: AppConfig | None = None) -> TimelineState:
    """Turn a token back into a TimelineState.

    Args:
        token: Token from :func:`encode_snapshot` (or the web editor).
        config: Supplies timeline and enemy defaults for absent fields.

    Returns:
        The decoded state, with events normalized and clamped.

    Raises:
        SnapshotDecodeError: If the token is malformed or incomplete.
    """
    config = config or AppConfig()

    try:
        text = _b64url_decode(token.strip())
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise SnapshotDecodeError(f"not a base64url token: {e}") from e

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotDecodeError(f"invalid JSON: {e}") from e

    if not isinstance(payload, dict) or "students" not in payload:
        raise SnapshotDecodeError("missing 'students'")

    try:
        wire = _WireSnapshot.model_validate(payload)
        actors = tuple(_actor_from_wire(s) for s in wire.students)

        length = clamp(
            wire.timeline_seconds
            if wire.timeline_seconds is not None
            else config.timeline.length_s,
            MIN_TIMELINE_LENGTH_S,
            MAX_TIMELINE_LENGTH_S,
        )
        step = clamp(
            wire.time_step if wire.time_step is not None else config.timeline.resolution_s,
            MIN_TIME_RESOLUTION_S,
            MAX_TIME_RESOLUTION_S,
        )

        if wire.enemy is not None:
            enemy = make_enemy(
                name=wire.enemy.name,
                atk=wire.enemy.stats.atk,
                crit=wire.enemy.stats.crit,
                crit_dmg=wire.enemy.stats.crit_dmg,
            )
        else:
            defaults = config.enemy
            enemy = make_enemy(defaults.name, defaults.atk, defaults.crit, defaults.crit_dmg)

        by_id = {a.id: a for a in actors}
        fallback = config.timeline.default_cast_duration_s
        events = [normalize_event(raw, by_id, step, fallback) for raw in wire.events]
        kept = [e for e in events if e is not None]
        if len(kept) < len(events):
            logger.info("Dropped %d unusable events from snapshot", len(events) - len(kept))

        ns_targets = {
            k: TargetOverride(
                target=_coerce_mode(v.target),
                target_actor_ids=tuple(v.target_student_ids or ()),
            )
            for k, v in (wire.ns_targets or {}).items()
        }

        return TimelineState(
            actors=actors,
            enemy=enemy,
            events=clamp_events_to_timeline(kept, length, step),
            config=TimelineConfig(length_s=length, resolution_s=step),
            ns_enabled=wire.ns_enabled,
            ns_targets=ns_targets,
        )
    except ValidationError as e:
        raise SnapshotDecodeError(f"invalid snapshot content: {e.error_count()} errors") from e


def load_snapshot(
    token: str,
    current: TimelineState | None = None,
    config: AppConfig | None = None,
) -> SnapshotLoadResult:
    """Decode a token, failing closed.

    On failure the result carries ``ok=False`` and the untouched
    ``current`` state; nothing is partially applied.
    """
    try:
        state = decode_snapshot(token, config)
    except SnapshotDecodeError as e:
        logger.warning("Snapshot load failed: %s", e.reason)
        return SnapshotLoadResult(ok=False, state=current, error=e.reason)
    return SnapshotLoadResult(ok=True, state=state)


__all__ = [
    "SNAPSHOT_VERSION",
    "SnapshotDecodeError",
    "SnapshotLoadResult",
    "decode_snapshot",
    "encode_snapshot",
    "load_snapshot",
    "normalize_event",
]
