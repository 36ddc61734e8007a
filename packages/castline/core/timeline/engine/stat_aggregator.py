"""Stat aggregator: an actor's effective stats at one instant.

Active instances (``start <= t < end``) for the actor are grouped by
(stat, stack group, kind), ignoring the source actor, and only the
latest-starting member of each group applies.  Buffs add their
magnitude to the stat's fraction, debuffs subtract it, attacks add
nothing.  Computed stat = ``base * (1 + fraction)``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from castline.core.timeline.models.actor import Actor
from castline.core.timeline.models.effect_instance import EffectInstance, StackKey
from castline.core.timeline.models.results import StatSnapshot
from castline.core.timeline.vocabulary import EffectKind, Stat

logger = logging.getLogger(__name__)

_SIGN: dict[EffectKind, float] = {
    EffectKind.BUFF: 1.0,
    EffectKind.DEBUFF: -1.0,
    EffectKind.ATTACK: 0.0,
}


def active_instances(
    target_id: str, time: float, instances: Iterable[EffectInstance]
) -> list[EffectInstance]:
    """Instances applied to ``target_id`` whose interval contains ``time``."""
    return [i for i in instances if i.target_id == target_id and i.is_active_at(time)]


def select_latest_per_stack(instances: Iterable[EffectInstance]) -> list[EffectInstance]:
    """Keep the latest-starting instance per stack key.

    Ties on start are broken by the larger instance id.
    """
    chosen: dict[StackKey, EffectInstance] = {}
    for instance in instances:
        key = instance.stack_key
        current = chosen.get(key)
        if current is None or (instance.start, instance.id) > (current.start, current.id):
            chosen[key] = instance
    return sorted(chosen.values(), key=lambda i: (i.start, i.id))


def compute_stats_at(
    target: Actor, time: float, instances: Iterable[EffectInstance]
) -> StatSnapshot:
    """Answer a point-in-time stat query for one actor.

    Args:
        target: Student or enemy whose stats are queried.
        time: Query time in seconds.
        instances: Resolved instances (any targets; filtered here).

    Returns:
        Active instances, applied instances, per-stat fractions and
        computed stats.
    """
    active = active_instances(target.id, time, instances)
    applied = select_latest_per_stack(active)

    totals: dict[Stat, float] = {stat: 0.0 for stat in Stat}
    for instance in applied:
        totals[instance.stat] += instance.magnitude * _SIGN[instance.kind]

    computed = {stat: target.stats.get(stat) * (1 + totals[stat]) for stat in Stat}

    if len(applied) < len(active):
        logger.debug(
            "Stat query %s@%s: %d active, %d applied after stack selection",
            target.id,
            time,
            len(active),
            len(applied),
        )

    return StatSnapshot(
        target_id=target.id,
        time=time,
        active=tuple(active),
        applied=tuple(applied),
        totals=totals,
        computed=computed,
    )


__all__ = [
    "active_instances",
    "compute_stats_at",
    "select_latest_per_stack",
]
