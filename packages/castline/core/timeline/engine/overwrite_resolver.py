"""Overwrite resolution: at most one live instance per modifier slot.

Instances sharing a ``ModifierSlot`` (target, stat, stack group, kind)
compete.  TRIM policy: when a later instance starts before the previous
one ends, the previous one is cut at the later start, so the newest cast
always wins the overlap.  Instances in different stack groups are left
alone and later sum during aggregation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from castline.core.timeline.models.effect_instance import EffectInstance, ModifierSlot

logger = logging.getLogger(__name__)


def _sweep_key(instance: EffectInstance) -> tuple[float, str]:
    return (instance.start, instance.id)


def group_by_slot(
    instances: Iterable[EffectInstance],
) -> dict[ModifierSlot, list[EffectInstance]]:
    """Partition instances by modifier slot, preserving input order."""
    grouped: dict[ModifierSlot, list[EffectInstance]] = {}
    for instance in instances:
        grouped.setdefault(instance.slot, []).append(instance)
    return grouped


def trim_slot(instances: Iterable[EffectInstance]) -> list[EffectInstance]:
    """Resolve overlaps inside a single modifier slot.

    Args:
        instances: Instances that all share one slot, in any order.

    Returns:
        Non-empty, pairwise non-overlapping instances ordered by start.
    """
    trimmed: list[EffectInstance] = []

    for instance in sorted(instances, key=_sweep_key):
        if trimmed and instance.start < trimmed[-1].end:
            previous = trimmed[-1]
            # Frozen model, must copy
            cut = previous.model_copy(update={"end": instance.start})
            if cut.is_empty:
                logger.debug("Instance %s fully overwritten by %s", previous.id, instance.id)
                trimmed.pop()
            else:
                trimmed[-1] = cut
        trimmed.append(instance)

    return [i for i in trimmed if not i.is_empty]


def resolve_overwrites(instances: Iterable[EffectInstance]) -> list[EffectInstance]:
    """Enforce the one-live-instance-per-slot rule over all instances.

    The result does not depend on input order: ties on start time are
    broken by instance id, and the output is sorted by (start, id).

    Args:
        instances: Raw instances from the expander.

    Returns:
        Resolved instances; running this again on them is a no-op.
    """
    resolved: list[EffectInstance] = []
    for slot_instances in group_by_slot(instances).values():
        resolved.extend(trim_slot(slot_instances))
    resolved.sort(key=_sweep_key)
    return resolved


__all__ = [
    "group_by_slot",
    "resolve_overwrites",
    "trim_slot",
]
