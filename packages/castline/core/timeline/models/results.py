"""Engine output models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from castline.core.timeline.models.effect_instance import EffectInstance
from castline.core.timeline.vocabulary import Stat


class EngineDiagnostic(BaseModel):
    """Diagnostic message from a recomputation pass.

    Attributes:
        level: Severity level (info, warning).
        message: Human-readable diagnostic message.
        event_id: Cast event that produced this diagnostic.
        effect_id: Effect definition that produced this diagnostic.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: str = Field(description="Severity: info, warning")
    message: str = Field(description="Diagnostic message")
    event_id: str | None = Field(default=None)
    effect_id: str | None = Field(default=None)


class LaneAssignment(BaseModel):
    """Display rows for one target's instances.

    Attributes:
        target_id: Actor the lanes belong to.
        lanes: Instance id -> lane index.
        lane_count: Number of rows to reserve (at least 1).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_id: str
    lanes: dict[str, int] = Field(default_factory=dict)
    lane_count: int = Field(default=1, ge=1)

    def lane_of(self, instance_id: str) -> int | None:
        return self.lanes.get(instance_id)


class StatSnapshot(BaseModel):
    """Point-in-time stat query result.

    Attributes:
        target_id: Queried actor.
        time: Query time in seconds.
        active: Instances with ``start <= time < end``.
        applied: Active instances that survived per-stack-key selection.
        totals: Net fractional modifier per stat.
        computed: ``base * (1 + total)`` per stat.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_id: str
    time: float
    active: tuple[EffectInstance, ...] = ()
    applied: tuple[EffectInstance, ...] = ()
    totals: dict[Stat, float] = Field(default_factory=dict)
    computed: dict[Stat, float] = Field(default_factory=dict)


class ResolutionResult(BaseModel):
    """Output of one full recomputation pass.

    Attributes:
        instances: Resolved instances (slot-wise non-overlapping).
        lanes: Lane assignment per target id.
        diagnostics: Warnings and notes from the pass.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    instances: tuple[EffectInstance, ...] = ()
    lanes: dict[str, LaneAssignment] = Field(default_factory=dict)
    diagnostics: tuple[EngineDiagnostic, ...] = ()

    def find_instance(self, instance_id: str) -> EffectInstance | None:
        """Reverse lookup from a rendered instance id."""
        return next((i for i in self.instances if i.id == instance_id), None)

    def instances_for_event(self, event_id: str) -> list[EffectInstance]:
        """All resolved instances produced by one cast event."""
        return [i for i in self.instances if i.event_id == event_id]

    def instances_for_target(self, target_id: str) -> list[EffectInstance]:
        """All resolved instances applied to one actor."""
        return [i for i in self.instances if i.target_id == target_id]

    @property
    def warnings(self) -> list[EngineDiagnostic]:
        return [d for d in self.diagnostics if d.level == "warning"]


__all__ = [
    "EngineDiagnostic",
    "LaneAssignment",
    "ResolutionResult",
    "StatSnapshot",
]
