"""Unit tests for TargetResolver - cast event + effect -> target actor ids."""

from __future__ import annotations

import pytest

from castline.core.timeline.engine.target_resolver import TargetResolver
from castline.core.timeline.models import CastEvent, EffectDefinition, TargetOverride
from castline.core.timeline.vocabulary import ENEMY_ID, TargetMode

STUDENTS = ["alice", "bob", "carol"]


def _make_resolver() -> TargetResolver:
    return TargetResolver(STUDENTS, ENEMY_ID)


def _make_event(
    target: TargetMode = TargetMode.SELF,
    ids: tuple[str, ...] = (),
    overrides: dict[str, TargetOverride] | None = None,
) -> CastEvent:
    return CastEvent(
        id="evt",
        actor_id="alice",
        skill_id="ex",
        start=0,
        duration=1,
        target=target,
        target_actor_ids=ids,
        effect_targets=overrides or {},
    )


def _make_effect(
    target: TargetMode | None = None, ids: tuple[str, ...] = ()
) -> EffectDefinition:
    return EffectDefinition(id="fx", magnitude=0.1, duration=1, target=target, target_actor_ids=ids)


class TestTargetModes:
    """Each mode resolved from the event level."""

    def test_self_targets_caster(self) -> None:
        assert _make_resolver().resolve(_make_event(), _make_effect()) == ["alice"]

    def test_all_targets_every_student_but_not_enemy(self) -> None:
        targets = _make_resolver().resolve(_make_event(TargetMode.ALL), _make_effect())
        assert targets == STUDENTS
        assert ENEMY_ID not in targets

    def test_student_uses_explicit_list(self) -> None:
        event = _make_event(TargetMode.STUDENT, ("bob", "carol"))
        assert _make_resolver().resolve(event, _make_effect()) == ["bob", "carol"]

    def test_student_empty_list_falls_back_to_caster(self) -> None:
        event = _make_event(TargetMode.STUDENT)
        assert _make_resolver().resolve(event, _make_effect()) == ["alice"]

    def test_enemy_ignores_explicit_student_list(self) -> None:
        """ENEMY mode targets the enemy alone, whatever ids are listed."""
        event = _make_event(TargetMode.STUDENT, ("bob", "carol"))
        effect = _make_effect(TargetMode.ENEMY)
        assert _make_resolver().resolve(event, effect) == [ENEMY_ID]

    def test_enemy_at_event_level(self) -> None:
        event = _make_event(TargetMode.ENEMY, ("bob",))
        assert _make_resolver().resolve(event, _make_effect()) == [ENEMY_ID]


class TestPrecedence:
    """Per-event override > effect default > event mode."""

    def test_effect_default_beats_event_mode(self) -> None:
        event = _make_event(TargetMode.ALL)
        effect = _make_effect(TargetMode.SELF)
        assert _make_resolver().resolve(event, effect) == ["alice"]

    def test_event_override_beats_effect_default(self) -> None:
        event = _make_event(
            TargetMode.SELF,
            overrides={"fx": TargetOverride(target=TargetMode.ALL)},
        )
        effect = _make_effect(TargetMode.ENEMY)
        assert _make_resolver().resolve(event, effect) == STUDENTS

    def test_override_for_other_effect_is_ignored(self) -> None:
        event = _make_event(
            TargetMode.SELF,
            overrides={"other": TargetOverride(target=TargetMode.ENEMY)},
        )
        assert _make_resolver().resolve(event, _make_effect()) == ["alice"]

    @pytest.mark.parametrize(
        ("override", "effect_target", "event_target", "expected"),
        [
            (TargetMode.ENEMY, TargetMode.ALL, TargetMode.SELF, TargetMode.ENEMY),
            (None, TargetMode.ALL, TargetMode.SELF, TargetMode.ALL),
            (None, None, TargetMode.STUDENT, TargetMode.STUDENT),
        ],
    )
    def test_resolve_mode(
        self,
        override: TargetMode | None,
        effect_target: TargetMode | None,
        event_target: TargetMode,
        expected: TargetMode,
    ) -> None:
        overrides = {"fx": TargetOverride(target=override)} if override else {}
        event = _make_event(event_target, overrides=overrides)
        effect = _make_effect(effect_target)
        assert _make_resolver().resolve_mode(event, effect) is expected


class TestStudentFallbackChain:
    """STUDENT ids: override ids -> effect ids -> event ids -> caster."""

    def test_override_ids_first(self) -> None:
        event = _make_event(
            TargetMode.STUDENT,
            ("carol",),
            overrides={"fx": TargetOverride(target=TargetMode.STUDENT, target_actor_ids=("bob",))},
        )
        effect = _make_effect(ids=("alice",))
        assert _make_resolver().resolve(event, effect) == ["bob"]

    def test_empty_override_ids_fall_to_effect_ids(self) -> None:
        event = _make_event(
            TargetMode.SELF,
            ("carol",),
            overrides={"fx": TargetOverride(target=TargetMode.STUDENT)},
        )
        effect = _make_effect(ids=("bob",))
        assert _make_resolver().resolve(event, effect) == ["bob"]

    def test_empty_override_and_effect_ids_fall_to_event_ids(self) -> None:
        event = _make_event(
            TargetMode.SELF,
            ("carol",),
            overrides={"fx": TargetOverride(target=TargetMode.STUDENT)},
        )
        assert _make_resolver().resolve(event, _make_effect()) == ["carol"]

    def test_effect_level_student_uses_effect_ids(self) -> None:
        event = _make_event(TargetMode.SELF, ("carol",))
        effect = _make_effect(TargetMode.STUDENT, ("bob",))
        assert _make_resolver().resolve(event, effect) == ["bob"]

    def test_everything_empty_falls_back_to_caster(self) -> None:
        event = _make_event(
            TargetMode.SELF,
            overrides={"fx": TargetOverride(target=TargetMode.STUDENT)},
        )
        assert _make_resolver().resolve(event, _make_effect()) == ["alice"]


class TestFiltering:
    """Unknown ids are dropped, duplicates collapsed."""

    def test_unknown_ids_are_filtered(self) -> None:
        event = _make_event(TargetMode.STUDENT, ("ghost", "bob"))
        assert _make_resolver().resolve(event, _make_effect()) == ["bob"]

    def test_all_unknown_falls_back_to_caster(self) -> None:
        event = _make_event(TargetMode.STUDENT, ("ghost", "phantom"))
        assert _make_resolver().resolve(event, _make_effect()) == ["alice"]

    def test_duplicates_collapse_in_order(self) -> None:
        event = _make_event(TargetMode.STUDENT, ("carol", "bob", "carol"))
        assert _make_resolver().resolve(event, _make_effect()) == ["carol", "bob"]

    def test_enemy_id_allowed_in_explicit_list(self) -> None:
        event = _make_event(TargetMode.STUDENT, ("bob", ENEMY_ID))
        assert _make_resolver().resolve(event, _make_effect()) == ["bob", ENEMY_ID]
