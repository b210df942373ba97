"""
Unit tests for IndividualState, ComputedState and replay-based evolution.
"""

from datetime import datetime, timedelta

import numpy as np
import pytest

from eventsim.catalog import EventType
from eventsim.dimensions import DIMENSION_PROFILES, Category, Dimension
from eventsim.entity import Entity
from eventsim.evolution import (
    advance_state,
    apply_interpreted_event_to_state,
    birth_cursor,
    compute_state,
    regress_state,
    replay_timeline,
    reverse_interpreted_event_from_state,
)
from eventsim.interpreter import interpret_event
from eventsim.spec import EventSpec
from eventsim.state import ComputedState, IndividualState

T0 = datetime(1970, 1, 1)


# --- IndividualState ---

class TestIndividualState:
    def test_birth_defaults(self, person):
        """Every dimension starts at its profile default with no delta."""
        state = IndividualState.at_birth(person)
        for dim, value in state:
            assert value.base == DIMENSION_PROFILES[dim].birth_default
            assert value.delta == 0.0
        assert state[Dimension.STRESS].base == 0.2
        assert state[Dimension.PRC].base == 0.6

    def test_bounds_per_dimension(self, person):
        """Mood is bipolar, everything else unipolar."""
        state = IndividualState.at_birth(person)
        assert state[Dimension.VALENCE].bounds == (-1.0, 1.0)
        assert state[Dimension.STRESS].bounds == (0.0, 1.0)

    def test_baseline_overrides(self, birth_date):
        """Entity baselines replace birth defaults."""
        entity = Entity(id="calm", birth_date=birth_date, baselines={Dimension.STRESS: 0.05})
        assert IndividualState.at_birth(entity)[Dimension.STRESS].base == 0.05

    def test_missing_dimension_rejected(self, person):
        values = dict(IndividualState.at_birth(person))
        del values[Dimension.EMPATHY]
        with pytest.raises(ValueError):
            IndividualState(values)

    def test_copy_is_independent(self, person):
        state = IndividualState.at_birth(person)
        clone = state.copy()
        clone[Dimension.VALENCE].add_delta(0.5)
        assert state[Dimension.VALENCE].delta == 0.0
        assert state != clone

    def test_lookup_by_string(self, person):
        state = IndividualState.at_birth(person)
        assert state["purpose"] is state[Dimension.PURPOSE]


# --- Forward evolution ---

class TestAdvanceState:
    def test_each_dimension_uses_its_half_life(self, person):
        """Six hours halves mood deltas; fatigue needs eight."""
        state = IndividualState.at_birth(person)
        state[Dimension.VALENCE].add_delta(0.4)
        state[Dimension.FATIGUE].add_delta(0.4)

        advance_state(state, T0, T0 + timedelta(hours=6))
        assert abs(state[Dimension.VALENCE].delta - 0.2) < 1e-12
        assert 0.2 < state[Dimension.FATIGUE].delta < 0.4

    def test_bases_untouched(self, person):
        state = IndividualState.at_birth(person)
        state[Dimension.STRESS].add_delta(0.3)
        advance_state(state, T0, T0 + timedelta(days=30))
        assert state[Dimension.STRESS].base == 0.2

    def test_backwards_raises(self, person):
        state = IndividualState.at_birth(person)
        with pytest.raises(ValueError):
            advance_state(state, T0, T0 - timedelta(seconds=1))

    def test_zero_elapsed_is_noop(self, person):
        state = IndividualState.at_birth(person)
        state[Dimension.AROUSAL].add_delta(0.3)
        advance_state(state, T0, T0)
        assert state[Dimension.AROUSAL].delta == 0.3


class TestApplyReverse:
    def test_round_trip_without_decay(self, person):
        """Reversing immediately restores bases and deltas."""
        spec = EventSpec.custom(
            impact={"valence": -0.4, "stress": 0.3},
            chronic={"stress": True},
            permanence={"valence": 0.1},
        )
        interpreted = interpret_event(spec, 0.5, T0)
        state = IndividualState.at_birth(person)
        original = state.copy()

        apply_interpreted_event_to_state(state, interpreted)
        assert abs(state[Dimension.VALENCE].delta - (-0.2)) < 1e-12
        assert abs(state[Dimension.STRESS].base - (0.2 + 0.15)) < 1e-12

        reverse_interpreted_event_from_state(state, interpreted)
        assert np.allclose(state.bases(), original.bases(), atol=1e-12)
        assert np.allclose(state.deltas(), original.deltas(), atol=1e-12)


# --- ComputedState ---

class TestComputedState:
    def test_category_accessors(self, person):
        state = IndividualState.at_birth(person)
        state[Dimension.VALENCE].add_delta(-0.3)
        computed = ComputedState(person.id, T0, state)

        assert abs(computed.mood().valence_effective() - (-0.3)) < 1e-12
        assert computed.needs().stress_effective() == 0.2
        assert computed.social_cognition().prc_effective() == 0.6
        assert computed.mental_health().self_worth_effective() == 0.6
        assert computed.disposition().reactance_effective() == 0.3
        assert computed.mood().delta(Dimension.VALENCE) == -0.3
        assert computed.mood().base(Dimension.VALENCE) == 0.0

    def test_priming_added_and_clamped(self, person):
        """Priming shifts effective mood but never past the bounds."""
        state = IndividualState.at_birth(person)
        computed = ComputedState(person.id, T0, state, priming={Dimension.VALENCE: -5.0, Dimension.AROUSAL: 0.1})
        assert computed.effective(Dimension.VALENCE) == -1.0
        assert abs(computed.effective(Dimension.AROUSAL) - 0.1) < 1e-12
        assert computed.state[Dimension.VALENCE].delta == 0.0

    def test_as_dict_groups_by_category(self, person):
        computed = ComputedState(person.id, T0, IndividualState.at_birth(person))
        grouped = computed.as_dict()
        assert set(grouped) == {c.value for c in Category}
        assert set(grouped["mood"]) == {"valence", "arousal", "dominance"}
        assert len(computed.effective_array()) == len(Dimension)


# --- Replay ---

@pytest.fixture
def logged_sim(sim, person, make_event):
    """Reference at 18 with events at 19 and 20."""
    sim.add_event(make_event(EventType.EXPERIENCE_COMBAT_MILITARY, severity=0.9), person.timestamp_at_age(19))
    sim.add_event(make_event(EventType.LOSE_PERSON_DEATH, severity=0.7), person.timestamp_at_age(20))
    return sim


class TestReplay:
    def test_birth_cursor(self, person):
        cursor = birth_cursor(person)
        assert cursor.cursor_time == person.birth_date
        assert cursor.folded == 0
        assert cursor.memories == []

    def test_replay_folds_prefix(self, logged_sim, person):
        entries = logged_sim.timeline(person.id).entries
        cursor = replay_timeline(person, entries, person.timestamp_at_age(19.5))
        assert cursor.folded == 1
        assert cursor.cursor_time == person.timestamp_at_age(19)
        assert len(cursor.memories) == 1

    def test_start_cursor_continuation(self, logged_sim, person):
        """Continuing from a partial cursor matches a replay from birth."""
        entries = logged_sim.timeline(person.id).entries
        partial = replay_timeline(person, entries, person.timestamp_at_age(19.5))
        continued = replay_timeline(person, entries, person.timestamp_at_age(30), start=partial)
        direct = replay_timeline(person, entries, person.timestamp_at_age(30))

        assert continued.folded == direct.folded == 2
        assert continued.state == direct.state
        assert partial.folded == 1

    def test_compute_state_before_birth(self, logged_sim, person):
        """Queries before birth return birth defaults."""
        entries = logged_sim.timeline(person.id).entries
        cursor = replay_timeline(person, entries, person.timestamp_at_age(40))
        before = person.birth_date - timedelta(days=1)
        computed = compute_state(person, cursor, before)
        assert computed.state == IndividualState.at_birth(person)
        assert computed.memories == ()

    def test_regress_matches_simulation(self, logged_sim, person):
        """Regression from a later reference equals a forward query."""
        entries = logged_sim.timeline(person.id).entries
        target = person.timestamp_at_age(30)
        regressed = regress_state(person, entries, person.timestamp_at_age(40), target)
        forward = logged_sim.state_at(person.id, target)
        assert np.array_equal(regressed.effective_array(), forward.effective_array())

    def test_regress_rejects_later_target(self, logged_sim, person):
        entries = logged_sim.timeline(person.id).entries
        with pytest.raises(ValueError):
            regress_state(person, entries, person.timestamp_at_age(30), person.timestamp_at_age(40))
