"""
Unit tests for dimensions, EventSpec records and the built-in catalog.
"""

import pytest
from pydantic import ValidationError

from eventsim.catalog import EventSpecRegistry, EventType, get_spec
from eventsim.dimensions import DIMENSION_COUNT, Category, Dimension, dimensions_in, to_array
from eventsim.exceptions import MalformedSpecError, UnknownEventTypeError
from eventsim.spec import ChronicFlags, EventImpact, EventSpec, PermanenceValues


class TestDimensions:
    def test_twenty_two_dimensions(self):
        """Exactly 22 dimensions in canonical order."""
        assert len(list(Dimension)) == DIMENSION_COUNT == 22
        assert Dimension.VALENCE.index == 0
        assert Dimension.ACQUIRED_CAPABILITY.index == 15
        assert Dimension.TRUST_PROPENSITY.index == 21

    def test_categories_partition_dimensions(self):
        """Every dimension belongs to exactly one category."""
        sizes = {category: len(dimensions_in(category)) for category in Category}
        assert sizes == {
            Category.MOOD: 3,
            Category.NEEDS: 3,
            Category.SOCIAL_COGNITION: 5,
            Category.MENTAL_HEALTH: 5,
            Category.DISPOSITION: 6,
        }

    def test_mood_is_bipolar(self):
        """Mood dimensions range over [-1, 1], the rest over [0, 1]."""
        assert Dimension.VALENCE.profile.bounds == (-1.0, 1.0)
        assert Dimension.LONELINESS.profile.bounds == (0.0, 1.0)

    def test_birth_defaults_within_bounds(self):
        """Every birth default lies inside its dimension's bounds."""
        for dim in Dimension:
            profile = dim.profile
            assert profile.lo <= profile.birth_default <= profile.hi

    def test_to_array_places_values_by_dimension(self):
        """Partial mappings fill the right slots and leave zeros elsewhere."""
        arr = to_array({Dimension.STRESS: 0.4, "trust_propensity": -0.2})
        assert arr[Dimension.STRESS.index] == 0.4
        assert arr[21] == -0.2
        assert arr.sum() == pytest.approx(0.2)


class TestEventSpecRecords:
    @pytest.mark.parametrize("record", [EventImpact, ChronicFlags, PermanenceValues])
    def test_fields_follow_dimension_order(self, record):
        """Record fields are exactly the dimensions, in canonical order."""
        assert list(record.model_fields) == [d.value for d in Dimension]

    def test_impact_out_of_range_rejected(self):
        """Impacts outside [-1, 1] fail validation."""
        with pytest.raises(ValidationError):
            EventImpact(valence=1.5)

    def test_permanence_out_of_range_rejected(self):
        """Permanence must be a fraction."""
        with pytest.raises(ValidationError):
            PermanenceValues(stress=-0.1)

    def test_nan_impact_rejected(self):
        """NaN impacts fail validation."""
        with pytest.raises(ValidationError):
            EventImpact(arousal=float("nan"))

    def test_unknown_field_rejected(self):
        """Misspelled dimensions are not silently ignored."""
        with pytest.raises(ValidationError):
            ChronicFlags(lonelyness=True)

    def test_records_are_frozen(self):
        """Specs are immutable once built."""
        spec = get_spec(EventType.EXPERIENCE_COMBAT_MILITARY)
        with pytest.raises(ValidationError):
            spec.impact.valence = 0.0

    def test_custom_spec_from_partial_mapping(self):
        """Missing dimensions default to zero / False."""
        spec = EventSpec.custom(
            impact={Dimension.STRESS: 0.5, "valence": -0.2},
            chronic={"stress": True},
            permanence={"stress": 0.1},
        )
        assert spec.impact.stress == 0.5
        assert spec.impact.loneliness == 0.0
        assert spec.chronic.stress is True
        assert spec.chronic.valence is False
        assert spec.permanence.stress == 0.1

    def test_custom_spec_malformed_value(self):
        """Out-of-range custom impacts raise MalformedSpecError."""
        with pytest.raises(MalformedSpecError):
            EventSpec.custom(impact={"valence": -2.0})

    def test_custom_spec_unknown_dimension(self):
        """Unknown dimension names raise MalformedSpecError."""
        with pytest.raises(MalformedSpecError):
            EventSpec.custom(impact={"happiness": 0.5})

    def test_as_array_canonical_order(self):
        """as_array follows Dimension order."""
        impact = get_spec(EventType.EXPERIENCE_COMBAT_MILITARY).impact.as_array()
        assert impact.shape == (22,)
        assert impact[0] == -0.75
        assert impact[Dimension.ACQUIRED_CAPABILITY.index] == 0.85
        assert impact[21] == -0.35

    def test_from_sequence_requires_22_values(self):
        """Sequences of the wrong length are rejected."""
        with pytest.raises(ValueError):
            EventImpact.from_sequence([0.1] * 21)


class TestCatalog:
    def test_all_event_types_registered(self):
        """Every EventType has a spec."""
        assert set(EventSpecRegistry.registered_types()) == set(EventType)

    def test_acquired_capability_always_permanent(self):
        """Built-ins never flag AC chronic and always make it fully permanent."""
        for event_type in EventType:
            spec = get_spec(event_type)
            assert spec.chronic.acquired_capability is False
            assert spec.permanence.acquired_capability == 1.0

    def test_combat_chronic_flags(self):
        """Combat is chronic everywhere except perceived competence."""
        spec = get_spec(EventType.EXPERIENCE_COMBAT_MILITARY)
        assert spec.chronic.valence is True
        assert spec.chronic.trust_propensity is True
        assert spec.chronic.perceived_competence is False

    def test_lookup_by_value(self):
        """Lookup accepts the string value of an event type."""
        assert get_spec("lose_person_death") is get_spec(EventType.LOSE_PERSON_DEATH)

    def test_unknown_event_type(self):
        """Unregistered event types raise UnknownEventTypeError."""
        with pytest.raises(UnknownEventTypeError):
            get_spec("win_lottery")

    def test_display_name(self):
        """Event type names render as sentences."""
        assert EventType.END_RELATIONSHIP_ROMANTIC.display_name == "End relationship romantic"
