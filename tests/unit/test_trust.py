"""
Unit tests for perceived risk, trust antecedents and the relationship graph.
"""

from datetime import datetime, timedelta

import pytest

from eventsim.catalog import EventType, get_spec
from eventsim.config import TrustConfig
from eventsim.spec import EventSpec
from eventsim.trust import (
    AntecedentDirection,
    PerceivedRisk,
    RelationshipGraph,
    TrustAntecedentType,
    TrustUpdate,
    antecedents_from_spec,
    risk_delta_from_antecedents,
)

T0 = datetime(1990, 1, 1)
WEEK = timedelta(days=7)


class TestPerceivedRisk:
    def test_defaults(self):
        risk = PerceivedRisk.new()
        assert risk.base() == 0.3
        assert risk.delta() == 0.0
        assert risk.effective() == 0.3

    def test_delta_decays_weekly(self):
        """A +0.4 shock halves after seven days."""
        risk = PerceivedRisk.new()
        risk.add_delta(0.4)
        assert abs(risk.effective() - 0.7) < 1e-9
        risk.apply_decay(WEEK)
        assert abs(risk.effective() - 0.5) < 1e-9

    def test_effective_clamped(self):
        risk = PerceivedRisk.with_base(0.9)
        risk.add_delta(0.5)
        assert risk.effective() == 1.0
        risk.set_delta(-1.0)
        assert risk.effective() == 0.0

    def test_set_base_clamped(self):
        risk = PerceivedRisk.new()
        risk.set_base(1.7)
        assert risk.base() == 1.0

    def test_reset_delta(self):
        risk = PerceivedRisk.new()
        risk.add_delta(0.2)
        risk.reset_delta()
        assert risk.effective() == 0.3

    def test_from_config(self):
        risk = PerceivedRisk.from_config(TrustConfig(base_risk=0.1, half_life_days=1.0))
        risk.add_delta(0.2)
        risk.apply_decay(timedelta(days=1))
        assert abs(risk.effective() - 0.2) < 1e-9


class TestAntecedents:
    def test_betrayal(self):
        """Betrayal signals negative integrity, benevolence and ability."""
        antecedents = antecedents_from_spec(get_spec(EventType.EXPERIENCE_BETRAYAL_TRUST), 0.8)
        by_type = {a.antecedent_type: a for a in antecedents}

        assert set(by_type) == set(TrustAntecedentType)
        assert all(a.direction == AntecedentDirection.NEGATIVE for a in antecedents)
        assert abs(by_type[TrustAntecedentType.INTEGRITY].magnitude - 0.52) < 1e-9
        assert abs(by_type[TrustAntecedentType.BENEVOLENCE].magnitude - 0.52) < 1e-9
        assert abs(by_type[TrustAntecedentType.ABILITY].magnitude - 0.28) < 1e-9
        assert abs(risk_delta_from_antecedents(antecedents) - 0.66) < 1e-9

    def test_support_lowers_risk(self):
        antecedents = antecedents_from_spec(get_spec(EventType.RECEIVE_SUPPORT_EMOTIONAL), 0.6)
        assert all(a.direction == AntecedentDirection.POSITIVE for a in antecedents)
        assert risk_delta_from_antecedents(antecedents) < 0.0

    def test_threshold_is_exclusive(self):
        """Impacts at exactly the threshold are ignored."""
        spec = EventSpec.custom(impact={"prc": 0.05, "trust_propensity": 0.06})
        antecedents = antecedents_from_spec(spec, 1.0)
        assert len(antecedents) == 1
        assert antecedents[0].antecedent_type == TrustAntecedentType.INTEGRITY
        assert abs(antecedents[0].signed_magnitude - 0.06) < 1e-12

    def test_irrelevant_event_has_none(self):
        spec = EventSpec.custom(impact={"fatigue": 0.9})
        assert antecedents_from_spec(spec, 1.0) == []
        assert risk_delta_from_antecedents([]) == 0.0

    def test_risk_delta_clamped(self):
        spec = EventSpec.custom(impact={"prc": -1.0, "trust_propensity": -1.0, "perceived_competence": -1.0})
        antecedents = antecedents_from_spec(spec, 1.0)
        assert risk_delta_from_antecedents(antecedents, sensitivity=1.0) == 1.0


def update(at, delta, trustor="alice", trustee="bob"):
    return TrustUpdate(trustor=trustor, trustee=trustee, timestamp=at, risk_delta=delta)


class TestRelationshipGraph:
    def test_no_relationship_is_base(self):
        graph = RelationshipGraph()
        graph.add_entity("alice")
        assert not graph.has_relationship("alice", "bob")
        assert graph.perceived_risk_at("alice", "bob", T0).effective() == 0.3

    def test_first_update_creates_edge(self):
        graph = RelationshipGraph()
        graph.record(update(T0, 0.4))
        assert graph.has_relationship("alice", "bob")
        assert not graph.has_relationship("bob", "alice")
        assert list(graph.trustees("alice")) == ["bob"]

    def test_replay_with_decay(self):
        graph = RelationshipGraph()
        graph.record(update(T0, 0.4))
        assert abs(graph.perceived_risk_at("alice", "bob", T0).effective() - 0.7) < 1e-9
        assert abs(graph.perceived_risk_at("alice", "bob", T0 + WEEK).effective() - 0.5) < 1e-9

    def test_before_first_update(self):
        graph = RelationshipGraph()
        graph.record(update(T0, 0.4))
        assert graph.perceived_risk_at("alice", "bob", T0 - WEEK).effective() == 0.3

    def test_out_of_order_updates_sorted(self):
        """Replay follows timestamps, not recording order."""
        graph = RelationshipGraph()
        graph.record(update(T0 + WEEK, 0.2))
        graph.record(update(T0, 0.4))
        assert [u.risk_delta for u in graph.updates("alice", "bob")] == [0.4, 0.2]

        risk = graph.perceived_risk_at("alice", "bob", T0 + WEEK)
        assert abs(risk.delta() - 0.4) < 1e-9

    def test_directed(self):
        graph = RelationshipGraph()
        graph.record(update(T0, 0.4))
        assert graph.perceived_risk_at("bob", "alice", T0).effective() == 0.3
        assert list(graph.trustees("carol")) == []


@pytest.mark.parametrize("severity", [0.0, 0.3, 1.0])
def test_magnitude_bounded_by_severity(severity):
    """Antecedent magnitude scales with severity."""
    antecedents = antecedents_from_spec(get_spec(EventType.EXPERIENCE_BETRAYAL_TRUST), severity)
    for antecedent in antecedents:
        assert 0.0 <= antecedent.magnitude <= severity
