#!/usr/bin/env python3
"""
conftest.py - Shared pytest configuration and fixtures for eventsim

Provides:
- Marker registration and auto-marking by test directory
- --skip-slow option
- Common fixtures: birth dates, entities, simulations, helper builders
"""
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from eventsim import Entity, EngineConfig, EventBuilder, EventSpec, Simulation, Species


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Auto-mark tests by directory"""
    for item in items:
        parts = Path(str(item.fspath)).parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in parts:
            item.add_marker(pytest.mark.integration)


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--skip-slow",
        action="store_true",
        default=False,
        help="Skip slow tests"
    )


def pytest_configure(config):
    """Configure pytest with custom markers and settings"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated, no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (multiple components)")
    config.addinivalue_line("markers", "slow: Slow-running tests (>1 second)")
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")


def pytest_runtest_setup(item):
    if item.config.getoption("--skip-slow") and "slow" in item.keywords:
        pytest.skip("--skip-slow specified")


# ============================================================================
# Fixtures
# ============================================================================

BIRTH_DATE = datetime(1949, 1, 1)


@pytest.fixture
def birth_date() -> datetime:
    """Birth date used by the longitudinal scenarios"""
    return BIRTH_DATE


@pytest.fixture
def person() -> Entity:
    """A human entity born 1949-01-01"""
    return Entity(id="person_001", species=Species.HUMAN, birth_date=BIRTH_DATE)


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def sim(person, engine_config) -> Simulation:
    """Simulation holding `person` with reference time at age 18"""
    simulation = Simulation(engine_config)
    simulation.add_entity(person, person.timestamp_at_age(18))
    return simulation


@pytest.fixture
def control_sim(person, engine_config) -> Simulation:
    """Same entity, never receives events"""
    simulation = Simulation(engine_config)
    simulation.add_entity(person, person.timestamp_at_age(18))
    return simulation


@pytest.fixture
def negative_arousing_spec() -> EventSpec:
    """Acute negative, high-arousal event with no lasting base shift"""
    return EventSpec.custom(impact={"valence": -0.8, "arousal": 0.9})


@pytest.fixture
def make_event():
    """Factory: make_event(event_type, target, severity=0.5, source=None)"""
    def _make(event_type, target="person_001", severity=0.5, source=None):
        builder = EventBuilder(event_type).target(target).severity(severity)
        if source is not None:
            builder.source(source)
        return builder.build()
    return _make


@pytest.fixture
def years():
    """Convert years to a timedelta"""
    return lambda n: timedelta(days=365.25 * n)
