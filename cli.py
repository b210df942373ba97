# ============================================================================
# cli.py - Hydra CLI for replaying life-event scenarios
# ============================================================================
import logging
from datetime import datetime
from typing import List, Optional

import hydra
from omegaconf import DictConfig

from eventsim import (
    EngineConfig,
    Entity,
    EventBuilder,
    EventSpecRegistry,
    EventType,
    Simulation,
    Species,
    get_spec,
)

logger = logging.getLogger(__name__)


def build_simulation(cfg: DictConfig, engine: EngineConfig, with_events: bool = True) -> Simulation:
    """Create a simulation holding the scenario entity and (optionally) its events"""
    scenario = cfg.scenario
    entity = Entity(
        id=scenario.entity.id,
        species=Species(scenario.entity.get("species", "human")),
        birth_date=datetime.fromisoformat(str(scenario.entity.birth_date)),
    )

    sim = Simulation(engine)
    sim.add_entity(entity, entity.timestamp_at_age(scenario.entity.get("reference_age", 0)))

    if not with_events:
        return sim

    for spec in scenario.events:
        event = (
            EventBuilder(EventType(spec.type))
            .target(entity.id)
            .severity(spec.severity)
            .build()
        )
        result = sim.add_event(event, entity.timestamp_at_age(spec.age))
        logger.info(f"Age {spec.age}: {event.summary()} (severity {spec.severity})")
        for error in result.errors:
            logger.warning(f"  dispatch error: {error}")

    return sim


def print_state_table(sim: Simulation, control: Optional[Simulation], entity_id: str, ages: List[float]):
    """Print mood and key dimensions at each query age"""
    entity = sim.entity(entity_id)
    print(f"\n{'='*72}")
    print(f"STATE OF {entity_id} ({entity.species.value})")
    print(f"{'='*72}")
    header = f"{'age':>5} {'valence':>9} {'arousal':>9} {'stress':>8} {'lonely':>8} {'AC':>6} {'memories':>9}"
    if control is not None:
        header += f" {'d_valence':>10} {'d_arousal':>10}"
    print(header)

    for age in ages:
        timestamp = entity.timestamp_at_age(age)
        state = sim.state_at(entity_id, timestamp)
        mood = state.mood()
        line = (
            f"{age:>5} {mood.valence_effective():>9.3f} {mood.arousal_effective():>9.3f} "
            f"{state.needs().stress_effective():>8.3f} "
            f"{state.social_cognition().loneliness_effective():>8.3f} "
            f"{state.mental_health().acquired_capability_effective():>6.3f} "
            f"{len(state.memories):>9}"
        )
        if control is not None:
            baseline = control.state_at(entity_id, timestamp).mood()
            line += (
                f" {mood.valence_effective() - baseline.valence_effective():>10.3f}"
                f" {mood.arousal_effective() - baseline.arousal_effective():>10.3f}"
            )
        print(line)

    convergence = sim.convergence_at(entity_id, entity.timestamp_at_age(ages[-1]))
    factors = ", ".join(f.code for f in convergence.elevated_factors()) or "none"
    print(f"\nElevated ITS factors at age {ages[-1]}: {factors}")


def run_scenario(cfg: DictConfig, engine: EngineConfig):
    """Replay the configured scenario and print state summaries"""
    sim = build_simulation(cfg, engine)
    control = build_simulation(cfg, engine, with_events=False) if cfg.scenario.get("control", False) else None
    print_state_table(sim, control, cfg.scenario.entity.id, list(cfg.scenario.query_ages))

    print("\nMemories:")
    entity_id = cfg.scenario.entity.id
    last = sim.entity(entity_id).timestamp_at_age(list(cfg.scenario.query_ages)[-1])
    for memory in sim.memories_at(entity_id, last):
        tags = ", ".join(t.value for t in memory.tags)
        print(f"  {memory.created_at.date()} {memory.summary:<32} salience={memory.salience:.3f} "
              f"now={memory.salience_at(last, engine.salience):.3f} [{tags}]")


def run_catalog():
    """List registered event types with their strongest impacts"""
    print(f"\n{'='*72}")
    print("EVENT CATALOG")
    print(f"{'='*72}")
    for event_type in EventSpecRegistry.registered_types():
        impacts = sorted(get_spec(event_type).impact.items(), key=lambda item: -abs(item[1]))[:3]
        strongest = ", ".join(f"{dim.value}={value:+.2f}" for dim, value in impacts)
        print(f"  {event_type.value:<34} {strongest}")


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entry point with Hydra configuration"""
    engine = EngineConfig.from_hydra_config(cfg)
    logging.basicConfig(level=getattr(logging, engine.logging.level.upper(), logging.INFO))

    if cfg.mode == "scenario":
        run_scenario(cfg, engine)
    elif cfg.mode == "catalog":
        run_catalog()
    else:
        print(f"Unknown mode: {cfg.mode}")


if __name__ == "__main__":
    main()
