"""
Tests for the EvolutionManager.

These tests verify:
    - Relative fitness assignment
    - Parent selection (oldest, ties, survival threshold)
    - Reuse vs. mutate inheritance without touching the parent
    - Population regeneration size and selection probability
    - Generation phase transitions and stats
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from src.ai.agent import Agent
from src.ai.evolution import EvolutionManager, GenerationPhase, make_perturbation
from src.utils.random_source import NumpyRandomSource


@pytest.fixture
def config():
    """Small population for fast regeneration."""
    return Config(POPULATION_SIZE=20)


@pytest.fixture
def manager(config):
    """Seeded manager."""
    return EvolutionManager(config, NumpyRandomSource(11))


def dead_birds(config, ages, genome=None):
    """Build dead agents with the given ages, indexed in order."""
    birds = []
    for index, age in enumerate(ages):
        agent = Agent(config, NumpyRandomSource(index), genome=genome, index=index)
        agent.age = age
        agent.die()
        birds.append(agent)
    return birds


class TestFitness:
    """Test relative fitness."""

    def test_fitness_sums_to_one(self, config):
        birds = dead_birds(config, [10, 30, 60])
        total = EvolutionManager.assign_fitness(birds)

        assert total == 100
        assert sum(b.fitness for b in birds) == pytest.approx(1.0)
        assert [b.fitness for b in birds] == pytest.approx([0.1, 0.3, 0.6])

    def test_zero_total_age(self, config):
        """All-zero ages leave every fitness at 0."""
        birds = dead_birds(config, [0, 0, 0])
        assert EvolutionManager.assign_fitness(birds) == 0
        assert all(b.fitness == 0.0 for b in birds)

    def test_empty_generation(self):
        assert EvolutionManager.assign_fitness([]) == 0


class TestSelectParent:
    """Test parent selection."""

    def test_oldest_is_selected(self, config, manager):
        birds = dead_birds(config, [900, 1200, 850])
        assert manager.select_parent(birds) is birds[1]

    def test_tie_goes_to_lowest_index(self, config, manager):
        birds = dead_birds(config, [1000, 1500, 1500, 1200])
        assert manager.select_parent(birds).index == 1

    def test_below_threshold_yields_none(self, config, manager):
        """Nobody crossed a full screen: no parent."""
        birds = dead_birds(config, [100, config.SCREEN_WIDTH - 1])
        assert manager.select_parent(birds) is None

    def test_exactly_threshold_qualifies(self, config, manager):
        birds = dead_birds(config, [config.SCREEN_WIDTH])
        assert manager.select_parent(birds) is birds[0]

    def test_custom_threshold(self):
        cfg = Config(POPULATION_SIZE=5, SURVIVAL_THRESHOLD=50)
        manager = EvolutionManager(cfg, NumpyRandomSource(0))
        birds = dead_birds(cfg, [40, 60])
        assert manager.select_parent(birds) is birds[1]

    def test_empty_dead_set(self, manager):
        assert manager.select_parent([]) is None
        assert manager.pick_one([]) is None


class TestInherit:
    """Test reuse vs. mutate inheritance."""

    def test_none_parent(self, manager):
        assert manager.inherit(None) is None

    def test_reuse_returns_parent_parameters(self, config, never_jump, scripted_rng):
        """Roll below PARENT_REUSE_PROB: identical parameters."""
        manager = EvolutionManager(config, scripted_rng([0.5]), perturbation=lambda: 1.0)
        parent = dead_birds(config, [1000], genome=never_jump)[0]

        genome = manager.inherit(parent)

        assert genome.same_as(parent.genome())

    def test_mutate_returns_perturbed_copy(self, config, never_jump, scripted_rng):
        """Roll at or above PARENT_REUSE_PROB: mutated copy, parent untouched."""
        manager = EvolutionManager(config, scripted_rng([0.8]), perturbation=lambda: 1.0)
        parent = Agent(config, scripted_rng([0.0]), genome=never_jump)
        parent.age = 1000
        before = parent.genome()

        genome = manager.inherit(parent)

        # Every gate draw is 0.0 < MUTATION_RATE, so all 11 parameters move by +1
        assert np.allclose(genome.flat(), before.flat() + 1.0)
        assert parent.genome().same_as(before)

    def test_zero_mutation_rate_child_matches_parent(self, never_jump, scripted_rng):
        """Without mutation a child predicts exactly like its parent."""
        cfg = Config(POPULATION_SIZE=5, MUTATION_RATE=0.0)
        manager = EvolutionManager(cfg, scripted_rng([0.95]))
        parent = dead_birds(cfg, [1000], genome=never_jump)[0]

        child = Agent(cfg, NumpyRandomSource(0), genome=manager.inherit(parent))

        inputs = [0.1, 0.2, 0.3]
        assert child.brain.predict(inputs) == parent.brain.predict(inputs)

    def test_default_perturbation_is_non_negative(self):
        perturb = make_perturbation(NumpyRandomSource(0), scale=1.0)
        values = [perturb() for _ in range(200)]
        assert all(0.0 <= v < 1.0 for v in values)


class TestGeneratePopulation:
    """Test regeneration."""

    def test_population_size(self, config, manager):
        birds = dead_birds(config, [1200, 300, 50])
        population = manager.generate_population(birds)
        assert len(population) == config.POPULATION_SIZE
        assert [a.index for a in population] == list(range(config.POPULATION_SIZE))

    def test_new_agents_are_fresh(self, config, manager):
        population = manager.generate_population(dead_birds(config, [1200]))
        assert all(a.alive and a.age == 0 and a.y == config.BIRD_START_Y for a in population)

    def test_brains_are_never_shared(self, config, manager, never_jump):
        """Even birds reusing the same parent own separate controllers."""
        population = manager.generate_population(dead_birds(config, [1200], genome=never_jump))
        pointers = {a.brain.hidden.weight.data_ptr() for a in population}
        assert len(pointers) == len(population)

    def test_selection_prob_one_inherits_everywhere(self, never_jump):
        """With SELECTION_PROB=1 and reuse always on, every bird is the parent's clone."""
        cfg = Config(POPULATION_SIZE=10, SELECTION_PROB=1.0, PARENT_REUSE_PROB=1.0)
        manager = EvolutionManager(cfg, NumpyRandomSource(0))
        parent = dead_birds(cfg, [1200], genome=never_jump)[0]

        population = manager.generate_population([parent])

        assert all(a.genome().same_as(never_jump) for a in population)
        assert manager.parent_age == 1200

    def test_selection_prob_zero_is_all_random(self, never_jump):
        cfg = Config(POPULATION_SIZE=10, SELECTION_PROB=0.0)
        manager = EvolutionManager(cfg, NumpyRandomSource(0))
        parent = dead_birds(cfg, [1200], genome=never_jump)[0]

        population = manager.generate_population([parent])

        assert not any(a.genome().same_as(never_jump) for a in population)

    def test_no_qualified_parent_is_all_random(self, config, manager, never_jump):
        population = manager.generate_population(dead_birds(config, [10], genome=never_jump))
        assert manager.parent_age is None
        assert not any(a.genome().same_as(never_jump) for a in population)


class TestLifecycle:
    """Test phase transitions and stats."""

    def test_initial_phase(self, manager):
        assert manager.phase == GenerationPhase.SPAWNING

    def test_start(self, config, manager):
        population = manager.start()
        assert len(population) == config.POPULATION_SIZE
        assert manager.phase == GenerationPhase.RUNNING
        assert manager.generation == 0

    def test_end_then_regenerate(self, config, manager):
        manager.start()
        birds = dead_birds(config, [10, 20, 30])

        stats = manager.end_generation(birds, ticks=30, out_of_band_inputs=4)
        assert manager.phase == GenerationPhase.ENDED

        population = manager.regenerate(birds)
        assert manager.phase == GenerationPhase.RUNNING
        assert manager.generation == 1
        assert len(population) == config.POPULATION_SIZE

        assert stats.generation == 0
        assert stats.population == 3
        assert stats.ticks == 30
        assert stats.best_age == 30
        assert stats.mean_age == pytest.approx(20.0)
        assert stats.total_age == 60
        assert stats.out_of_band_inputs == 4
        assert stats.to_dict()['best_age'] == 30

    def test_stats_for_empty_generation(self, manager):
        manager.start()
        stats = manager.end_generation([], ticks=0)
        assert stats.best_age == 0
        assert stats.mean_age == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
