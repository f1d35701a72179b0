"""
Tests for the NeuralController.

These tests verify:
    - Fixed 3-2-1 topology
    - Deterministic, side-effect free inference
    - Deep copies that never alias their parent
    - Per-parameter mutation with an injected perturbation
    - Immutable parameter snapshots
"""

import pytest
import numpy as np
import torch
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from src.ai.network import NeuralController, ControllerParams
from src.utils.random_source import NumpyRandomSource


@pytest.fixture
def config():
    """Create test configuration."""
    return Config()


@pytest.fixture
def controller(config):
    """Create a seeded controller."""
    return NeuralController(config, NumpyRandomSource(1234))


class TestTopology:
    """Test network structure."""

    def test_layer_shapes(self, controller):
        """Hidden and output layers should match the 3-2-1 topology."""
        assert controller.hidden.weight.shape == (2, 3)
        assert controller.hidden.bias.shape == (2,)
        assert controller.output.weight.shape == (1, 2)
        assert controller.output.bias.shape == (1,)

    def test_parameter_count(self, controller):
        """3*2 + 2 + 2*1 + 1 = 11 parameters."""
        assert controller.count_parameters() == 11

    def test_no_gradients(self, controller):
        """Parameters are evolved, not trained."""
        assert all(not p.requires_grad for p in controller.parameters())

    def test_init_within_range(self, config):
        """Fresh parameters are drawn from [-WEIGHT_INIT_RANGE, WEIGHT_INIT_RANGE]."""
        net = NeuralController(config, NumpyRandomSource(7))
        flat = net.snapshot().flat()
        assert np.all(np.abs(flat) <= config.WEIGHT_INIT_RANGE)

    def test_seeded_init_is_reproducible(self, config):
        """Same seed, same parameters."""
        a = NeuralController(config, NumpyRandomSource(99))
        b = NeuralController(config, NumpyRandomSource(99))
        assert a.snapshot().same_as(b.snapshot())


class TestPredict:
    """Test inference."""

    def test_returns_float_in_unit_interval(self, controller):
        """Logistic output is bounded to (0, 1)."""
        out = controller.predict([0.1, 0.5, -0.3])
        assert isinstance(out, float)
        assert 0.0 < out < 1.0

    def test_deterministic(self, controller):
        """Same input, same output."""
        inputs = [0.2, -0.4, 0.9]
        assert controller.predict(inputs) == controller.predict(inputs)

    def test_does_not_change_parameters(self, controller):
        """Inference must not mutate any state."""
        before = controller.snapshot()
        for _ in range(10):
            controller.predict([1.0, -1.0, 0.5])
        assert controller.snapshot().same_as(before)

    def test_out_of_band_inputs_still_return(self, controller):
        """Inputs outside [-1, 1] are not an error."""
        out = controller.predict([25.0, -40.0, 3.0])
        assert 0.0 <= out <= 1.0

    def test_matches_manual_computation(self, config):
        """Output equals sigmoid(W2 · sigmoid(W1 · x + b1) + b2)."""
        net = NeuralController(config, NumpyRandomSource(5))
        w1, b1, w2, b2 = net.snapshot().arrays
        x = np.array([0.3, -0.2, 0.7])

        def sigmoid(z):
            return 1.0 / (1.0 + np.exp(-z))

        expected = sigmoid(w2 @ sigmoid(w1 @ x + b1) + b2)[0]
        assert net.predict(x) == pytest.approx(expected)


class TestCopy:
    """Test deep copies."""

    def test_copy_has_same_outputs(self, controller):
        """A copy behaves identically."""
        clone = controller.copy()
        for inputs in ([0.1, 0.2, 0.3], [-1, 1, 0], [0.5, -0.5, 0.9]):
            assert clone.predict(inputs) == controller.predict(inputs)

    def test_copy_does_not_share_storage(self, controller):
        """No parameter tensor is shared between parent and copy."""
        clone = controller.copy()
        for a, b in zip(controller.parameters(), clone.parameters()):
            assert a.data_ptr() != b.data_ptr()

    def test_mutating_copy_leaves_original_untouched(self, controller):
        """Aliasing test: mutation of the child never reaches the parent."""
        original = controller.snapshot()
        clone = controller.copy()

        changed = clone.mutate(lambda: 1.0, rate=1.0)

        assert changed == 11
        assert controller.snapshot().same_as(original)
        assert np.allclose(clone.snapshot().flat(), original.flat() + 1.0)


class TestMutate:
    """Test mutation."""

    def test_rate_zero_changes_nothing(self, controller):
        """With probability 0 no parameter changes."""
        before = controller.snapshot()
        assert controller.mutate(lambda: 5.0, rate=0.0) == 0
        assert controller.snapshot().same_as(before)

    def test_rate_one_changes_everything(self, controller):
        """With probability 1 every parameter gets the perturbation added."""
        before = controller.snapshot().flat()
        controller.mutate(lambda: 0.25, rate=1.0)
        assert np.allclose(controller.snapshot().flat(), before + 0.25)

    def test_gating_follows_random_source(self, controller, scripted_rng):
        """Only parameters whose gate draw is below the rate are perturbed."""
        before = controller.snapshot().flat()
        # 11 gate draws: mutate every other parameter
        controller.rng = scripted_rng([0.1, 0.9])

        changed = controller.mutate(lambda: 2.0, rate=0.2)

        after = controller.snapshot().flat()
        expected = before.copy()
        expected[0::2] += 2.0
        assert changed == 6
        assert np.allclose(after, expected)

    def test_default_rate_from_config(self, config, scripted_rng):
        """Without an explicit rate, MUTATION_RATE (0.2) applies."""
        net = NeuralController(config, NumpyRandomSource(3))
        net.rng = scripted_rng([0.19, 0.21])
        assert net.mutate(lambda: 1.0) == 6

    def test_weights_are_unbounded(self, controller):
        """Mutation never clamps parameters."""
        for _ in range(5):
            controller.mutate(lambda: 100.0, rate=1.0)
        assert np.all(controller.snapshot().flat() > 400.0)


class TestSnapshot:
    """Test immutable parameter snapshots."""

    def test_snapshot_is_read_only(self, controller):
        """Snapshot arrays cannot be written to."""
        snap = controller.snapshot()
        with pytest.raises(ValueError):
            snap.arrays[0][0, 0] = 42.0

    def test_snapshot_unaffected_by_later_mutation(self, controller):
        """A snapshot is a value, not a view."""
        snap = controller.snapshot()
        before = snap.flat().copy()
        controller.mutate(lambda: 1.0, rate=1.0)
        assert np.array_equal(snap.flat(), before)

    def test_from_params_round_trip(self, config, controller):
        """A controller built from a snapshot predicts identically."""
        rebuilt = NeuralController.from_params(controller.snapshot(), config)
        assert rebuilt.predict([0.4, 0.1, -0.6]) == controller.predict([0.4, 0.1, -0.6])

    def test_load_params_rejects_wrong_shapes(self, controller):
        """Mismatched snapshots raise ValueError."""
        bad = ControllerParams.from_arrays([np.zeros((3, 3)), np.zeros(3), np.zeros((1, 3)), np.zeros(1)])
        with pytest.raises(ValueError):
            controller.load_params(bad)

    def test_load_params_rejects_wrong_count(self, controller):
        """Snapshots with a different number of arrays raise ValueError."""
        bad = ControllerParams.from_arrays([np.zeros((2, 3))])
        with pytest.raises(ValueError):
            controller.load_params(bad)

    def test_forward_accepts_batches(self, controller):
        """forward() works on batched tensors too."""
        x = torch.zeros((4, 3), dtype=torch.float64)
        assert controller(x).shape == (4, 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
