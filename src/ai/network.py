"""
Neural Controller
=================

The tiny fixed-topology network that decides when a bird flaps.

Architecture:
    Input (3)  → Hidden (2, sigmoid) → Output (1, sigmoid)

    Input:  [vertical offset to gap center, distance to next pipe, velocity]
    Output: A single value in (0, 1); below the decision threshold means "jump"

There is no gradient descent here. Parameters only change through
copying and mutation, so every parameter has requires_grad disabled.

Key Features:
    - Deterministic, side-effect free inference
    - Deep copies that never share storage with their parent
    - Per-parameter stochastic mutation with an injected perturbation
    - Immutable parameter snapshots for passing lineage between generations
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
import torch
import torch.nn as nn

import sys
sys.path.append('../..')
from config import Config
from src.utils.random_source import RandomSource, NumpyRandomSource


@dataclass(frozen=True, eq=False)
class ControllerParams:
    """
    Read-only snapshot of a controller's parameters.

    Arrays are ordered [hidden.weight, hidden.bias, output.weight, output.bias]
    and flagged non-writeable, so a snapshot can be handed to any number of
    new birds without risk of one of them mutating it.
    """
    arrays: Tuple[np.ndarray, ...]

    @classmethod
    def from_arrays(cls, arrays: Sequence[np.ndarray]) -> 'ControllerParams':
        frozen = []
        for array in arrays:
            copy = np.array(array, dtype=np.float64, copy=True)
            copy.flags.writeable = False
            frozen.append(copy)
        return cls(tuple(frozen))

    def flat(self) -> np.ndarray:
        """All parameters as one flat (writeable) array."""
        return np.concatenate([a.ravel() for a in self.arrays])

    def same_as(self, other: 'ControllerParams') -> bool:
        return all(np.array_equal(a, b) for a, b in zip(self.arrays, other.arrays))


class NeuralController(nn.Module):
    """
    Feedforward controller for a single bird.

    Attributes:
        hidden (nn.Linear): Input → hidden layer
        output (nn.Linear): Hidden → output layer

    Example:
        >>> config = Config()
        >>> brain = NeuralController(config)
        >>> brain.predict([0.1, 0.5, -0.2])  # e.g. 0.62
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        rng: Optional[RandomSource] = None,
        params: Optional[ControllerParams] = None,
    ):
        """
        Initialize the controller.

        Args:
            config: Configuration object
            rng: Random source for weight init and mutation gating
            params: Copy parameters from this snapshot instead of randomizing
        """
        super(NeuralController, self).__init__()

        self.config = config or Config()
        self.rng: RandomSource = rng if rng is not None else NumpyRandomSource()

        self.input_size = self.config.INPUT_SIZE
        self.hidden_size = self.config.HIDDEN_SIZE
        self.output_size = self.config.OUTPUT_SIZE

        self.hidden = nn.Linear(self.input_size, self.hidden_size, dtype=torch.float64)
        self.output = nn.Linear(self.hidden_size, self.output_size, dtype=torch.float64)

        # Evolved, never trained
        self.requires_grad_(False)

        if params is not None:
            self.load_params(params)
        else:
            self._init_weights()

    def _init_weights(self) -> None:
        """Draw every parameter uniformly from [-WEIGHT_INIT_RANGE, WEIGHT_INIT_RANGE]."""
        bound = self.config.WEIGHT_INIT_RANGE
        for param in self.parameters():
            flat = param.data.view(-1)
            for i in range(flat.numel()):
                flat[i] = self.rng.uniform(-bound, bound)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Forward pass through the network.

        Args:
            x: Input tensor of shape (..., input_size)

        Returns:
            Output tensor of shape (..., output_size), values in (0, 1)
        """
        hidden = torch.sigmoid(self.hidden(x))
        return torch.sigmoid(self.output(hidden))

    def predict(self, inputs: Sequence[float]) -> float:
        """Run inference on one input vector and return the single output."""
        with torch.no_grad():
            x = torch.as_tensor(np.asarray(inputs, dtype=np.float64))
            return float(self.forward(x)[0])

    def snapshot(self) -> ControllerParams:
        """Immutable copy of the current parameters."""
        return ControllerParams.from_arrays([p.detach().cpu().numpy() for p in self.parameters()])

    def load_params(self, params: ControllerParams) -> None:
        """Overwrite parameters with a copy of a snapshot."""
        own = list(self.parameters())
        if len(own) != len(params.arrays):
            raise ValueError(f"Expected {len(own)} parameter arrays, got {len(params.arrays)}")
        with torch.no_grad():
            for param, array in zip(own, params.arrays):
                if tuple(param.shape) != array.shape:
                    raise ValueError(f"Shape mismatch: {tuple(param.shape)} vs {array.shape}")
                param.copy_(torch.from_numpy(np.array(array, dtype=np.float64, copy=True)))

    @classmethod
    def from_params(
        cls,
        params: ControllerParams,
        config: Optional[Config] = None,
        rng: Optional[RandomSource] = None,
    ) -> 'NeuralController':
        return cls(config, rng, params=params)

    def copy(self) -> 'NeuralController':
        """Deep copy with fully independent parameter storage."""
        return NeuralController(self.config, self.rng, params=self.snapshot())

    def mutate(self, perturbation: Callable[[], float], rate: Optional[float] = None) -> int:
        """
        Perturb parameters in place.

        Each parameter independently, with probability `rate`, becomes
        `parameter + perturbation()`; otherwise it is left unchanged.

        Args:
            perturbation: Zero-argument function producing an offset
            rate: Per-parameter mutation probability (default: config MUTATION_RATE)

        Returns:
            Number of parameters that were changed
        """
        if rate is None:
            rate = self.config.MUTATION_RATE

        changed = 0
        with torch.no_grad():
            for param in self.parameters():
                flat = param.data.view(-1)
                for i in range(flat.numel()):
                    if self.rng.random() < rate:
                        flat[i] += perturbation()
                        changed += 1
        return changed

    def count_parameters(self) -> int:
        """Total number of evolvable parameters."""
        return sum(p.numel() for p in self.parameters())
