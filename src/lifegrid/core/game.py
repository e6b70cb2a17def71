"""Generation driver for a Game of Life grid."""

from typing import Any, Deque, Dict, List, Tuple
from collections import deque

from .grid import Grid


class GameOfLife:
    """Drives a :class:`Grid` through successive generations.

    The grid owns the rules; this class keeps the bookkeeping a host
    loop usually wants around it: a generation counter, recent population
    counts and detection of repeated states (cycles).

    Only the most recent ``state_history_size`` distinct states are kept
    for cycle detection, so cycles longer than that go unnoticed.
    """

    def __init__(self, grid: Grid, state_history_size: int = 1000) -> None:
        """Initialize the driver with a grid.

        Args:
            grid: The grid to simulate
            state_history_size: Maximum number of past states remembered

        Raises:
            ValueError: If state_history_size is smaller than 1
        """
        if state_history_size < 1:
            raise ValueError(f"State history size must be positive, got {state_history_size}")

        self.grid = grid
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[bytes] = deque(maxlen=state_history_size)
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._population_history.append(self.population)

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> List[int]:
        """Population counts of the most recent generations."""
        return list(self._population_history)

    @property
    def tracked_states(self) -> int:
        """Number of past states currently remembered for cycle detection."""
        return len(self._seen_states)

    @property
    def cycle_detected(self) -> bool:
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def step(self, generations: int = 1) -> None:
        """Advance the simulation.

        Args:
            generations: Number of generations to advance

        Raises:
            ValueError: If generations is negative
        """
        if generations < 0:
            raise ValueError(f"Cannot step a negative number of generations: {generations}")

        for _ in range(generations):
            # Picks up cells seeded by hand since the last step
            self._check_for_cycles()
            self.grid.tick()
            self._generation += 1
            self._population_history.append(self.population)
            self._check_for_cycles()

    def _check_for_cycles(self) -> None:
        """Record the current state, flagging a cycle if it was seen at an earlier generation."""
        if self._cycle_detected:
            return

        current_state = self.grid.state_bytes()
        first_occurrence = self._seen_states.get(current_state)

        if first_occurrence is None:
            self._remember_state(current_state)
        elif first_occurrence != self._generation:
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence

    def _remember_state(self, state: bytes) -> None:
        """Record a new state, forgetting the oldest one when the history is full."""
        if len(self._state_history) == self._state_history.maxlen:
            del self._seen_states[self._state_history[0]]

        self._state_history.append(state)
        self._seen_states[state] = self._generation

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Run simulation until it dies out or cycles.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self.population == 0:
                return self._generation, "extinction"

            if self._cycle_detected:
                return self._generation, "cycle"

        return self._generation, "max_generations"

    def reset(self, clear_grid: bool = True) -> None:
        """Reset the simulation.

        Args:
            clear_grid: Whether to kill every cell of the grid as well
        """
        if clear_grid:
            self.grid.reset()

        self._generation = 0
        self._population_history.clear()
        self.clear_cycle_detection()
        self._population_history.append(self.population)

    def clear_cycle_detection(self) -> None:
        """Forget previously seen states.

        Call this after seeding the grid by hand mid-run, since earlier
        states no longer say anything about the new configuration.
        """
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._seen_states.clear()
        self._state_history.clear()

    def get_statistics(self) -> Dict[str, Any]:
        """Summary of the current simulation state."""
        return {
            "generation": self._generation,
            "population": self.population,
            "population_history": list(self._population_history),
            "population_density": self.population / (self.grid.width * self.grid.height),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": self.grid.shape,
            "live_cells": self.grid.get_live_cells(),
        }
