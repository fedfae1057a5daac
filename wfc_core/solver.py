'''
Copyright (C) 2025 Fadi SULTAN
fadi.sultan@outlook.com

Created by Fadi SULTAN

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see <http://www.gnu.org/licenses/>.
'''

import logging
import random
from collections import deque
from enum import Enum
from typing import Deque, List, NamedTuple, Optional, Sequence

from .config import Tuning
from .history import GuessHistory, record_guess, rollback
from .rules import AdjacencyTable, RuleGrid, allowed_neighbors, build_adjacency
from .tile import Coordinates, Prototype, Tile
from .wave import Cell, WaveGrid

log = logging.getLogger(__name__)


class CellState(Enum):
    UNCONFIGURED = "unconfigured"  # no rule painted yet, the wave is empty but that is not a failure
    UNDECIDED = "undecided"
    RESOLVED = "resolved"
    IMPOSSIBLE = "impossible"


class SolveState(Enum):
    UNCONFIGURED = "unconfigured"  # empty adjacency table, nothing to solve
    IDLE = "idle"                  # nothing to propagate, some cells still undecided
    PROPAGATING = "propagating"    # at least one dirty cell
    STABLE = "stable"              # no undecided cell left (some may be impossible)


class Progress(NamedTuple):
    """What a call to Solver.step achieved"""
    steps: int
    state: SolveState
    observations: int
    contradictions: int

    @property
    def done(self) -> bool:
        return self.state in (SolveState.STABLE, SolveState.UNCONFIGURED)


class Solver:
    """
    Wave Function Collapse over the output grid, driven by the rules painted in `rule_grid`.

    The solver is meant to be stepped from a UI timer: each call to step() does a bounded
    amount of work and the next call resumes where it stopped. Editing the rule grid at any
    time throws the current solve away; the next call rebuilds the rules and starts over.
    """

    def __init__(self, rule_grid: RuleGrid, prototypes: Sequence[Prototype], width: int, height: int,
                 tuning: Optional[Tuning] = None, rng: Optional[random.Random] = None):
        self.rule_grid = rule_grid
        self.prototypes = list(prototypes)
        self.tuning = tuning if tuning is not None else Tuning()
        self.rng = rng if rng is not None else random.Random()

        self.grid = WaveGrid(width, height, self.tuning.history_size)
        self.guesses = GuessHistory(self.tuning.history_size)
        self.adjacency: AdjacencyTable = {}
        self.tiles: List[Tile] = []

        # cells waiting to tell their neighbors they shrank; mirrors Cell.dirty
        self._dirty: Deque[int] = deque()
        self._rules_generation: Optional[int] = None

        self.observations = 0
        self.contradictions = 0
        self.backtracks = 0

    # --- rules ---

    def notify_rules_changed(self) -> None:
        '''
        Forces a rebuild of the rules at the next call, even if the rule grid generation did not move
        '''
        self._rules_generation = None

    def sync_rules(self) -> bool:
        '''
        Rebuilds the adjacency table and resets every cell if the rule grid changed since the last build.
        Returns True if a rebuild happened
        '''
        if self._rules_generation == self.rule_grid.generation:
            return False

        log.info("Rules changed, clearing")
        adjacency = build_adjacency(self.rule_grid, self.prototypes)

        # swap everything at once: in-flight propagation and guesses belong to the old rules
        self.adjacency = adjacency
        self.tiles = sorted(adjacency)
        self.grid.reset(self.tiles)
        self._dirty.clear()
        self.guesses.clear()
        self.observations = 0
        self.contradictions = 0
        self.backtracks = 0
        self._rules_generation = self.rule_grid.generation
        return True

    # --- state ---

    @property
    def state(self) -> SolveState:
        self.sync_rules()
        if not self.adjacency:
            return SolveState.UNCONFIGURED
        if self._dirty:
            return SolveState.PROPAGATING
        if self.grid.is_stable():
            return SolveState.STABLE
        return SolveState.IDLE

    def entropies(self) -> List[int]:
        self.sync_rules()
        return [cell.entropy for cell in self.grid.cells]

    def min_entropy_cells(self) -> List[int]:
        '''
        Returns the indices of the undecided cells having the fewest candidates.
        Resolved and impossible cells are never candidates
        '''
        self.sync_rules()
        min_len = None
        candidates = []
        for cell in self.grid.cells:
            entropy = cell.entropy
            if entropy <= 1:
                continue
            if min_len is None or entropy < min_len:
                min_len = entropy
                candidates = [cell.index]
            elif entropy == min_len:
                candidates.append(cell.index)
        return candidates

    # --- solving ---

    def observe(self) -> Optional[int]:
        '''
        Collapses one of the least uncertain cells into one of its candidates, both picked at random.
        Only happens once propagation is over. Returns the index of the collapsed cell, or None
        '''
        self.sync_rules()
        if self._dirty:
            return None
        candidates = self.min_entropy_cells()
        if not candidates:
            return None

        idx = self.rng.choice(candidates)
        cell = self.grid.cells[idx]
        # sorted so that a seeded rng always picks the same tile
        tile = self.rng.choice(sorted(cell.wave))

        if self.tuning.backtrack:
            record_guess(self.grid, self.guesses, idx, tile)

        cell.wave = {tile}
        self._mark_dirty(cell)
        self.observations += 1
        return idx

    def propagate_once(self) -> bool:
        '''
        Takes one dirty cell and restricts its undecided neighbors to what its candidates allow.
        Returns False if there was no dirty cell
        '''
        self.sync_rules()
        if not self._dirty:
            return False

        idx = self._dirty.popleft()
        cell = self.grid.cells[idx]
        if not cell.wave:
            # became impossible while waiting: spreading an empty wave would empty its neighbors too
            cell.dirty = False
            return True

        for orientation, neighbor_idx in self.grid.neighbors(idx):
            neighbor = self.grid.cells[neighbor_idx]
            # resolved and impossible neighbors are left alone
            if neighbor.entropy <= 1:
                continue

            allowed = set()
            for tile in cell.wave:
                tile_allowed = allowed_neighbors(self.adjacency, tile, orientation)
                if tile_allowed is None:
                    allowed = None
                    break
                allowed |= tile_allowed
            if allowed is None:
                continue

            new_wave = neighbor.wave & allowed
            if new_wave == neighbor.wave:
                continue

            if new_wave:
                neighbor.wave = new_wave
                self._mark_dirty(neighbor)
                continue

            self.contradictions += 1
            log.debug("Contradiction at %s while propagating from %s", neighbor.coordinates, cell.coordinates)
            if self.tuning.backtrack and self._backtrack():
                # the grid went back in time, the rest of this cell's neighbors no longer matter
                return True
            # left empty and not dirty: the contradiction stays local
            neighbor.wave = new_wave

        cell.dirty = False
        return True

    def step(self, max_steps: Optional[int] = None) -> Progress:
        '''
        Does at most `max_steps` operations (default: tuning.steps_per_tick).
        An operation is one propagation from a dirty cell, or one observation once nothing is dirty
        '''
        self.sync_rules()
        budget = self.tuning.steps_per_tick if max_steps is None else max_steps
        if budget < 1:
            raise ValueError(f"max_steps must be at least 1, got {budget}")

        steps = 0
        while steps < budget:
            if self._dirty:
                self.propagate_once()
            elif self.observe() is None:
                break
            steps += 1
        return Progress(steps, self.state, self.observations, self.contradictions)

    def run(self, max_steps: Optional[int] = None) -> Progress:
        '''
        Steps until every cell is resolved or impossible (or until `max_steps` operations were spent)
        '''
        total = 0
        while True:
            budget = self.tuning.steps_per_tick
            if max_steps is not None:
                budget = min(budget, max_steps - total)
                if budget < 1:
                    break
            progress = self.step(budget)
            total += progress.steps
            if progress.done or progress.steps == 0:
                break
        return Progress(total, self.state, self.observations, self.contradictions)

    def _mark_dirty(self, cell: Cell) -> None:
        if not cell.dirty:
            cell.dirty = True
            self._dirty.append(cell.index)

    def _backtrack(self) -> bool:
        '''
        Goes back to the wave before the latest guess and forbids the guessed tile there.
        If that empties the guessed cell, goes one more guess back, and so on.
        Returns False (and changes nothing) if no guess is left to undo
        '''
        guess = rollback(self.grid, self.guesses)
        if guess is None:
            return False
        self._dirty.clear()

        while guess is not None:
            self.backtracks += 1
            cell = self.grid.cells[guess.cell_index]
            cell.wave.discard(guess.tile)
            log.info("Backtracked: %r is not possible at %s", guess.tile, cell.coordinates)
            if cell.wave:
                self._mark_dirty(cell)
                return True
            guess = rollback(self.grid, self.guesses)
            if guess is None:
                log.info("Backtrack history exhausted, %s stays impossible", cell.coordinates)
        return True

    # --- queries for the front end ---

    def cell_state(self, coordinates: Coordinates) -> CellState:
        self.sync_rules()
        if not self.adjacency:
            return CellState.UNCONFIGURED
        entropy = self.grid.cell_at(coordinates).entropy
        if entropy == 0:
            return CellState.IMPOSSIBLE
        if entropy == 1:
            return CellState.RESOLVED
        return CellState.UNDECIDED

    def entropy(self, coordinates: Coordinates) -> int:
        self.sync_rules()
        return self.grid.cell_at(coordinates).entropy

    def resolved_tile(self, coordinates: Coordinates) -> Optional[Tile]:
        self.sync_rules()
        wave = self.grid.cell_at(coordinates).wave
        if len(wave) != 1:
            return None
        return next(iter(wave))

    def candidate_fraction(self, coordinates: Coordinates) -> float:
        '''
        Remaining candidates over all known tiles, used to shade undecided cells
        '''
        self.sync_rules()
        if not self.tiles:
            return 0.0
        return self.grid.cell_at(coordinates).entropy / len(self.tiles)
