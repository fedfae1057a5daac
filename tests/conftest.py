"""Shared pytest fixtures for the rule-map WFC tests."""

import random

import pytest

from wfc_core import Equivalence, Orientation, Prototype, RuleGrid, Solver, Tile, Tuning, make_prototypes


# =============================================================================
# Prototypes
# =============================================================================

@pytest.fixture
def plain() -> Prototype:
    """A prototype with no rotational symmetry (4 variants)."""
    return Prototype(0, "plain", Equivalence.NONE)


@pytest.fixture
def half() -> Prototype:
    """A prototype that looks the same after a half turn (2 variants)."""
    return Prototype(1, "half", Equivalence.HALF_TURN)


@pytest.fixture
def quarter() -> Prototype:
    """A prototype that looks the same under any rotation (1 variant)."""
    return Prototype(2, "quarter", Equivalence.QUARTER_TURN)


@pytest.fixture
def prototypes(plain, half, quarter):
    return [plain, half, quarter]


@pytest.fixture
def pair_prototypes():
    """Two asymmetric prototypes A (index 0) and B (index 1)."""
    return [Prototype(0, "A", Equivalence.NONE), Prototype(1, "B", Equivalence.NONE)]


@pytest.fixture
def pair_rules(pair_prototypes) -> RuleGrid:
    """A 2x1 rule map with A painted west of B, both facing north."""
    rules = RuleGrid(2, 1)
    rules.set((0, 0), pair_prototypes[0].make_tile(Orientation.NORTH))
    rules.set((1, 0), pair_prototypes[1].make_tile(Orientation.NORTH))
    return rules


# =============================================================================
# Helpers
# =============================================================================

def make_solver_with_table(table, width, height, seed=0, tuning=None) -> Solver:
    """
    Builds a solver and swaps in a hand-written adjacency table,
    for tests that need rules a painted map cannot express.
    """
    prototypes = [Prototype(i, f"p{i}") for i in range(1 + max(t.prototype_index for t in table))]
    rules = RuleGrid(1, 1)
    rules.set((0, 0), Tile(0, Orientation.NORTH))
    solver = Solver(rules, prototypes, width, height, tuning or Tuning(), random.Random(seed))
    solver.sync_rules()
    solver.adjacency = table
    solver.tiles = sorted(table)
    solver.grid.reset(solver.tiles)
    return solver


# =============================================================================
# Default palette
# =============================================================================

@pytest.fixture
def kit():
    """The default modular kit (25 prototypes)."""
    return make_prototypes()


@pytest.fixture
def path_rules() -> RuleGrid:
    """
    A 4x3 rule map over the default kit mixing symmetric and asymmetric
    prototypes, with one hole at (2, 1).
    """
    N, E, S, W = Orientation.NORTH, Orientation.EAST, Orientation.SOUTH, Orientation.WEST
    rules = RuleGrid(4, 3)
    layout = {
        (0, 0): Tile(3, N), (1, 0): Tile(13, E), (2, 0): Tile(13, E), (3, 0): Tile(4, W),
        (0, 1): Tile(3, N), (1, 1): Tile(3, N), (3, 1): Tile(13, N),
        (0, 2): Tile(1, S), (1, 2): Tile(0, E), (2, 2): Tile(5, N), (3, 2): Tile(13, N),
    }
    for coords, tile in layout.items():
        rules.set(coords, tile)
    return rules
