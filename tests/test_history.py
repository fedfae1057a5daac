"""Tests for wfc_core.history: bounded guess log and rollback."""

import pytest

from wfc_core import Guess, GuessHistory, Orientation, Tile, WaveGrid
from wfc_core.history import record_guess, rollback

X, Y, Z = Tile(0, Orientation.NORTH), Tile(1, Orientation.NORTH), Tile(2, Orientation.NORTH)


class TestGuessHistory:
    """Tests for the bounded guess log."""

    def test_bounded(self):
        """Test the oldest guesses fall off once the log is full."""
        history = GuessHistory(2)
        for i in range(3):
            history.push(Guess(i, X))
        assert len(history) == 2
        assert history.pop() == Guess(2, X)
        assert history.pop() == Guess(1, X)
        assert history.pop() is None

    def test_clear(self):
        history = GuessHistory(4)
        history.push(Guess(0, X))
        history.clear()
        assert len(history) == 0


class TestRollback:
    """Tests for recording snapshots and undoing guesses."""

    def test_size_mismatch(self):
        """Test the guess log and the cell logs must share their bound."""
        with pytest.raises(ValueError):
            record_guess(WaveGrid(2, 1, history_size=3), GuessHistory(2), 0, X)

    def test_disabled_history_records_nothing(self):
        """Test a zero-sized history makes rollback impossible."""
        grid = WaveGrid(2, 1, history_size=0)
        grid.reset([X, Y])
        history = GuessHistory(0)
        record_guess(grid, history, 0, X)
        assert len(history) == 0
        assert rollback(grid, history) is None

    def test_rollback_restores_waves(self):
        """Test every wave goes back to its state before the guess."""
        grid = WaveGrid(2, 1, history_size=5)
        grid.reset([X, Y, Z])
        grid.cells[1].wave = {Y, Z}
        history = GuessHistory(5)

        record_guess(grid, history, 0, X)
        grid.cells[0].wave = {X}
        grid.cells[0].dirty = True
        grid.cells[1].wave = set()

        assert rollback(grid, history) == Guess(0, X)
        assert grid.snapshot() == [frozenset({X, Y, Z}), frozenset({Y, Z})]
        assert grid.dirty_indices() == []

    def test_rollback_is_bounded(self):
        """Test only the last `size` guesses can be undone, newest first."""
        grid = WaveGrid(1, 1, history_size=2)
        grid.reset([X, Y, Z])
        history = GuessHistory(2)
        for tile in (X, Y, Z):
            record_guess(grid, history, 0, tile)
            grid.cells[0].wave.discard(tile)

        assert rollback(grid, history) == Guess(0, Z)
        assert grid.cells[0].wave == {Z}
        assert rollback(grid, history) == Guess(0, Y)
        assert grid.cells[0].wave == {Y, Z}
        assert rollback(grid, history) is None
        assert len(grid.cells[0].history) == 0
