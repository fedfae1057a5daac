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

# history.py - Guesses made by the solver, kept so a contradiction can be undone

from collections import deque
from typing import Deque, NamedTuple, Optional

from .tile import Tile
from .wave import WaveGrid


class Guess(NamedTuple):
    cell_index: int
    tile: Tile


class GuessHistory:
    """
    The last `size` observations, oldest first.
    Older guesses fall off the front, so a rollback can only go back `size` guesses.
    """

    def __init__(self, size: int):
        self.size = size
        self._guesses: Deque[Guess] = deque(maxlen=size)

    def __len__(self):
        return len(self._guesses)

    def push(self, guess: Guess) -> None:
        self._guesses.append(guess)

    def pop(self) -> Optional[Guess]:
        if not self._guesses:
            return None
        return self._guesses.pop()

    def clear(self) -> None:
        self._guesses.clear()


def record_guess(grid: WaveGrid, history: GuessHistory, cell_index: int, tile: Tile) -> None:
    '''
    Saves the guess and every cell's current wave (taken before the guess is applied).
    Both logs have the same bound, so the n-th newest guess always matches the n-th newest snapshot
    '''
    if history.size != grid.history_size:
        raise ValueError(f"Guess history size ({history.size}) differs from cell history size ({grid.history_size})")
    if history.size == 0:
        return
    history.push(Guess(cell_index, tile))
    for cell in grid.cells:
        cell.history.append(frozenset(cell.wave))


def rollback(grid: WaveGrid, history: GuessHistory) -> Optional[Guess]:
    '''
    Undoes the most recent guess: every wave goes back to what it was right before it.
    Returns the undone guess, or None if there is nothing left to undo
    '''
    guess = history.pop()
    if guess is None:
        return None
    for cell in grid.cells:
        cell.wave = set(cell.history.pop())
        cell.dirty = False
    return guess
