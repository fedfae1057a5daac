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

DEFAULT_STEPS_PER_TICK = 100
DEFAULT_HISTORY_SIZE = 100


class Tuning:
    """
    Solver knobs exposed to the user.

    Args:
        steps_per_tick: Operations (one propagation or one observation) done per call to Solver.step
        history_size: How many guesses (and wave snapshots) are kept for backtracking
        backtrack: Undo the last guess when a cell becomes impossible instead of leaving it impossible
        show_rulemap: Whether the front end displays the painted rule map next to the output
    """

    def __init__(self, steps_per_tick: int = DEFAULT_STEPS_PER_TICK, history_size: int = DEFAULT_HISTORY_SIZE,
                 backtrack: bool = False, show_rulemap: bool = True):
        if int(steps_per_tick) < 1:
            raise ValueError(f"steps_per_tick must be at least 1, got {steps_per_tick}")
        if int(history_size) < 0:
            raise ValueError(f"history_size cannot be negative, got {history_size}")
        self.steps_per_tick = int(steps_per_tick)
        self.history_size = int(history_size)
        self.backtrack = bool(backtrack)
        self.show_rulemap = bool(show_rulemap)

    @classmethod
    def from_settings(cls, settings) -> 'Tuning':
        '''
        Reads the tuning from any object carrying the same attribute names (e.g. the add-on settings)
        '''
        return cls(
            steps_per_tick=getattr(settings, "steps_per_tick", DEFAULT_STEPS_PER_TICK),
            history_size=getattr(settings, "history_size", DEFAULT_HISTORY_SIZE),
            backtrack=getattr(settings, "backtrack", False),
            show_rulemap=getattr(settings, "show_rulemap", True),
        )

    def __repr__(self):
        return (f"Tuning(steps_per_tick={self.steps_per_tick}, history_size={self.history_size}, "
                f"backtrack={self.backtrack}, show_rulemap={self.show_rulemap})")
