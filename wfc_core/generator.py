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

import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import Tuning
from .palette import prototype_for
from .rules import RuleGrid
from .solver import CellState, Progress, Solver
from .tile import Prototype


def generate(
    rule_grid: RuleGrid,
    prototypes: Sequence[Prototype],
    size: Tuple[int, int],
    rng: random.Random,
    tuning: Optional[Tuning] = None,
    step_callback: Optional[Callable[[Progress], None]] = None,
    max_steps: Optional[int] = None,
) -> Dict:
    # size is the size of the output map in cells
    width, height = size
    solver = Solver(rule_grid, prototypes, width, height, tuning, rng)

    # Step the solver one tick at a time until every cell is settled,
    # and use the step_callback to let the caller redraw
    total = 0
    while True:
        budget = solver.tuning.steps_per_tick
        if max_steps is not None:
            budget = min(budget, max_steps - total)
            if budget < 1:
                break
        progress = solver.step(budget)
        total += progress.steps
        if step_callback:
            step_callback(progress)
        if progress.done or progress.steps == 0:
            break

    # Collect the resolved cells and the impossible ones
    placements = []
    impossible = []
    for y in range(height):
        for x in range(width):
            state = solver.cell_state((x, y))
            if state is CellState.RESOLVED:
                placements.append((x, y, solver.resolved_tile((x, y))))
            elif state is CellState.IMPOSSIBLE:
                impossible.append((x, y))

    return {
        "placements": placements,
        "impossible": impossible,
        "size": (width, height),
        "contradictions": solver.contradictions,
        "solver": solver,
    }


def render_ascii(solver: Solver, prototypes: Sequence[Prototype]) -> str:
    '''
    Draws the output grid with two characters per cell, north row on top:
    the first letter of the prototype name and the orientation letter for resolved cells,
    "??" for undecided cells, "!!" for impossible cells and ".." when there are no rules yet
    '''
    lines: List[str] = []
    for y in reversed(range(solver.grid.height)):
        row = []
        for x in range(solver.grid.width):
            state = solver.cell_state((x, y))
            if state is CellState.RESOLVED:
                tile = solver.resolved_tile((x, y))
                name = prototype_for(prototypes, tile).name
                row.append(f"{name[:1] or '#'}{tile.orientation.letter}")
            elif state is CellState.IMPOSSIBLE:
                row.append("!!")
            elif state is CellState.UNDECIDED:
                row.append("??")
            else:
                row.append("..")
        lines.append(" ".join(row))
    return "\n".join(lines)
