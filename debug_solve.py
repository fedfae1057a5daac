#!/usr/bin/env python3
"""
Debug script: solve a small painted rule map outside Blender and print the result
"""

import logging
import os
import random
import sys

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from wfc_core import Orientation, RuleGrid, Tuning, generate, make_prototypes, render_ascii

GRASS, PATH_STRAIGHT, PATH_CROSS = 3, 13, 5


def create_test_rules(prototypes):
    """A 5x5 rule map: grass all around a cross of paths"""
    rules = RuleGrid(5, 5)
    grass = prototypes[GRASS].make_tile(Orientation.NORTH)
    for y in range(5):
        for x in range(5):
            rules.set((x, y), grass)

    vertical = prototypes[PATH_STRAIGHT].make_rotated_tile(Orientation.NORTH, 0)
    horizontal = prototypes[PATH_STRAIGHT].make_rotated_tile(Orientation.NORTH, 1)
    for i in (1, 3):
        rules.set((2, i), vertical)
        rules.set((i, 2), horizontal)
    rules.set((2, 2), prototypes[PATH_CROSS].make_tile(Orientation.NORTH))
    return rules


def run_basic_generation(size=(16, 12), seed=42, backtrack=False):
    print("=== Testing Basic Rule Map Generation ===")
    prototypes = make_prototypes()
    rules = create_test_rules(prototypes)
    print(f"Painted {sum(1 for _ in rules.filled())} rule cell(s)")

    ticks = []
    result = generate(
        rule_grid=rules,
        prototypes=prototypes,
        size=size,
        rng=random.Random(seed),
        tuning=Tuning(steps_per_tick=50, backtrack=backtrack),
        step_callback=ticks.append,
    )

    print(f"\n=== Generation Complete ({len(ticks)} tick(s)) ===")
    print(f"Resolved cells: {len(result['placements'])}")
    print(f"Impossible cells: {len(result['impossible'])}")
    print(f"Contradictions: {result['contradictions']}")
    print()
    print(render_ascii(result["solver"], prototypes))
    return not result["impossible"]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)-8s | %(name)-20s | %(message)s")
    run_basic_generation(backtrack="--backtrack" in sys.argv)
