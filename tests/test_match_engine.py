import random
from collections import deque

import pytest

from tileblast.components.grid_state import GridState
from tileblast.errors import OutOfBounds
from tileblast.systems.match import MatchEngine
from tests.helpers import grid_from_rows


def reference_group(grid, x, y):
    """Breadth-first reference used to cross-check the engine."""
    color = grid.get(x, y)
    if color is None:
        return set()
    seen = {(x, y)}
    queue = deque([(x, y)])
    while queue:
        cx, cy = queue.popleft()
        for nx, ny in ((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)):
            if grid.in_bounds(nx, ny) and (nx, ny) not in seen and grid.get(nx, ny) == color:
                seen.add((nx, ny))
                queue.append((nx, ny))
    return seen


def test_row_scenario_groups():
    grid = grid_from_rows([[0, 0, 1]])
    engine = MatchEngine(grid)
    group = engine.connected_group(0, 0)
    assert set(group) == {(0, 0), (1, 0)}
    assert engine.is_removable(group)
    single = engine.connected_group(2, 0)
    assert single == [(2, 0)]
    assert not engine.is_removable(single)


def test_empty_seed_returns_empty_group():
    grid = grid_from_rows([[None, 1], [1, 1]])
    engine = MatchEngine(grid)
    assert engine.connected_group(0, 1) == []


def test_out_of_bounds_seed_raises():
    engine = MatchEngine(grid_from_rows([[0, 0]]))
    with pytest.raises(OutOfBounds):
        engine.connected_group(2, 0)


def test_group_follows_orthogonal_paths_only():
    grid = grid_from_rows([
        [1, 1, 2],
        [2, 1, 2],
        [1, 1, 1],
    ])
    engine = MatchEngine(grid)
    assert set(engine.connected_group(0, 0)) == {(0, 0), (1, 0), (2, 0), (1, 1), (0, 2), (1, 2)}
    assert set(engine.connected_group(2, 2)) == {(2, 2), (2, 1)}
    assert engine.connected_group(0, 1) == [(0, 1)]


def test_diagonal_neighbours_do_not_connect():
    grid = grid_from_rows([[0, 1], [1, 0]])
    engine = MatchEngine(grid)
    assert engine.connected_group(0, 0) == [(0, 0)]
    assert not engine.board_has_any_move()
    assert engine.find_removable_group() == []


def test_repeated_queries_do_not_leak_visited_marks():
    grid = grid_from_rows([
        [3, 3, 0],
        [3, 0, 0],
        [1, 1, 0],
    ])
    engine = MatchEngine(grid)
    first = engine.connected_group(2, 2)
    engine.connected_group(0, 2)
    engine.connected_group(0, 0)
    second = engine.connected_group(2, 2)
    assert first == second
    assert set(first) == {(2, 2), (2, 1), (1, 1), (2, 0)}


def test_scratch_buffer_follows_grid_resize():
    engine = MatchEngine(grid_from_rows([[0, 0]]))
    assert len(engine.connected_group(0, 0)) == 2
    engine.grid = grid_from_rows([[1, 1, 1], [1, 2, 1]])
    assert len(engine.connected_group(0, 0)) == 5


def test_single_colour_board_is_one_group():
    width, height = 40, 40
    grid = GridState(width, height)
    for x, y in grid.positions():
        grid.spawn(x, y, 0)
    engine = MatchEngine(grid)
    assert len(engine.connected_group(13, 27)) == width * height
    assert engine.board_has_any_move()


def test_flood_fill_matches_reference_on_random_boards():
    rng = random.Random(99)
    for _ in range(40):
        width, height = rng.randint(1, 8), rng.randint(1, 8)
        grid = GridState(width, height)
        for x, y in grid.positions():
            if rng.random() < 0.9:
                grid.spawn(x, y, rng.randrange(3))
        engine = MatchEngine(grid)
        for x, y in grid.positions():
            group = engine.connected_group(x, y)
            assert len(group) == len(set(group))
            assert set(group) == reference_group(grid, x, y)


def test_board_has_any_move_agrees_with_group_scan():
    rng = random.Random(5)
    for _ in range(60):
        grid = GridState(rng.randint(1, 5), rng.randint(1, 5))
        for x, y in grid.positions():
            grid.spawn(x, y, rng.randrange(4))
        engine = MatchEngine(grid)
        expected = any(len(reference_group(grid, x, y)) >= 2 for x, y in grid.positions())
        assert engine.board_has_any_move() == expected
        assert bool(engine.find_removable_group()) == expected


def test_label_groups_fills_each_group_once():
    grid = grid_from_rows([
        [0, 0, 1],
        [2, 0, 1],
    ])
    engine = MatchEngine(grid)
    labels = engine.label_groups()
    assert set(labels) == set(grid.positions())
    assert labels[(0, 1)] is labels[(1, 0)]
    assert engine.group_sizes() == {
        (0, 0): 1,
        (0, 1): 3, (1, 1): 3, (1, 0): 3,
        (2, 0): 2, (2, 1): 2,
    }
    assert engine.group_sizes([(2, 0)]) == {(2, 0): 2, (2, 1): 2}


def test_is_removable_counts_distinct_cells():
    assert not MatchEngine.is_removable([])
    assert not MatchEngine.is_removable([(0, 0), (0, 0)])
    assert MatchEngine.is_removable([(0, 0), (0, 1)])
