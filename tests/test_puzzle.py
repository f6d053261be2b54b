"""
Test script for puzzle engine validation

Tests:
1. Complete grid generation and sums
2. Cell masking (counts, clamping, uniformity)
3. Difficulty simulation and labels
4. SumPuzzle orchestration, progress and error handling

Usage:
    python test_puzzle.py
"""

import sys
from collections import Counter
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.puzzle import (
    BLANK,
    MAX_ROUNDS,
    DifficultyLevel,
    GenerationError,
    InvalidSizeError,
    PuzzleNotGeneratedError,
    RecordingObserver,
    SumPuzzle,
    compute_sums,
    count_blanks,
    difficulty_label,
    estimate_difficulty,
    generate_complete_grid,
    mask_cells,
    simulate_solve,
)


class ScriptedRng:
    """
    Random source with a fixed grid and a shuffle that never swaps.

    integers(low, high) returns high - 1, so Fisher-Yates keeps the
    row-major order and masking blanks the first cells.
    """

    def __init__(self, grid):
        self.grid = grid

    def integers(self, low, high=None, size=None):
        if size is not None:
            return np.array(self.grid)
        return high - 1


class BrokenRng:
    """Random source that fails on every draw."""

    def integers(self, low, high=None, size=None):
        raise RuntimeError("entropy exhausted")


def test_complete_grid():
    """Every cell is a digit and sums match the grid."""
    print("\n" + "="*60)
    print("TEST: Complete Grid")
    print("="*60)

    rng = np.random.default_rng(1234)
    for size in (1, 2, 4, 5, 9):
        grid = generate_complete_grid(size, rng)
        row_sums, col_sums = compute_sums(grid)

        assert len(grid) == size
        assert all(len(row) == size for row in grid)
        assert all(1 <= v <= 9 and isinstance(v, int) for row in grid for v in row)
        assert row_sums == [sum(row) for row in grid]
        assert col_sums == [sum(grid[r][c] for r in range(size)) for c in range(size)]
        print(f"  {size}x{size}: rows={row_sums} cols={col_sums}")

    print("  [PASS] Complete grid tests")


def test_digits_cover_full_range():
    """Digit draws reach both ends of 1-9."""
    rng = np.random.default_rng(7)
    grid = generate_complete_grid(30, rng)
    seen = {v for row in grid for v in row}
    assert seen == set(range(1, 10))


def test_sums_idempotent():
    """Computing sums twice on an unchanged grid gives the same result."""
    grid = [[3, 5], [2, 9]]
    first = compute_sums(grid)
    second = compute_sums(grid)
    assert first == second == ([8, 11], [5, 14])


def test_mask_counts():
    """Masking blanks exactly k cells and keeps the rest."""
    print("\n" + "="*60)
    print("TEST: Masking")
    print("="*60)

    rng = np.random.default_rng(99)
    grid = generate_complete_grid(5, rng)
    original = [row[:] for row in grid]

    for k in (0, 1, 10, 25):
        puzzle = mask_cells(grid, k, rng)
        assert count_blanks(puzzle) == k
        for r in range(5):
            for c in range(5):
                if puzzle[r][c] is not BLANK:
                    assert puzzle[r][c] == grid[r][c]
        print(f"  k={k}: {count_blanks(puzzle)} blanks")

    # Source grid untouched
    assert grid == original
    print("  [PASS] Masking tests")


def test_mask_clamps_large_and_negative_counts():
    rng = np.random.default_rng(5)
    grid = generate_complete_grid(3, rng)

    assert count_blanks(mask_cells(grid, 100, rng)) == 9
    assert all(v is BLANK for row in mask_cells(grid, 10, rng) for v in row)
    assert count_blanks(mask_cells(grid, -3, rng)) == 0


def test_mask_positions_uniform():
    """Each coordinate is blanked about k/N^2 of the time."""
    rng = np.random.default_rng(2024)
    grid = generate_complete_grid(4, rng)
    runs = 4000
    k = 4
    hits = Counter()

    for _ in range(runs):
        puzzle = mask_cells(grid, k, rng)
        for r in range(4):
            for c in range(4):
                if puzzle[r][c] is BLANK:
                    hits[(r, c)] += 1

    expected = runs * k / 16  # 1000 per cell
    assert len(hits) == 16
    for cell, n in hits.items():
        assert abs(n - expected) < 0.15 * expected, f"{cell} blanked {n} times"


def test_single_blank_scenario():
    """2x2 grid, blank (0,0): solved by row inference in one round."""
    print("\n" + "="*60)
    print("TEST: Single Blank Scenario")
    print("="*60)

    engine = SumPuzzle(2, rng=ScriptedRng([[3, 5], [2, 9]]))
    snapshot = engine.generate(1)

    print(f"  Puzzle: {snapshot.puzzle}")
    assert snapshot.solution == ((3, 5), (2, 9))
    assert snapshot.row_sums == (8, 11)
    assert snapshot.col_sums == (5, 14)
    assert snapshot.puzzle == ((None, 5), (2, 9))

    rounds, solved = simulate_solve(
        [list(row) for row in snapshot.puzzle], snapshot.row_sums, snapshot.col_sums
    )
    assert rounds == 1
    assert solved == [[3, 5], [2, 9]]

    assert snapshot.difficulty == 1
    assert snapshot.difficulty_label == "Easy"
    print("  [PASS] Single blank scenario")


def test_unmasked_puzzle_scores_one():
    engine = SumPuzzle(3, seed=11)
    snapshot = engine.generate(0)
    assert snapshot.blank_count == 0
    assert snapshot.difficulty == 1


def test_multi_round_resolution():
    """A blank waiting on its neighbours resolves in a later round."""
    grid = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
    row_sums, col_sums = compute_sums(grid)
    puzzle = [[None, None, 3], [None, 5, 6], [7, 8, 9]]

    rounds, solved = simulate_solve(puzzle, row_sums, col_sums)

    assert rounds == 2
    assert solved == grid
    # Input is not modified
    assert puzzle == [[None, None, 3], [None, 5, 6], [7, 8, 9]]


def test_fills_visible_within_round():
    """A cell filled earlier in a round unlocks later cells in the same round."""
    grid = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
    row_sums, col_sums = compute_sums(grid)
    puzzle = [[None, None, 3], [4, 5, 6], [7, 8, 9]]

    # (0,0) resolves by column, then (0,1) is the last blank of row 0
    assert estimate_difficulty(puzzle, row_sums, col_sums) == 1


def test_row_inference_has_priority():
    """Row and column both apply: the row value is used."""
    puzzle = [[None, 5], [2, 9]]
    rounds, solved = simulate_solve(puzzle, [8, 11], [6, 14])
    assert rounds == 1
    assert solved[0][0] == 3


def test_out_of_range_row_value_skips_column():
    """An invalid row inference does not fall back to the column."""
    puzzle = [[None, 5], [2, 9]]
    rounds, solved = simulate_solve(puzzle, [20, 11], [5, 14])
    assert rounds == 1
    assert solved[0][0] is None


def test_stuck_puzzle_stops_after_one_round():
    puzzle = [[None, None], [None, None]]
    rounds, solved = simulate_solve(puzzle, [8, 11], [5, 14])
    assert rounds == 1
    assert solved == puzzle


def test_round_cap():
    grid = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
    row_sums, col_sums = compute_sums(grid)
    puzzle = [[None, None, 3], [None, 5, 6], [7, 8, 9]]
    assert estimate_difficulty(puzzle, row_sums, col_sums, max_rounds=1) == 1


def test_difficulty_labels():
    """Label thresholds including boundaries."""
    print("\n" + "="*60)
    print("TEST: Difficulty Labels")
    print("="*60)

    expected = {
        1: "Easy", 3: "Easy",
        4: "Normal", 6: "Normal",
        7: "Hard", 10: "Hard",
        11: "Very Hard", 100: "Very Hard",
    }
    for score, label in expected.items():
        print(f"  score={score:3d} -> {difficulty_label(score)}")
        assert difficulty_label(score) == label

    assert DifficultyLevel.HARD.stars == 3
    assert DifficultyLevel.VERY_HARD.display == "Very Hard ****"
    print("  [PASS] Difficulty label tests")


def test_generated_scores_in_range():
    rng = np.random.default_rng(31)
    for blanks in (0, 5, 10, 15, 25, 40):
        snapshot = SumPuzzle(5, rng=rng).generate(blanks)
        assert 1 <= snapshot.difficulty <= MAX_ROUNDS
        assert snapshot.blank_count == min(blanks, 25)


def test_progress_sequence():
    """Observer sees 0, 30, 50, 70, 100; plain callables also work."""
    observer = RecordingObserver()
    SumPuzzle(seed=3).generate(observer=observer)
    assert observer.history == [0, 30, 50, 70, 100]
    assert observer.last == 100

    seen = []
    SumPuzzle(seed=3).generate(6, seen.append)
    assert seen == [0, 30, 50, 70, 100]

    # No observer at all is fine
    SumPuzzle(seed=3).generate()


def test_engine_defaults_and_snapshot():
    engine = SumPuzzle(seed=8)
    assert engine.size == 4
    assert not engine.is_generated

    with pytest.raises(PuzzleNotGeneratedError):
        engine.get_puzzle_data()

    snapshot = engine.generate()
    assert engine.is_generated
    assert engine.get_puzzle_data() is snapshot
    assert snapshot.size == 4
    assert snapshot.blank_count == 6
    assert engine.get_difficulty_label() == snapshot.difficulty_label
    assert engine.row_sums == list(snapshot.row_sums)

    data = snapshot.to_dict()
    assert set(data) == {
        "size", "puzzle", "solution", "rowSums", "colSums",
        "difficulty", "difficultyLabel",
    }
    assert data["puzzle"] == [list(row) for row in snapshot.puzzle]


def test_seeded_generation_is_reproducible():
    first = SumPuzzle(5, seed=42).generate(10)
    second = SumPuzzle(5, seed=42).generate(10)
    assert first == second


@pytest.mark.parametrize("size", [0, -1, 2.5, "4", True, None])
def test_invalid_size_fails_fast(size):
    with pytest.raises(InvalidSizeError):
        SumPuzzle(size)


def test_invalid_size_is_value_error():
    with pytest.raises(ValueError):
        SumPuzzle(0)


def test_generation_failure_reported_once():
    """A failing stage raises GenerationError and stores nothing."""
    engine = SumPuzzle(3, rng=BrokenRng())
    observer = RecordingObserver()

    with pytest.raises(GenerationError) as excinfo:
        engine.generate(4, observer)

    assert excinfo.value.stage == "grid generation"
    assert isinstance(excinfo.value.cause, RuntimeError)
    assert observer.history == [0]
    assert not engine.is_generated
    assert engine.grid == []


def test_failed_regeneration_clears_previous_puzzle():
    """A failure after a successful run leaves no stale puzzle behind."""
    engine = SumPuzzle(3, seed=5)
    engine.generate(4)
    assert engine.is_generated

    engine.rng = BrokenRng()
    with pytest.raises(GenerationError):
        engine.generate(4)

    assert not engine.is_generated
    assert engine.grid == []
    assert engine.puzzle == []
    assert engine.row_sums == []
    assert engine.col_sums == []
    assert engine.difficulty == 0
    with pytest.raises(PuzzleNotGeneratedError):
        engine.get_puzzle_data()


def main():
    """Run all tests."""
    return pytest.main([__file__, "-v"])


if __name__ == "__main__":
    sys.exit(main())
