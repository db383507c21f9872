from collections.abc import Sequence

from .odds import OddsTable, WeightedSelector

ROWS = 4
COLUMNS = 3

Grid = tuple[tuple[int, ...], ...]


def evaluate(grid: Sequence[Sequence[int]]) -> int:
    """Sum the value of every row whose three cells match and are non-zero."""
    win = 0
    for row in grid:
        first = row[0]
        if first == 0:
            continue
        if all(cell == first for cell in row):
            win += first
    return win


class GridGenerator:
    def __init__(self, selector: WeightedSelector):
        self._selector = selector

    def generate(self, prize_table: OddsTable[int]) -> tuple[Grid, int]:
        grid = tuple(
            tuple(self._selector.draw(prize_table) or 0 for _ in range(COLUMNS))
            for _ in range(ROWS)
        )
        return grid, evaluate(grid)
