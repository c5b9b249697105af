import numpy as np
import pytest

pytest.importorskip("customtkinter")

from icokit.ui.image_viewer import CHECKER_CELL, CHECKER_COLORS, _checkerboard  # noqa: E402


def test_checkerboard_alternates_cells():
    board = np.asarray(_checkerboard((CHECKER_CELL * 3, CHECKER_CELL * 2)))

    assert board.shape == (CHECKER_CELL * 2, CHECKER_CELL * 3, 4)
    assert tuple(board[0, 0]) == CHECKER_COLORS[0]
    assert tuple(board[0, CHECKER_CELL]) == CHECKER_COLORS[1]
    assert tuple(board[CHECKER_CELL, 0]) == CHECKER_COLORS[1]
    assert tuple(board[CHECKER_CELL, CHECKER_CELL]) == CHECKER_COLORS[0]
