"""Tests for attack and check detection."""

from __future__ import annotations

from shogi_online.game.board import Board, Piece
from shogi_online.game.check import attackers_of, find_king, is_in_check, is_square_attacked
from shogi_online.game.position import Position
from shogi_online.game.types import PieceType, Player
from shogi_online.game.validation import would_leave_own_king_in_check


def _make_board(pieces: list[tuple[int, int, PieceType, Player]]) -> Board:
    return Board.from_pieces({Position(r, f): Piece(pt, owner) for r, f, pt, owner in pieces})


def _rook_file_board(*extra: tuple[int, int, PieceType, Player]) -> Board:
    """Black king (8,4), white rook (0,4) on the same file, white king (0,0)."""
    return _make_board([
        (8, 4, PieceType.KING, Player.BLACK),
        (0, 0, PieceType.KING, Player.WHITE),
        (0, 4, PieceType.ROOK, Player.WHITE),
        *extra,
    ])


class TestFindKing:
    def test_initial_position(self) -> None:
        board = Board()
        assert find_king(board, Player.BLACK) == Position(8, 4)
        assert find_king(board, Player.WHITE) == Position(0, 4)

    def test_missing_king(self) -> None:
        assert find_king(Board.empty(), Player.BLACK) is None


class TestIsInCheck:
    def test_rook_on_open_file_gives_check(self) -> None:
        assert is_in_check(_rook_file_board(), Player.BLACK)

    def test_any_piece_between_blocks_check(self) -> None:
        for owner in Player:
            board = _rook_file_board((4, 4, PieceType.PAWN, owner))
            assert not is_in_check(board, Player.BLACK)

    def test_knight_check(self) -> None:
        board = _make_board([
            (8, 4, PieceType.KING, Player.BLACK),
            (0, 0, PieceType.KING, Player.WHITE),
            (6, 3, PieceType.KNIGHT, Player.WHITE),
        ])
        assert is_in_check(board, Player.BLACK)

    def test_initial_position_no_check(self) -> None:
        board = Board()
        assert not is_in_check(board, Player.BLACK)
        assert not is_in_check(board, Player.WHITE)

    def test_missing_king_is_not_check(self) -> None:
        board = _make_board([(0, 4, PieceType.ROOK, Player.WHITE)])
        assert not is_in_check(board, Player.BLACK)

    def test_own_pieces_never_give_check(self) -> None:
        board = _make_board([
            (8, 4, PieceType.KING, Player.BLACK),
            (0, 4, PieceType.ROOK, Player.BLACK),
        ])
        assert not is_in_check(board, Player.BLACK)


class TestPin:
    """Black king (8,4), black gold (4,4), white rook (0,4)."""

    def _board(self) -> Board:
        return _rook_file_board((4, 4, PieceType.GOLD, Player.BLACK))

    def test_not_in_check_while_gold_blocks(self) -> None:
        assert not is_in_check(self._board(), Player.BLACK)

    def test_gold_moving_off_file_exposes_king(self) -> None:
        board = self._board()
        moved = board.move_piece(Position(4, 4), Position(4, 5))
        assert is_in_check(moved, Player.BLACK)
        assert would_leave_own_king_in_check(board, Position(4, 4), Position(4, 5), Player.BLACK)

    def test_gold_capturing_rook_removes_threat(self) -> None:
        board = self._board()
        moved = board.move_piece(Position(4, 4), Position(0, 4))
        assert not is_in_check(moved, Player.BLACK)

    def test_gold_moving_along_file_stays_safe(self) -> None:
        board = self._board()
        assert not would_leave_own_king_in_check(
            board, Position(4, 4), Position(3, 4), Player.BLACK
        )

    def test_simulation_does_not_touch_original(self) -> None:
        board = self._board()
        snapshot = board.rows
        would_leave_own_king_in_check(board, Position(4, 4), Position(4, 5), Player.BLACK)
        assert board.rows == snapshot
        assert board.piece_at(Position(4, 4)) == Piece(PieceType.GOLD, Player.BLACK)


class TestSquareAttacked:
    def test_square_covered_by_pawn(self) -> None:
        board = _make_board([(3, 4, PieceType.PAWN, Player.WHITE)])
        assert is_square_attacked(board, Position(4, 4), Player.BLACK)
        assert not is_square_attacked(board, Position(2, 4), Player.BLACK)

    def test_defender_pieces_ignored(self) -> None:
        board = _make_board([(3, 4, PieceType.PAWN, Player.WHITE)])
        assert not is_square_attacked(board, Position(4, 4), Player.WHITE)

    def test_attackers_of_double_check(self) -> None:
        board = _rook_file_board((6, 3, PieceType.KNIGHT, Player.WHITE))
        attackers = attackers_of(board, Position(8, 4), Player.BLACK)
        assert set(attackers) == {Position(0, 4), Position(6, 3)}
