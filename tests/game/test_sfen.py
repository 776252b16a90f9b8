"""Tests for SFEN and USI notation."""

from __future__ import annotations

import pytest

from shogi_online.game.board import Board, Piece
from shogi_online.game.captured import CapturedPieces
from shogi_online.game.position import Position
from shogi_online.game.sfen import (
    INITIAL_SFEN,
    UsiMove,
    format_usi,
    parse_sfen,
    parse_usi,
    to_sfen,
)
from shogi_online.game.types import PieceType, Player


class TestParseSfen:
    def test_initial_position(self) -> None:
        data = parse_sfen(INITIAL_SFEN)
        assert data.board == Board()
        assert data.turn == Player.BLACK
        assert data.captured == CapturedPieces()
        assert data.move_number == 1

    def test_hands(self) -> None:
        data = parse_sfen("4k4/9/9/9/9/9/9/9/4K4 w 2Pb 3")
        assert data.turn == Player.WHITE
        assert data.captured.count(Player.BLACK, PieceType.PAWN) == 2
        assert data.captured.count(Player.WHITE, PieceType.BISHOP) == 1
        assert data.move_number == 3

    def test_promoted_piece(self) -> None:
        data = parse_sfen("4k4/9/9/9/9/9/9/4+R4/4K4 b - 1")
        assert data.board.piece_at(Position(7, 4)) == Piece(PieceType.ROOK, Player.BLACK, True)

    def test_move_number_optional(self) -> None:
        assert parse_sfen("4k4/9/9/9/9/9/9/9/4K4 b -").move_number == 1

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "startpos",
            "9/9/9/9/9/9/9/9 b - 1",
            "4k4/9/9/9/9/9/9/9/4K4 x - 1",
            "4k5/9/9/9/9/9/9/9/4K4 b - 1",
            "4k3/9/9/9/9/9/9/9/4K4 b - 1",
            "4+k4/9/9/9/9/9/9/9/4K4 b - 1",
            "4k4/9/9/9/9/9/9/9/4K3+ b - 1",
            "4x4/9/9/9/9/9/9/9/4K4 b - 1",
            "4k4/9/9/9/9/9/9/9/4K4 b 2 1",
            "4k4/9/9/9/9/9/9/9/4K4 b K 1",
            "4k4/9/9/9/9/9/9/9/4K4 b - one",
            "4k04/9/9/9/9/9/9/9/4K4 b - 1",
            "4k4/9/9/9/9/9/9/9/4K4 b 0P 1",
            "4k4/9/9/9/9/9/9/9/4K4 b 00p 1",
        ],
    )
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_sfen(text)


class TestToSfen:
    def test_initial_round_trip(self) -> None:
        assert to_sfen(Board(), Player.BLACK) == INITIAL_SFEN

    def test_hands_and_promoted_pieces(self) -> None:
        text = "4k4/9/9/9/4+p4/9/9/4+R4/4K4 w R2Pb 12"
        data = parse_sfen(text)
        assert to_sfen(data.board, data.turn, data.captured, data.move_number) == text


class TestUsi:
    def test_board_move(self) -> None:
        move = parse_usi("7g7f")
        assert move == UsiMove(to=Position(5, 6), from_=Position(6, 6))
        assert not move.is_drop

    def test_promotion(self) -> None:
        move = parse_usi("8h2b+")
        assert move.from_ == Position(7, 7)
        assert move.to == Position(1, 1)
        assert move.promote

    def test_drop(self) -> None:
        move = parse_usi("P*5e")
        assert move.is_drop
        assert move.drop_type == PieceType.PAWN
        assert move.to == Position(4, 4)

    @pytest.mark.parametrize("text", ["7g7f", "8h2b+", "P*5e", "R*1a"])
    def test_format(self, text: str) -> None:
        assert format_usi(parse_usi(text)) == text

    @pytest.mark.parametrize("text", ["", "7g7", "K*5e", "X*5e", "0a1a", "7j7f", "7g7f7"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_usi(text)
