"""本将棋 (Shogi) rules engine (9x9 board)."""

from shogi_online.game.board import Board, Piece
from shogi_online.game.captured import CapturedPieces
from shogi_online.game.check import find_king, is_in_check, is_square_attacked
from shogi_online.game.checkmate import is_checkmate
from shogi_online.game.moves import valid_moves
from shogi_online.game.position import Position, is_valid_position
from shogi_online.game.promotion import (
    can_promote,
    is_enemy_territory,
    must_promote,
    should_offer_promotion,
)
from shogi_online.game.state import GameState, GameStatus, IllegalMoveError, Move, MoveType
from shogi_online.game.types import COLS, ROWS, IllegalMoveReason, PieceType, Player
from shogi_online.game.validation import (
    MoveValidation,
    can_drop_piece,
    is_valid_move,
    validate_move,
    would_leave_own_king_in_check,
)

__all__ = [
    "Board",
    "COLS",
    "CapturedPieces",
    "GameState",
    "GameStatus",
    "IllegalMoveError",
    "IllegalMoveReason",
    "Move",
    "MoveType",
    "MoveValidation",
    "Piece",
    "PieceType",
    "Player",
    "Position",
    "ROWS",
    "can_drop_piece",
    "can_promote",
    "find_king",
    "is_checkmate",
    "is_enemy_territory",
    "is_in_check",
    "is_square_attacked",
    "is_valid_move",
    "is_valid_position",
    "must_promote",
    "should_offer_promotion",
    "valid_moves",
    "validate_move",
    "would_leave_own_king_in_check",
]
