"""Checkmate detection.

詰み判定。王手をかけられた側に、王手を解消する手が1つもなければ詰み。

探索の順序:
1. 玉が逃げる手
2. 玉以外の駒を動かす手（合い駒・王手している駒を取る）
3. 持ち駒を打つ手（合い駒）。captured を渡したときのみ
すべて盤面のコピー上でシミュレーションするので、呼び出し元の盤面は変化しない。
"""

from __future__ import annotations

from shogi_online.game.board import Board, Piece
from shogi_online.game.captured import CapturedPieces
from shogi_online.game.check import is_square_attacked
from shogi_online.game.moves import valid_moves
from shogi_online.game.position import Position
from shogi_online.game.promotion import has_no_legal_destination
from shogi_online.game.types import COLS, ROWS, PieceType, Player


def is_checkmate(
    board: Board,
    player: Player,
    captured: CapturedPieces | None = None,
) -> bool:
    """Return True if player has no move that escapes the attack on the king.

    王手がかかっていることが前提。かかっていなければ通常は逃げ道が見つかり False になる。
    玉がない盤面は詰みとはみなさない。
    """
    king_pos = board.find_king(player)
    if king_pos is None:
        return False
    king = board.piece_at(king_pos)
    assert king is not None

    if _king_can_escape(board, king_pos, king):
        return False
    if _piece_can_defend(board, king_pos, player):
        return False
    if captured is not None and _drop_can_defend(board, king_pos, player, captured):
        return False
    return True


def _king_can_escape(board: Board, king_pos: Position, king: Piece) -> bool:
    for to in valid_moves(board, king_pos, king):
        test_board = board.move_piece(king_pos, to)
        if not is_square_attacked(test_board, to, king.owner):
            return True
    return False


def _piece_can_defend(board: Board, king_pos: Position, player: Player) -> bool:
    """玉以外の駒を動かして王手を防げるか。"""
    for from_, piece in board.pieces(player):
        if piece.piece_type == PieceType.KING:
            continue
        for to in valid_moves(board, from_, piece):
            test_board = board.move_piece(from_, to)
            if not is_square_attacked(test_board, king_pos, player):
                return True
    return False


def _drop_can_defend(
    board: Board,
    king_pos: Position,
    player: Player,
    captured: CapturedPieces,
) -> bool:
    """持ち駒を打って王手を防げるか（合い駒）。"""
    for piece_type, _ in captured.held(player):
        for r in range(ROWS):
            for f in range(COLS):
                to = Position(r, f)
                if board.piece_at(to) is not None:
                    continue
                if has_no_legal_destination(piece_type, to, player):
                    continue
                if piece_type == PieceType.PAWN and board.count_pawns_in_file(player, f) > 0:
                    continue
                test_board = board.set_piece(to, Piece(piece_type, player))
                if not is_square_attacked(test_board, king_pos, player):
                    return True
    return False
