"""Attack and check detection.

王手判定。あるマスに相手の駒の利きがあるかを、相手の全駒の疑似合法手から調べる。
盤面は9×9固定なので全マス走査でも十分に速い。
"""

from __future__ import annotations

from shogi_online.game.board import Board
from shogi_online.game.moves import valid_moves
from shogi_online.game.position import Position
from shogi_online.game.types import Player


def find_king(board: Board, player: Player) -> Position | None:
    """プレイヤーの玉の位置を返す。玉がなければ None。"""
    return board.find_king(player)


def attackers_of(board: Board, square: Position, defending_player: Player) -> list[Position]:
    """square に利いている相手の駒の位置をすべて返す。"""
    attackers: list[Position] = []
    for pos, piece in board.pieces(defending_player.opponent):
        if square in valid_moves(board, pos, piece):
            attackers.append(pos)
    return attackers


def is_square_attacked(board: Board, square: Position, defending_player: Player) -> bool:
    """Return True if any opponent piece can move to square."""
    for pos, piece in board.pieces(defending_player.opponent):
        if square in valid_moves(board, pos, piece):
            return True
    return False


def is_in_check(board: Board, player: Player) -> bool:
    """Check if player's king is under attack.

    玉が盤上にない場合は王手ではないとみなす（正しい対局では起きない）。
    """
    king_pos = board.find_king(player)
    if king_pos is None:
        return False
    return is_square_attacked(board, king_pos, player)
