"""Pseudo-legal move generation for 本将棋.

駒ごとの移動可能なマスを返す。ここでの手は「疑似合法手」で、
指した結果自玉が王手になるかどうかは考慮しない（validation.py で判定する）。

移動方向は types.py の先手視点テーブルをプレイヤーごとに反転して使う。
1マス移動（玉・金・銀・桂・歩）は _step_moves、
遠距離移動（飛・角・香）は _slide_moves が共通で処理する。
"""

from __future__ import annotations

from collections.abc import Callable

from shogi_online.game.board import Board, Piece
from shogi_online.game.position import Position, is_valid_position
from shogi_online.game.types import (
    GOLD_WHEN_PROMOTED,
    PROMOTED_EXTRA_STEPS,
    SLIDE_MOVES,
    STEP_MOVES,
    PieceType,
    Player,
)

Directions = list[tuple[int, int]]
MoveGenerator = Callable[[Board, Position, Piece], list[Position]]


def _orient(directions: Directions, player: Player) -> Directions:
    """先手視点の方向を player の向きに変換する（後手は rank を反転）。"""
    if player == Player.BLACK:
        return list(directions)
    return [(-dr, df) for dr, df in directions]


def _oriented(table: dict[PieceType, Directions]) -> dict[tuple[PieceType, Player], Directions]:
    return {(pt, player): _orient(dirs, player) for pt, dirs in table.items() for player in Player}


# (駒種, 手番) → 方向リスト。モジュール読み込み時に一度だけ作る
_STEPS = _oriented(STEP_MOVES)
_SLIDES = _oriented(SLIDE_MOVES)
_EXTRA_STEPS = _oriented(PROMOTED_EXTRA_STEPS)


def _step_moves(
    board: Board,
    from_: Position,
    owner: Player,
    directions: Directions,
) -> list[Position]:
    """Single-step (or jump) destinations not holding a friendly piece."""
    moves: list[Position] = []
    for dr, df in directions:
        to = from_.offset(dr, df)
        if not is_valid_position(to):
            continue
        target = board.piece_at(to)
        if target is None or target.owner != owner:
            moves.append(to)
    return moves


def _slide_moves(
    board: Board,
    from_: Position,
    owner: Player,
    directions: Directions,
) -> list[Position]:
    """Slide in each direction until blocked.

    味方の駒の手前で止まり、相手の駒はそのマスを含めて止まる。
    """
    moves: list[Position] = []
    for dr, df in directions:
        to = from_.offset(dr, df)
        while is_valid_position(to):
            target = board.piece_at(to)
            if target is not None and target.owner == owner:
                break
            moves.append(to)
            if target is not None:
                break  # 相手の駒を取って止まる
            to = to.offset(dr, df)
    return moves


def king_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """玉: 全8方向に1マス。"""
    return _step_moves(board, from_, piece.owner, _STEPS[(PieceType.KING, piece.owner)])


def gold_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """金（および成銀・成桂・成香・と）: 斜め後ろ以外の6方向に1マス。"""
    return _step_moves(board, from_, piece.owner, _STEPS[(PieceType.GOLD, piece.owner)])


def silver_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """銀: 前と斜め4方向に1マス。"""
    return _step_moves(board, from_, piece.owner, _STEPS[(PieceType.SILVER, piece.owner)])


def knight_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """桂: 2マス前の左右。間の駒は飛び越える。"""
    return _step_moves(board, from_, piece.owner, _STEPS[(PieceType.KNIGHT, piece.owner)])


def pawn_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """歩: 1マス前のみ。"""
    return _step_moves(board, from_, piece.owner, _STEPS[(PieceType.PAWN, piece.owner)])


def lance_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """香: 前方に何マスでも。"""
    return _slide_moves(board, from_, piece.owner, _SLIDES[(PieceType.LANCE, piece.owner)])


def rook_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """飛: 縦横に何マスでも。龍（成り飛）は斜め1マスも動ける。"""
    moves = _slide_moves(board, from_, piece.owner, _SLIDES[(PieceType.ROOK, piece.owner)])
    if piece.is_promoted:
        extra = _EXTRA_STEPS[(PieceType.ROOK, piece.owner)]
        moves.extend(_step_moves(board, from_, piece.owner, extra))
    return moves


def bishop_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """角: 斜めに何マスでも。馬（成り角）は縦横1マスも動ける。"""
    moves = _slide_moves(board, from_, piece.owner, _SLIDES[(PieceType.BISHOP, piece.owner)])
    if piece.is_promoted:
        extra = _EXTRA_STEPS[(PieceType.BISHOP, piece.owner)]
        moves.extend(_step_moves(board, from_, piece.owner, extra))
    return moves


# 全駒種を網羅する（デフォルト分岐は持たない）
_GENERATORS: dict[PieceType, MoveGenerator] = {
    PieceType.KING: king_moves,
    PieceType.ROOK: rook_moves,
    PieceType.BISHOP: bishop_moves,
    PieceType.GOLD: gold_moves,
    PieceType.SILVER: silver_moves,
    PieceType.KNIGHT: knight_moves,
    PieceType.LANCE: lance_moves,
    PieceType.PAWN: pawn_moves,
}


def valid_moves(board: Board, from_: Position, piece: Piece) -> list[Position]:
    """Return the pseudo-legal destinations of piece standing on from_.

    成銀・成桂・成香・と金は元の駒種に関係なく金の動きになる。
    """
    if piece.is_promoted and piece.piece_type in GOLD_WHEN_PROMOTED:
        return gold_moves(board, from_, piece)
    return _GENERATORS[piece.piece_type](board, from_, piece)
