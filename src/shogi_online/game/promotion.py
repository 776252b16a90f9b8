"""Promotion rules.

成りの判定。敵陣（相手側の3段）に入る・敵陣から出る・敵陣内で動く手で成れる。
歩・香が最奥段、桂が奥2段に達する場合はそれ以上動けないので成りが強制される。
"""

from __future__ import annotations

from shogi_online.game.board import Piece
from shogi_online.game.position import Position
from shogi_online.game.types import PROMOTABLE_PIECES, PieceType, Player


def can_promote(piece_type: PieceType, is_promoted: bool = False) -> bool:
    """成れる駒かどうか。成り済みの駒・王・金は False。"""
    if is_promoted:
        return False
    return piece_type in PROMOTABLE_PIECES


def is_enemy_territory(position: Position, player: Player) -> bool:
    """Check if a rank is in the promotion zone (enemy's 3 ranks)."""
    if player == Player.BLACK:
        return position.rank <= 2
    return position.rank >= 6


def has_no_legal_destination(piece_type: PieceType, to: Position, player: Player) -> bool:
    """Return True if an unpromoted piece on `to` could never move again.

    歩・香は最奥段、桂は奥2段でこれ以上前に進めない。
    行き所のない駒（打ち）と強制成り（移動）の両方で使う。
    """
    if piece_type in (PieceType.PAWN, PieceType.LANCE):
        if player == Player.BLACK:
            return to.rank == 0
        return to.rank == 8
    if piece_type == PieceType.KNIGHT:
        if player == Player.BLACK:
            return to.rank <= 1
        return to.rank >= 7
    return False


def should_offer_promotion(from_: Position, to: Position, piece: Piece) -> bool:
    """成るかどうかをプレイヤーに選ばせる手かどうか。"""
    if not can_promote(piece.piece_type, piece.is_promoted):
        return False
    return is_enemy_territory(from_, piece.owner) or is_enemy_territory(to, piece.owner)


def must_promote(piece_type: PieceType, to: Position, player: Player) -> bool:
    """Check if promotion is mandatory (piece has no further moves)."""
    return has_no_legal_destination(piece_type, to, player)
