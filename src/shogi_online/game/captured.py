"""Captured pieces (持ち駒).

両プレイヤーの持ち駒を駒種ごとの枚数で管理するイミュータブルなデータ構造。
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from shogi_online.game.types import HAND_PIECE_TYPES, PieceType, Player

_EMPTY = (0,) * len(HAND_PIECE_TYPES)


@dataclass(frozen=True)
class CapturedPieces:
    """Per-player counters for each droppable piece type.

    black / white: HAND_PIECE_TYPES の順に並んだ枚数のタプル。
    取った駒は必ず成っていない元の駒種として数える。
    """

    black: tuple[int, ...] = _EMPTY
    white: tuple[int, ...] = _EMPTY

    def _counts(self, player: Player) -> tuple[int, ...]:
        return self.black if player == Player.BLACK else self.white

    def _replace(self, player: Player, counts: tuple[int, ...]) -> CapturedPieces:
        if player == Player.BLACK:
            return CapturedPieces(black=counts, white=self.white)
        return CapturedPieces(black=self.black, white=counts)

    def count(self, player: Player, piece_type: PieceType) -> int:
        if piece_type == PieceType.KING:
            return 0
        return self._counts(player)[HAND_PIECE_TYPES.index(piece_type)]

    def has(self, player: Player, piece_type: PieceType) -> bool:
        return self.count(player, piece_type) > 0

    def add(self, player: Player, piece_type: PieceType) -> CapturedPieces:
        """持ち駒を1枚増やした新しい CapturedPieces を返す。"""
        if piece_type == PieceType.KING:
            raise ValueError("King cannot be held in hand")
        idx = HAND_PIECE_TYPES.index(piece_type)
        counts = list(self._counts(player))
        counts[idx] += 1
        return self._replace(player, tuple(counts))

    def remove(self, player: Player, piece_type: PieceType) -> CapturedPieces:
        """持ち駒から1枚取り除いた新しい CapturedPieces を返す。"""
        if not self.has(player, piece_type):
            raise ValueError(f"{piece_type.name} is not in {player.name}'s hand")
        idx = HAND_PIECE_TYPES.index(piece_type)
        counts = list(self._counts(player))
        counts[idx] -= 1
        return self._replace(player, tuple(counts))

    def held(self, player: Player) -> Iterator[tuple[PieceType, int]]:
        """1枚以上ある駒種を (駒種, 枚数) で列挙する。"""
        for pt, n in zip(HAND_PIECE_TYPES, self._counts(player)):
            if n > 0:
                yield pt, n

    def is_empty(self, player: Player) -> bool:
        return not any(self._counts(player))
