"""Board coordinates.

盤面上の位置。rank（段）は 0〜8 で 0 が一段目（後手の後段）、
file（筋）は 0〜8 で 0 が１筋（盤の右端）。
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from shogi_online.game.types import COLS, ROWS

_FILE_LABELS = ["1", "2", "3", "4", "5", "6", "7", "8", "9"]
_RANK_LABELS = ["一", "二", "三", "四", "五", "六", "七", "八", "九"]


class Position(NamedTuple):
    """An immutable (rank, file) pair."""

    rank: int
    file: int

    def offset(self, rank_delta: int, file_delta: int) -> Position:
        """相対位置のマスを返す（盤外チェックはしない）。"""
        return Position(self.rank + rank_delta, self.file + file_delta)

    @property
    def is_valid(self) -> bool:
        return is_valid_position(self)


def is_valid_position(position: Position) -> bool:
    """位置が盤面内かどうかを判定する。"""
    return 0 <= position.rank < ROWS and 0 <= position.file < COLS


def same_position(a: Position, b: Position) -> bool:
    return a.rank == b.rank and a.file == b.file


def includes_position(positions: Iterable[Position], target: Position) -> bool:
    """位置のリストに target が含まれているかを判定する。"""
    return any(same_position(p, target) for p in positions)


def position_delta(from_: Position, to: Position) -> tuple[int, int]:
    """(rank の差分, file の差分) を返す。"""
    return to.rank - from_.rank, to.file - from_.file


def position_to_str(position: Position) -> str:
    """Format a position as Japanese notation.

    例: Position(0, 0) -> "1一"、Position(4, 4) -> "5五"
    """
    return f"{_FILE_LABELS[position.file]}{_RANK_LABELS[position.rank]}"


def str_to_position(text: str) -> Position | None:
    """"5五" 形式の文字列を Position に変換する。解釈できなければ None。"""
    if len(text) != 2:
        return None
    if text[0] not in _FILE_LABELS or text[1] not in _RANK_LABELS:
        return None
    return Position(_RANK_LABELS.index(text[1]), _FILE_LABELS.index(text[0]))
