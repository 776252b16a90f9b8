"""Legality checks for drops and board moves (禁じ手の判定).

どの判定も盤面を変更せず、結果を MoveValidation で返す。
反則手は通常のユーザ入力なので例外は送出しない。

打つ手の判定順（最初に失敗した理由を返す）:
  盤外 → 駒がある → 行き所のない駒 → 二歩 → 打ち歩詰め → 王手放置
"""

from __future__ import annotations

from dataclasses import dataclass

from shogi_online.game.board import Board, Piece
from shogi_online.game.check import is_in_check
from shogi_online.game.checkmate import is_checkmate
from shogi_online.game.moves import valid_moves
from shogi_online.game.position import Position, is_valid_position
from shogi_online.game.promotion import has_no_legal_destination
from shogi_online.game.types import COLS, ROWS, IllegalMoveReason, PieceType, Player


@dataclass(frozen=True)
class MoveValidation:
    """Verdict of a legality check.

    is_valid が False のとき reason に反則の種類が入る。
    """

    is_valid: bool
    reason: IllegalMoveReason | None = None

    @classmethod
    def ok(cls) -> MoveValidation:
        return cls(True)

    @classmethod
    def fail(cls, reason: IllegalMoveReason) -> MoveValidation:
        return cls(False, reason)

    @property
    def message(self) -> str | None:
        """反則理由の日本語メッセージ。合法なら None。"""
        return self.reason.message if self.reason is not None else None

    def __bool__(self) -> bool:
        return self.is_valid


# ========================================
# 二歩 (Nifu)
# ========================================


def is_nifu(board: Board, file: int, player: Player) -> bool:
    """同じ筋に自分の未成の歩が既にあれば True（と金・相手の歩は数えない）。"""
    return board.count_pawns_in_file(player, file) > 0


# ========================================
# 行き所のない駒 (Ikidononai)
# ========================================


def is_ikidononai(piece_type: PieceType, to: Position, player: Player) -> bool:
    """歩・香を最奥段に、桂を奥2段に打つ手なら True。"""
    return has_no_legal_destination(piece_type, to, player)


# ========================================
# 打ち歩詰め (Uchifuzume)
# ========================================


def is_uchifuzume(board: Board, to: Position, player: Player) -> bool:
    """Return True if dropping a pawn on `to` checkmates the opponent.

    打った歩が原因で詰む場合のみ反則。歩を打つ前の盤面（歩を取り除いた盤面）で
    相手が既に王手・詰みの状態なら、その歩による詰みではないので反則にならない。
    """
    if not is_valid_position(to):
        return False
    opponent = player.opponent
    if board.find_king(opponent) is None:
        return False

    dropped = board.set_piece(to, Piece(PieceType.PAWN, player))
    if not is_in_check(dropped, opponent):
        return False  # 王手にならない
    if not is_checkmate(dropped, opponent):
        return False  # 逃げ道がある

    # 打った歩を取り除いた盤面 = 打つ前の盤面
    if is_in_check(board, opponent) and is_checkmate(board, opponent):
        return False
    return True


# ========================================
# 王手放置 (Oute Houchi)
# ========================================


def is_oute_houchi(board: Board, player: Player) -> bool:
    """player の玉に王手がかかったままなら True。"""
    return is_in_check(board, player)


def would_leave_own_king_in_check(
    board: Board,
    from_: Position,
    to: Position,
    player: Player,
) -> bool:
    """Simulate the move and report whether player's king is then attacked.

    ピンされた駒を動かす手や、王手を無視する手を検出する。
    """
    if not is_valid_position(from_) or not is_valid_position(to):
        return False
    if board.piece_at(from_) is None:
        return False
    return is_oute_houchi(board.move_piece(from_, to), player)


# ========================================
# 統合的な判定
# ========================================


def can_drop_piece(
    board: Board,
    piece_type: PieceType,
    to: Position,
    player: Player,
) -> MoveValidation:
    """持ち駒を打つ手の合法性を判定する。"""
    if piece_type == PieceType.KING:
        raise ValueError("King cannot be dropped")

    if not is_valid_position(to):
        return MoveValidation.fail(IllegalMoveReason.OUT_OF_BOUNDS)
    if board.piece_at(to) is not None:
        return MoveValidation.fail(IllegalMoveReason.OCCUPIED)
    if is_ikidononai(piece_type, to, player):
        return MoveValidation.fail(IllegalMoveReason.NO_LEGAL_DESTINATION)
    if piece_type == PieceType.PAWN:
        if is_nifu(board, to.file, player):
            return MoveValidation.fail(IllegalMoveReason.DOUBLE_PAWN)
        if is_uchifuzume(board, to, player):
            return MoveValidation.fail(IllegalMoveReason.DROPPED_PAWN_CHECKMATE)

    if is_oute_houchi(board.set_piece(to, Piece(piece_type, player)), player):
        return MoveValidation.fail(IllegalMoveReason.LEAVES_KING_IN_CHECK)
    return MoveValidation.ok()


def is_valid_move(
    board: Board,
    from_: Position,
    to: Position,
    player: Player,
) -> MoveValidation:
    """Check the shape of a board move (ownership, bounds, reachability).

    自玉が王手になるかどうかは見ない。would_leave_own_king_in_check と
    組み合わせて使うか、両方を行う validate_move を使う。
    """
    if not is_valid_position(from_) or not is_valid_position(to):
        return MoveValidation.fail(IllegalMoveReason.OUT_OF_BOUNDS)

    piece = board.piece_at(from_)
    if piece is None or piece.owner != player:
        return MoveValidation.fail(IllegalMoveReason.NOT_OWNER)

    target = board.piece_at(to)
    if target is not None and target.owner == player:
        return MoveValidation.fail(IllegalMoveReason.OCCUPIED)

    if to not in valid_moves(board, from_, piece):
        return MoveValidation.fail(IllegalMoveReason.WRONG_SHAPE)
    return MoveValidation.ok()


def validate_move(
    board: Board,
    from_: Position,
    to: Position,
    player: Player,
) -> MoveValidation:
    """駒を動かす手の完全な合法性判定（形 + 王手放置）。"""
    result = is_valid_move(board, from_, to, player)
    if not result.is_valid:
        return result
    if would_leave_own_king_in_check(board, from_, to, player):
        return MoveValidation.fail(IllegalMoveReason.LEAVES_KING_IN_CHECK)
    return result


def legal_destinations(board: Board, from_: Position, player: Player) -> list[Position]:
    """from_ の駒の合法な移動先（自玉を王手にさらす手を除く）。"""
    if not is_valid_position(from_):
        return []
    piece = board.piece_at(from_)
    if piece is None or piece.owner != player:
        return []
    return [
        to for to in valid_moves(board, from_, piece)
        if not would_leave_own_king_in_check(board, from_, to, player)
    ]


def legal_drop_squares(board: Board, piece_type: PieceType, player: Player) -> list[Position]:
    """piece_type を打てるマスをすべて返す。"""
    squares: list[Position] = []
    for r in range(ROWS):
        for f in range(COLS):
            to = Position(r, f)
            if can_drop_piece(board, piece_type, to, player).is_valid:
                squares.append(to)
    return squares
