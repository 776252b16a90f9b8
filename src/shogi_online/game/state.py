"""Game state holder for 本将棋.

対局状態。盤面・持ち駒・手番・棋譜を持つイミュータブルなデータ構造で、
指し手を受け取るとルールエンジン（validation.py）で判定し、新しい状態を返す。
反則手は IllegalMoveError を送出する（理由は reason に入る）。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from shogi_online.game.board import Board, Piece
from shogi_online.game.captured import CapturedPieces
from shogi_online.game.check import is_in_check
from shogi_online.game.checkmate import is_checkmate
from shogi_online.game.position import Position
from shogi_online.game.promotion import must_promote, should_offer_promotion
from shogi_online.game.sfen import INITIAL_SFEN, parse_sfen, to_sfen
from shogi_online.game.types import IllegalMoveReason, PieceType, Player
from shogi_online.game.validation import (
    can_drop_piece,
    legal_destinations,
    legal_drop_squares,
    validate_move,
)


class MoveType(str, Enum):
    MOVE = "move"
    DROP = "drop"


class GameStatus(str, Enum):
    PLAYING = "playing"          # 対局中
    CHECK = "check"              # 王手
    CHECKMATE = "checkmate"      # 詰み
    RESIGNATION = "resignation"  # 投了


class IllegalMoveError(ValueError):
    """Raised when a move or drop is rejected by the rules."""

    def __init__(self, reason: IllegalMoveReason) -> None:
        super().__init__(reason.message)
        self.reason = reason


@dataclass(frozen=True)
class Move:
    """A recorded move (棋譜の1手).

    from_ が None なら持ち駒を打つ手。表示・履歴用でルール判定には使わない。
    """

    kind: MoveType
    to: Position
    piece_type: PieceType
    player: Player
    from_: Position | None = None
    was_promoted: bool = False  # 移動前に成っていたか
    promote: bool = False       # この手で成るか
    captured: PieceType | None = None
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )


@dataclass(frozen=True)
class GameState:
    """Immutable game state.

    Terminal conditions（終局条件）:
    1. 詰み: 手番側に王手を解消する手がない
    2. 投了
    """

    board: Board = field(default_factory=Board)
    captured: CapturedPieces = field(default_factory=CapturedPieces)
    current_turn: Player = Player.BLACK
    history: tuple[Move, ...] = ()
    status: GameStatus = GameStatus.PLAYING
    resigned: Player | None = None
    move_number: int = 1
    previous: GameState | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_sfen(cls, text: str = INITIAL_SFEN) -> GameState:
        """SFEN 文字列から対局状態を作る。王手・詰みの状態も判定する。"""
        data = parse_sfen(text)
        return cls(
            board=data.board,
            captured=data.captured,
            current_turn=data.turn,
            status=_status_for(data.board, data.captured, data.turn),
            move_number=data.move_number,
        )

    def to_sfen(self) -> str:
        return to_sfen(self.board, self.current_turn, self.captured, self.move_number)

    @property
    def is_over(self) -> bool:
        return self.status in (GameStatus.CHECKMATE, GameStatus.RESIGNATION)

    @property
    def is_check(self) -> bool:
        return self.status in (GameStatus.CHECK, GameStatus.CHECKMATE)

    @property
    def winner(self) -> Player | None:
        """勝者を返す。対局中は None。"""
        if self.status == GameStatus.CHECKMATE:
            return self.current_turn.opponent  # 詰まされた側の負け
        if self.status == GameStatus.RESIGNATION and self.resigned is not None:
            return self.resigned.opponent
        return None

    @property
    def last_move(self) -> Move | None:
        return self.history[-1] if self.history else None

    def legal_destinations(self, position: Position) -> list[Position]:
        """手番側の駒を選んだときの合法な移動先。"""
        if self.is_over:
            return []
        return legal_destinations(self.board, position, self.current_turn)

    def legal_drop_squares(self, piece_type: PieceType) -> list[Position]:
        """持ち駒を打てるマス。持っていなければ空。"""
        if self.is_over or not self.captured.has(self.current_turn, piece_type):
            return []
        return legal_drop_squares(self.board, piece_type, self.current_turn)

    def move(self, from_: Position, to: Position, promote: bool = False) -> GameState:
        """Apply a board move and return the next state.

        成りが強制される手は promote=False でも成る。
        """
        if self.is_over:
            raise IllegalMoveError(IllegalMoveReason.GAME_OVER)
        piece = self.board.piece_at(from_) if from_.is_valid else None
        if piece is not None and piece.owner != self.current_turn:
            raise IllegalMoveError(IllegalMoveReason.WRONG_TURN)

        result = validate_move(self.board, from_, to, self.current_turn)
        if not result.is_valid:
            assert result.reason is not None
            raise IllegalMoveError(result.reason)
        assert piece is not None

        if promote and not should_offer_promotion(from_, to, piece):
            raise IllegalMoveError(IllegalMoveReason.CANNOT_PROMOTE)
        if not piece.is_promoted and must_promote(piece.piece_type, to, piece.owner):
            promote = True

        target = self.board.piece_at(to)
        captured = self.captured
        if target is not None:
            # 取った駒は成っていない駒として持ち駒に加える
            captured = captured.add(self.current_turn, target.piece_type)

        record = Move(
            kind=MoveType.MOVE,
            from_=from_,
            to=to,
            piece_type=piece.piece_type,
            player=self.current_turn,
            was_promoted=piece.is_promoted,
            promote=promote,
            captured=target.piece_type if target is not None else None,
        )
        return self._advance(self.board.move_piece(from_, to, promote), captured, record)

    def drop(self, piece_type: PieceType, to: Position) -> GameState:
        """Drop a piece from hand and return the next state."""
        if self.is_over:
            raise IllegalMoveError(IllegalMoveReason.GAME_OVER)
        if not self.captured.has(self.current_turn, piece_type):
            raise IllegalMoveError(IllegalMoveReason.NOT_IN_HAND)

        result = can_drop_piece(self.board, piece_type, to, self.current_turn)
        if not result.is_valid:
            assert result.reason is not None
            raise IllegalMoveError(result.reason)

        record = Move(
            kind=MoveType.DROP,
            to=to,
            piece_type=piece_type,
            player=self.current_turn,
        )
        board = self.board.set_piece(to, Piece(piece_type, self.current_turn))
        captured = self.captured.remove(self.current_turn, piece_type)
        return self._advance(board, captured, record)

    def resign(self) -> GameState:
        """手番側が投了した状態を返す。"""
        if self.is_over:
            raise IllegalMoveError(IllegalMoveReason.GAME_OVER)
        return GameState(
            board=self.board,
            captured=self.captured,
            current_turn=self.current_turn,
            history=self.history,
            status=GameStatus.RESIGNATION,
            resigned=self.current_turn,
            move_number=self.move_number,
            previous=self,
        )

    def undo(self) -> GameState:
        """1手戻した状態を返す。"""
        if self.previous is None:
            raise ValueError("Nothing to undo")
        return self.previous

    def _advance(self, board: Board, captured: CapturedPieces, record: Move) -> GameState:
        next_turn = self.current_turn.opponent
        return GameState(
            board=board,
            captured=captured,
            current_turn=next_turn,  # 手番交代
            history=self.history + (record,),
            status=_status_for(board, captured, next_turn),
            move_number=self.move_number + 1,
            previous=self,
        )


def _status_for(board: Board, captured: CapturedPieces, player: Player) -> GameStatus:
    """player の手番になった局面の状態（王手・詰み）を判定する。"""
    if not is_in_check(board, player):
        return GameStatus.PLAYING
    if is_checkmate(board, player, captured):
        return GameStatus.CHECKMATE
    return GameStatus.CHECK
