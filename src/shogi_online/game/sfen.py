"""SFEN positions and USI move notation.

SFEN（局面の文字列表現）と USI 形式の指し手文字列の変換。

SFEN の例: "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b - 1"
  - 盤面は一段目から九段目まで "/" 区切り、各段は９筋 → １筋の順
  - 大文字 = 先手、小文字 = 後手、"+" 付き = 成駒
  - 手番（b/w）、持ち駒（"-" はなし、例 "2Pb"）、手数

USI の指し手の例: "7g7f"（７七→７六）、"8h2b+"（成り）、"P*5e"（歩を５五に打つ）
"""

from __future__ import annotations

from dataclasses import dataclass

from shogi_online.game.board import Board, Piece
from shogi_online.game.captured import CapturedPieces
from shogi_online.game.position import Position, is_valid_position
from shogi_online.game.types import COLS, HAND_PIECE_TYPES, ROWS, PieceType, Player

INITIAL_SFEN = "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b - 1"

PIECE_TO_SFEN: dict[PieceType, str] = {
    PieceType.KING: "K",
    PieceType.ROOK: "R",
    PieceType.BISHOP: "B",
    PieceType.GOLD: "G",
    PieceType.SILVER: "S",
    PieceType.KNIGHT: "N",
    PieceType.LANCE: "L",
    PieceType.PAWN: "P",
}
SFEN_TO_PIECE: dict[str, PieceType] = {v: k for k, v in PIECE_TO_SFEN.items()}

_RANK_LETTERS = "abcdefghi"


@dataclass(frozen=True)
class SFENData:
    """Result of parsing an SFEN string."""

    board: Board
    turn: Player
    captured: CapturedPieces
    move_number: int = 1


@dataclass(frozen=True)
class UsiMove:
    """A move in USI notation.

    盤上の手なら from_ を持ち、打つ手なら from_ が None で drop_type を持つ。
    """

    to: Position
    from_: Position | None = None
    drop_type: PieceType | None = None
    promote: bool = False

    @property
    def is_drop(self) -> bool:
        return self.from_ is None


# ========================================
# SFEN
# ========================================


def parse_sfen(text: str) -> SFENData:
    """Parse an SFEN string. 不正な文字列は ValueError。"""
    fields = text.split()
    if len(fields) not in (3, 4):
        raise ValueError(f"Invalid SFEN: {text!r}")
    board = _parse_board(fields[0])

    if fields[1] == "b":
        turn = Player.BLACK
    elif fields[1] == "w":
        turn = Player.WHITE
    else:
        raise ValueError(f"Invalid SFEN turn: {fields[1]!r}")

    captured = _parse_hands(fields[2])

    move_number = 1
    if len(fields) == 4:
        try:
            move_number = int(fields[3])
        except ValueError:
            raise ValueError(f"Invalid SFEN move number: {fields[3]!r}") from None
    return SFENData(board=board, turn=turn, captured=captured, move_number=move_number)


def _parse_board(text: str) -> Board:
    ranks = text.split("/")
    if len(ranks) != ROWS:
        raise ValueError(f"SFEN board must have {ROWS} ranks: {text!r}")

    pieces: dict[Position, Piece] = {}
    for r, rank_text in enumerate(ranks):
        file = COLS - 1  # ９筋から
        promoted = False
        for ch in rank_text:
            if ch.isdigit():
                if promoted:
                    raise ValueError(f"Dangling '+' in SFEN rank: {rank_text!r}")
                if ch == "0":
                    raise ValueError(f"Zero-length gap in SFEN rank: {rank_text!r}")
                file -= int(ch)
                continue
            if ch == "+":
                promoted = True
                continue
            piece_type = SFEN_TO_PIECE.get(ch.upper())
            if piece_type is None or file < 0:
                raise ValueError(f"Invalid SFEN rank: {rank_text!r}")
            if promoted and piece_type in (PieceType.KING, PieceType.GOLD):
                raise ValueError(f"{piece_type.name} cannot be promoted")
            owner = Player.BLACK if ch.isupper() else Player.WHITE
            pieces[Position(r, file)] = Piece(piece_type, owner, promoted)
            promoted = False
            file -= 1
        if file != -1 or promoted:
            raise ValueError(f"SFEN rank does not cover {COLS} files: {rank_text!r}")
    return Board.from_pieces(pieces)


def _parse_hands(text: str) -> CapturedPieces:
    captured = CapturedPieces()
    if text == "-":
        return captured
    count = ""
    for ch in text:
        if ch.isdigit():
            count += ch
            continue
        piece_type = SFEN_TO_PIECE.get(ch.upper())
        if piece_type is None or piece_type == PieceType.KING:
            raise ValueError(f"Invalid SFEN hand: {text!r}")
        if count and int(count) == 0:
            raise ValueError(f"Zero count in SFEN hand: {text!r}")
        owner = Player.BLACK if ch.isupper() else Player.WHITE
        for _ in range(int(count) if count else 1):
            captured = captured.add(owner, piece_type)
        count = ""
    if count:
        raise ValueError(f"Invalid SFEN hand: {text!r}")
    return captured


def to_sfen(
    board: Board,
    turn: Player,
    captured: CapturedPieces | None = None,
    move_number: int = 1,
) -> str:
    """局面を SFEN 文字列に変換する。"""
    ranks: list[str] = []
    for r in range(ROWS):
        out = ""
        empty = 0
        for f in range(COLS - 1, -1, -1):
            piece = board.piece_at(Position(r, f))
            if piece is None:
                empty += 1
                continue
            if empty:
                out += str(empty)
                empty = 0
            out += _piece_to_sfen(piece)
        if empty:
            out += str(empty)
        ranks.append(out)

    hands = _format_hands(captured or CapturedPieces())
    side = "b" if turn == Player.BLACK else "w"
    return f"{'/'.join(ranks)} {side} {hands} {move_number}"


def _piece_to_sfen(piece: Piece) -> str:
    ch = PIECE_TO_SFEN[piece.piece_type]
    if piece.owner == Player.WHITE:
        ch = ch.lower()
    return f"+{ch}" if piece.is_promoted else ch


def _format_hands(captured: CapturedPieces) -> str:
    out = ""
    for player in Player:
        for piece_type in HAND_PIECE_TYPES:
            n = captured.count(player, piece_type)
            if n == 0:
                continue
            ch = PIECE_TO_SFEN[piece_type]
            if player == Player.WHITE:
                ch = ch.lower()
            out += f"{n}{ch}" if n > 1 else ch
    return out or "-"


# ========================================
# USI の指し手
# ========================================


def _parse_square(text: str) -> Position:
    if len(text) != 2 or not text[0].isdigit() or text[1] not in _RANK_LETTERS:
        raise ValueError(f"Invalid USI square: {text!r}")
    pos = Position(_RANK_LETTERS.index(text[1]), int(text[0]) - 1)
    if not is_valid_position(pos):
        raise ValueError(f"Invalid USI square: {text!r}")
    return pos


def _format_square(position: Position) -> str:
    return f"{position.file + 1}{_RANK_LETTERS[position.rank]}"


def parse_usi(text: str) -> UsiMove:
    """Parse a USI move string such as "7g7f", "8h2b+" or "P*5e"."""
    text = text.strip()
    if len(text) == 4 and text[1] == "*":
        drop_type = SFEN_TO_PIECE.get(text[0])
        if drop_type is None or drop_type == PieceType.KING:
            raise ValueError(f"Invalid USI drop: {text!r}")
        return UsiMove(to=_parse_square(text[2:]), drop_type=drop_type)

    promote = text.endswith("+")
    body = text[:-1] if promote else text
    if len(body) != 4:
        raise ValueError(f"Invalid USI move: {text!r}")
    return UsiMove(
        to=_parse_square(body[2:]),
        from_=_parse_square(body[:2]),
        promote=promote,
    )


def format_usi(move: UsiMove) -> str:
    """UsiMove を USI 形式の文字列に戻す。"""
    if move.from_ is None:
        assert move.drop_type is not None
        return f"{PIECE_TO_SFEN[move.drop_type]}*{_format_square(move.to)}"
    suffix = "+" if move.promote else ""
    return f"{_format_square(move.from_)}{_format_square(move.to)}{suffix}"
