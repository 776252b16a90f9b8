"""Terminal display for 本将棋."""

from __future__ import annotations

from shogi_online.game.board import Board, Piece
from shogi_online.game.captured import CapturedPieces
from shogi_online.game.position import Position, position_to_str
from shogi_online.game.state import Move, MoveType
from shogi_online.game.types import COLS, ROWS, PieceType, Player

# 駒の日本語表記（成駒の表記は成れる駒のみ）
PIECE_NAMES_JA: dict[PieceType, tuple[str, str | None]] = {
    PieceType.KING: ("玉", None),
    PieceType.ROOK: ("飛", "竜"),
    PieceType.BISHOP: ("角", "馬"),
    PieceType.GOLD: ("金", None),
    PieceType.SILVER: ("銀", "成銀"),
    PieceType.KNIGHT: ("桂", "成桂"),
    PieceType.LANCE: ("香", "成香"),
    PieceType.PAWN: ("歩", "と"),
}

# 盤面表示用の1文字表記
_PROMOTED_CHARS: dict[PieceType, str] = {
    PieceType.ROOK: "竜",
    PieceType.BISHOP: "馬",
    PieceType.SILVER: "全",
    PieceType.KNIGHT: "圭",
    PieceType.LANCE: "杏",
    PieceType.PAWN: "と",
}


def piece_name(piece: Piece) -> str:
    """駒の表示名を返す。"""
    normal, promoted = PIECE_NAMES_JA[piece.piece_type]
    if piece.is_promoted and promoted is not None:
        return promoted
    return normal


def player_name(player: Player) -> str:
    return "先手" if player == Player.BLACK else "後手"


def _piece_char(piece: Piece) -> str:
    if piece.is_promoted and piece.piece_type in _PROMOTED_CHARS:
        return _PROMOTED_CHARS[piece.piece_type]
    return PIECE_NAMES_JA[piece.piece_type][0]


def format_board(board: Board, captured: CapturedPieces | None = None) -> str:
    """Format the board for terminal display.

    左端が９筋、右端が１筋。後手の駒には "v" を付ける。
    """
    captured = captured or CapturedPieces()
    lines: list[str] = []

    lines.append(f"後手持駒: {_format_hand(captured, Player.WHITE)}")
    lines.append("  ９ ８ ７ ６ ５ ４ ３ ２ １")
    lines.append("+--+--+--+--+--+--+--+--+--+")

    for r in range(ROWS):
        row_str = "|"
        for f in range(COLS - 1, -1, -1):
            piece = board.piece_at(Position(r, f))
            if piece is None:
                row_str += "  |"
            elif piece.owner == Player.WHITE:
                row_str += f"v{_piece_char(piece)}|"
            else:
                row_str += f" {_piece_char(piece)}|"
        lines.append(f"{row_str} {_row_label(r)}")
        lines.append("+--+--+--+--+--+--+--+--+--+")

    lines.append(f"先手持駒: {_format_hand(captured, Player.BLACK)}")
    return "\n".join(lines)


def _format_hand(captured: CapturedPieces, player: Player) -> str:
    if captured.is_empty(player):
        return "なし"
    pieces: list[str] = []
    for pt, count in captured.held(player):
        char = PIECE_NAMES_JA[pt][0]
        pieces.append(char if count == 1 else f"{char}{count}")
    return " ".join(pieces)


def _row_label(row: int) -> str:
    labels = ["一", "二", "三", "四", "五", "六", "七", "八", "九"]
    return labels[row]


def format_move(move: Move) -> str:
    """Format a recorded move in Japanese notation.

    例: "▲7六歩"、"△5五角打"、"▲2二角成"
    """
    mark = "▲" if move.player == Player.BLACK else "△"
    name = piece_name(Piece(move.piece_type, move.player, move.was_promoted))
    text = f"{mark}{position_to_str(move.to)}{name}"
    if move.kind == MoveType.DROP:
        return f"{text}打"
    if move.promote:
        return f"{text}成"
    return text
