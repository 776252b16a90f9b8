"""Board representation for 本将棋 (9x9).

9×9盤の盤面データ構造。イミュータブルなデータクラスで、
変更メソッドは新しいオブジェクトを返す。ルールエンジンの「仮に指したら」の
シミュレーションはすべて新しい Board 上で行われ、呼び出し元の盤面は変化しない。
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from shogi_online.game.position import Position, is_valid_position
from shogi_online.game.types import COLS, ROWS, PieceType, Player

Row = tuple["Piece | None", ...]


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    盤面上の駒。種類・所有者・成りフラグを持つ。
    is_promoted は飛・角・銀・桂・香・歩でのみ意味を持つ。
    """

    piece_type: PieceType
    owner: Player
    is_promoted: bool = False

    def promoted(self) -> Piece:
        """成った駒を返す。"""
        return Piece(self.piece_type, self.owner, True)


@dataclass(frozen=True)
class Board:
    """Immutable 9x9 board.

    rows: 9要素のタプル（rank 0 〜 8）。各要素は9マス分（file 0 〜 8）のタプル。
    行もタプルなので、コピー間で共有されても片方から書き換えられることはない。
    """

    rows: tuple[Row, ...] = field(default_factory=lambda: Board._initial_rows())

    def __post_init__(self) -> None:
        if len(self.rows) != ROWS or any(len(row) != COLS for row in self.rows):
            raise ValueError(f"Board must be {ROWS}x{COLS}")

    @classmethod
    def empty(cls) -> Board:
        """駒のない盤面を返す。"""
        return cls(rows=tuple((None,) * COLS for _ in range(ROWS)))

    @classmethod
    def initial(cls) -> Board:
        """平手の初期配置を返す。"""
        return cls()

    @classmethod
    def from_pieces(cls, pieces: Mapping[Position, Piece]) -> Board:
        """Build a board holding exactly the given pieces."""
        grid: list[list[Piece | None]] = [[None] * COLS for _ in range(ROWS)]
        for pos, piece in pieces.items():
            _check_on_board(pos)
            grid[pos.rank][pos.file] = piece
        return cls(rows=tuple(tuple(row) for row in grid))

    @staticmethod
    def _initial_rows() -> tuple[Row, ...]:
        """Return the standard starting position (平手).

        Rank 0 = 後手の後段（上端）、Rank 8 = 先手の後段（下端）。
        file 0 は１筋なので、先手の飛車は file 1（２八）、角は file 7（８八）に置く。
        """
        grid: list[list[Piece | None]] = [[None] * COLS for _ in range(ROWS)]
        back = [
            PieceType.LANCE, PieceType.KNIGHT, PieceType.SILVER,
            PieceType.GOLD, PieceType.KING, PieceType.GOLD,
            PieceType.SILVER, PieceType.KNIGHT, PieceType.LANCE,
        ]

        # 後手: 後段・飛角・歩
        for f, pt in enumerate(back):
            grid[0][f] = Piece(pt, Player.WHITE)
        grid[1][1] = Piece(PieceType.BISHOP, Player.WHITE)  # 角行（８二）
        grid[1][7] = Piece(PieceType.ROOK, Player.WHITE)    # 飛車（２二）
        for f in range(COLS):
            grid[2][f] = Piece(PieceType.PAWN, Player.WHITE)

        # 先手: 後手と点対称
        for f in range(COLS):
            grid[6][f] = Piece(PieceType.PAWN, Player.BLACK)
        grid[7][1] = Piece(PieceType.ROOK, Player.BLACK)    # 飛車（２八）
        grid[7][7] = Piece(PieceType.BISHOP, Player.BLACK)  # 角行（８八）
        for f, pt in enumerate(back):
            grid[8][f] = Piece(pt, Player.BLACK)

        return tuple(tuple(row) for row in grid)

    def piece_at(self, position: Position) -> Piece | None:
        """マスの駒を返す。駒がなければ None。"""
        _check_on_board(position)
        return self.rows[position.rank][position.file]

    def __getitem__(self, position: Position) -> Piece | None:
        return self.piece_at(position)

    def set_piece(self, position: Position, piece: Piece | None) -> Board:
        """マスの駒を変更した新しい Board を返す。"""
        _check_on_board(position)
        row = list(self.rows[position.rank])
        row[position.file] = piece
        rows = list(self.rows)
        rows[position.rank] = tuple(row)
        return Board(rows=tuple(rows))

    def move_piece(self, from_: Position, to: Position, promote: bool = False) -> Board:
        """Move the piece at from_ to to, replacing whatever stood there.

        取られた駒の持ち駒への追加は呼び出し側（GameState）の責務。
        """
        piece = self.piece_at(from_)
        if piece is None:
            raise ValueError(f"No piece at {from_}")
        if promote:
            piece = piece.promoted()
        return self.set_piece(from_, None).set_piece(to, piece)

    def pieces(self, owner: Player | None = None) -> Iterator[tuple[Position, Piece]]:
        """盤上の駒を (位置, 駒) で列挙する。owner を指定するとその駒だけ。"""
        for r, row in enumerate(self.rows):
            for f, piece in enumerate(row):
                if piece is None:
                    continue
                if owner is not None and piece.owner != owner:
                    continue
                yield Position(r, f), piece

    def find_king(self, player: Player) -> Position | None:
        """プレイヤーの玉の位置を返す。玉がなければ None。"""
        for pos, piece in self.pieces(player):
            if piece.piece_type == PieceType.KING:
                return pos
        return None

    def count_pawns_in_file(self, player: Player, file: int) -> int:
        """Count unpromoted pawns of player in a file (for 二歩 check).

        指定筋にあるプレイヤーの未成歩の枚数を返す。と金は数えない。
        """
        count = 0
        for r in range(ROWS):
            p = self.rows[r][file]
            if (
                p is not None
                and p.owner == player
                and p.piece_type == PieceType.PAWN
                and not p.is_promoted
            ):
                count += 1
        return count


def _check_on_board(position: Position) -> None:
    # 負の添字でタプルの末尾を読まないように盤外は先に弾く
    if not is_valid_position(position):
        raise ValueError(f"Position off the board: {position}")
