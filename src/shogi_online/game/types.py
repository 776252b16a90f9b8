"""Types and constants for the Shogi rules engine (9x9).

本将棋（9×9盤）の基本型・定数定義。
駒の種類は8種類（王・飛・角・金・銀・桂・香・歩）で、成りは駒ごとのフラグで表す。
"""

from __future__ import annotations

from enum import Enum, IntEnum, unique

ROWS = 9
COLS = 9


@unique
class Player(IntEnum):
    """Player identifiers.

    先手（BLACK）は下側から上に向かって進む（rank 8 → rank 0）。
    後手（WHITE）は上側から下に向かって進む（rank 0 → rank 8）。
    """

    BLACK = 0  # 先手
    WHITE = 1  # 後手

    @property
    def opponent(self) -> Player:
        """相手プレイヤーを返す。"""
        return Player(1 - self.value)


@unique
class PieceType(IntEnum):
    """Piece kinds in 本将棋（8種類）.

    成り駒は別の駒種ではなく Piece.is_promoted で表す。
    """

    KING = 0    # 玉/王
    ROOK = 1    # 飛
    BISHOP = 2  # 角
    GOLD = 3    # 金
    SILVER = 4  # 銀
    KNIGHT = 5  # 桂
    LANCE = 6   # 香
    PAWN = 7    # 歩


class IllegalMoveReason(str, Enum):
    """Why a move or drop was rejected.

    値は API で返すタグ。日本語の説明は message で取得する。
    """

    OUT_OF_BOUNDS = "out_of_bounds"
    OCCUPIED = "occupied"
    NO_LEGAL_DESTINATION = "ikidononai"         # 行き所のない駒
    DOUBLE_PAWN = "nifu"                        # 二歩
    DROPPED_PAWN_CHECKMATE = "uchifuzume"       # 打ち歩詰め
    LEAVES_KING_IN_CHECK = "oute_houchi"        # 王手放置
    NOT_OWNER = "not_owner"
    WRONG_SHAPE = "wrong_shape"
    # 以下は対局状態（GameState）側でのみ使う
    WRONG_TURN = "wrong_turn"
    NOT_IN_HAND = "not_in_hand"
    CANNOT_PROMOTE = "cannot_promote"
    GAME_OVER = "game_over"

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES: dict[IllegalMoveReason, str] = {
    IllegalMoveReason.OUT_OF_BOUNDS: "盤外には指せません",
    IllegalMoveReason.OCCUPIED: "そのマスには駒があります",
    IllegalMoveReason.NO_LEGAL_DESTINATION: "行き所のない駒は打てません",
    IllegalMoveReason.DOUBLE_PAWN: "二歩は禁止です",
    IllegalMoveReason.DROPPED_PAWN_CHECKMATE: "打ち歩詰めは禁止です",
    IllegalMoveReason.LEAVES_KING_IN_CHECK: "王手を解消してください",
    IllegalMoveReason.NOT_OWNER: "自分の駒ではありません",
    IllegalMoveReason.WRONG_SHAPE: "その駒はそこへ動けません",
    IllegalMoveReason.WRONG_TURN: "手番ではありません",
    IllegalMoveReason.NOT_IN_HAND: "その駒は持ち駒にありません",
    IllegalMoveReason.CANNOT_PROMOTE: "その手では成れません",
    IllegalMoveReason.GAME_OVER: "対局は終了しています",
}

# 成れる駒（王と金は成らない）
PROMOTABLE_PIECES: frozenset[PieceType] = frozenset({
    PieceType.ROOK, PieceType.BISHOP, PieceType.SILVER,
    PieceType.KNIGHT, PieceType.LANCE, PieceType.PAWN,
})

# 成ると金と同じ動きになる駒
GOLD_WHEN_PROMOTED: frozenset[PieceType] = frozenset({
    PieceType.SILVER, PieceType.KNIGHT, PieceType.LANCE, PieceType.PAWN,
})

# 持ち駒として使える駒種（玉以外の7種、表示順）
HAND_PIECE_TYPES = [
    PieceType.ROOK, PieceType.BISHOP, PieceType.GOLD, PieceType.SILVER,
    PieceType.KNIGHT, PieceType.LANCE, PieceType.PAWN,
]

# 1マス移動の方向定義（先手視点、前 = rank 減少方向）
# 後手の場合は rank 方向を反転して使う
STEP_MOVES: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.KING: [
        (-1, 0), (-1, 1), (0, 1), (1, 1),
        (1, 0), (1, -1), (0, -1), (-1, -1),
    ],  # 玉: 全8方向1マス
    PieceType.GOLD: [(-1, 0), (-1, 1), (0, 1), (1, 0), (0, -1), (-1, -1)],  # 金: 斜め後ろ以外
    PieceType.SILVER: [(-1, 0), (-1, 1), (1, 1), (1, -1), (-1, -1)],  # 銀: 前+斜め4方向
    PieceType.KNIGHT: [(-2, -1), (-2, 1)],  # 桂: 2マス前の左右（飛び越え可）
    PieceType.PAWN: [(-1, 0)],  # 歩: 1マス前のみ
}

# 遠距離移動の方向定義（同方向に繰り返し移動できる）
SLIDE_MOVES: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.ROOK: [(-1, 0), (1, 0), (0, -1), (0, 1)],      # 飛: 縦横4方向
    PieceType.BISHOP: [(-1, -1), (-1, 1), (1, -1), (1, 1)],  # 角: 斜め4方向
    PieceType.LANCE: [(-1, 0)],                              # 香: 前方向のみ
}

# 成り駒の追加1マス移動
# 龍（成り飛）は斜めに1マス、馬（成り角）は縦横に1マス動ける
PROMOTED_EXTRA_STEPS: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.ROOK: [(-1, -1), (-1, 1), (1, -1), (1, 1)],
    PieceType.BISHOP: [(-1, 0), (1, 0), (0, -1), (0, 1)],
}
