"""FastAPI web application for online shogi.

FastAPI を使った将棋対局サーバ。指し手の合法性はすべてサーバ側のルールエンジンで判定する。

エンドポイント:
  POST /api/new-game          新規対局を開始（ゲームIDを返す）
  GET  /api/state/{id}        現在の局面情報を取得
  GET  /api/valid-moves/{id}  選択した駒の移動先・持ち駒を打てるマス
  POST /api/move              USI 形式の手を指す
  POST /api/resign/{id}       投了
  POST /api/undo/{id}         1手戻す
  POST /api/validate          SFEN 局面に対する指し手の判定のみ（状態を持たない）
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from shogi_online.config import DEFAULT_SERVER_CONFIG, ServerConfig
from shogi_online.game.board import Board
from shogi_online.game.display import format_board, format_move, player_name
from shogi_online.game.position import Position
from shogi_online.game.sfen import (
    INITIAL_SFEN,
    SFEN_TO_PIECE,
    UsiMove,
    format_usi,
    parse_sfen,
    parse_usi,
)
from shogi_online.game.state import GameState, IllegalMoveError, Move
from shogi_online.game.types import IllegalMoveReason, PieceType, Player
from shogi_online.game.validation import MoveValidation, can_drop_piece, validate_move

logger = logging.getLogger(__name__)

# 環境変数は main() で読む。インポート時はデフォルト設定
config = DEFAULT_SERVER_CONFIG

app = FastAPI(title="Shogi Online")

# 対局情報のインメモリストレージ（サーバ再起動で消える簡易実装）
# 永続化は外部のデータベース層の責務
_games: dict[str, GameState] = {}


class NewGameRequest(BaseModel):
    """新規対局リクエストのスキーマ。"""

    sfen: str = INITIAL_SFEN  # 開始局面（省略時は平手）


class MoveRequest(BaseModel):
    """指し手リクエストのスキーマ。"""

    game_id: str  # 対局ID（/api/new-game で取得）
    move: str  # USI 形式の手（例: "7g7f", "P*5e", "8h2b+"）


class ValidateRequest(BaseModel):
    """状態を持たない判定リクエストのスキーマ。"""

    sfen: str
    move: str


def _illegal(reason: IllegalMoveReason) -> HTTPException:
    return HTTPException(400, {"reason": reason.value, "message": reason.message})


def _get_game(game_id: str) -> GameState:
    state = _games.get(game_id)
    if state is None:
        raise HTTPException(404, "Game not found")
    return state


def _store(game_id: str, state: GameState) -> None:
    """対局を保存する。上限を超えたら最も古い対局を破棄する。"""
    _games[game_id] = state
    while len(_games) > config.max_games:
        oldest = next(iter(_games))
        del _games[oldest]
        logger.info("Evicted game %s (store limit %d)", oldest, config.max_games)


def _parse_usi_or_400(text: str) -> UsiMove:
    try:
        return parse_usi(text)
    except ValueError as e:
        raise HTTPException(400, str(e)) from e


def _move_to_usi(move: Move) -> str:
    return format_usi(
        UsiMove(
            to=move.to,
            from_=move.from_,
            drop_type=move.piece_type if move.from_ is None else None,
            promote=move.promote,
        )
    )


def _squares(board: Board) -> list[list[dict[str, Any] | None]]:
    rows: list[list[dict[str, Any] | None]] = []
    for row in board.rows:
        rows.append([
            None if piece is None else {
                "type": piece.piece_type.name.lower(),
                "owner": piece.owner.name.lower(),
                "is_promoted": piece.is_promoted,
            }
            for piece in row
        ])
    return rows


def _state_to_dict(state: GameState) -> dict[str, Any]:
    """Convert game state to a JSON-serializable dict.

    局面情報を JSON 形式（辞書）に変換する。
    squares[rank][file] の順で、file 0 が１筋。
    """
    winner = state.winner
    hands = {
        player.name.lower(): {pt.name.lower(): n for pt, n in state.captured.held(player)}
        for player in Player
    }
    return {
        "sfen": state.to_sfen(),
        "current_turn": state.current_turn.name.lower(),
        "status": state.status.value,
        "is_check": state.is_check,
        "winner": winner.name.lower() if winner is not None else None,
        "squares": _squares(state.board),
        "hands": hands,
        "last_move": _move_to_usi(state.last_move) if state.last_move else None,
        "history": [format_move(m) for m in state.history],
        "board_display": format_board(state.board, state.captured),
    }


def _verdict(result: MoveValidation) -> dict[str, Any]:
    return {
        "is_valid": result.is_valid,
        "reason": result.reason.value if result.reason is not None else None,
        "message": result.message,
    }


@app.post("/api/new-game")
async def new_game(req: NewGameRequest) -> dict[str, Any]:
    """新規対局を開始する。"""
    try:
        state = GameState.from_sfen(req.sfen)
    except ValueError as e:
        raise HTTPException(400, str(e)) from e

    game_id = str(uuid.uuid4())[:8]  # 短いIDを生成
    _store(game_id, state)
    logger.info("New game %s from %s", game_id, req.sfen)
    return {"game_id": game_id, "state": _state_to_dict(state)}


@app.get("/api/state/{game_id}")
async def get_state(game_id: str) -> dict[str, Any]:
    """現在の局面情報を取得する（ページ再読み込み時などに使用）。"""
    return _state_to_dict(_get_game(game_id))


@app.get("/api/valid-moves/{game_id}")
async def valid_moves(
    game_id: str,
    rank: int | None = None,
    file: int | None = None,
    piece: str | None = None,
) -> dict[str, Any]:
    """合法な移動先を返す。

    rank/file を指定すると盤上の駒の移動先、piece（"P" など）を指定すると
    持ち駒を打てるマスを返す。
    """
    state = _get_game(game_id)
    if piece is not None:
        piece_type = SFEN_TO_PIECE.get(piece.upper())
        if piece_type is None or piece_type == PieceType.KING:
            raise HTTPException(400, f"Unknown piece: {piece}")
        squares = state.legal_drop_squares(piece_type)
    elif rank is not None and file is not None:
        squares = state.legal_destinations(Position(rank, file))
    else:
        raise HTTPException(400, "Specify rank and file, or piece")
    return {"moves": [{"rank": p.rank, "file": p.file} for p in squares]}


@app.post("/api/move")
async def make_move(req: MoveRequest) -> dict[str, Any]:
    """手を検証して適用し、新しい局面を返す。"""
    state = _get_game(req.game_id)
    usi = _parse_usi_or_400(req.move)

    try:
        if usi.drop_type is not None:
            state = state.drop(usi.drop_type, usi.to)
        else:
            assert usi.from_ is not None
            state = state.move(usi.from_, usi.to, usi.promote)
    except IllegalMoveError as e:
        logger.debug("Rejected %s in game %s: %s", req.move, req.game_id, e.reason.value)
        raise _illegal(e.reason) from e

    _store(req.game_id, state)
    if state.is_over:
        winner = state.winner
        logger.info(
            "Game %s finished: %s (%s wins)",
            req.game_id,
            state.status.value,
            player_name(winner) if winner is not None else "-",
        )
    return {"state": _state_to_dict(state), "move": req.move}


@app.post("/api/resign/{game_id}")
async def resign(game_id: str) -> dict[str, Any]:
    """手番側が投了する。"""
    state = _get_game(game_id)
    try:
        state = state.resign()
    except IllegalMoveError as e:
        raise _illegal(e.reason) from e
    _store(game_id, state)
    logger.info("Game %s resigned by %s", game_id, player_name(state.current_turn))
    return _state_to_dict(state)


@app.post("/api/undo/{game_id}")
async def undo(game_id: str) -> dict[str, Any]:
    """1手戻す。"""
    state = _get_game(game_id)
    try:
        state = state.undo()
    except ValueError as e:
        raise HTTPException(400, str(e)) from e
    _store(game_id, state)
    return _state_to_dict(state)


@app.post("/api/validate")
async def validate(req: ValidateRequest) -> dict[str, Any]:
    """Judge a move against an SFEN position without storing anything.

    他のフロントエンド（クライアント側で盤面を持つ実装）向けの判定 API。
    手番は SFEN の手番を使う。
    """
    try:
        data = parse_sfen(req.sfen)
    except ValueError as e:
        raise HTTPException(400, str(e)) from e
    usi = _parse_usi_or_400(req.move)

    if usi.drop_type is not None:
        if not data.captured.has(data.turn, usi.drop_type):
            return _verdict(MoveValidation.fail(IllegalMoveReason.NOT_IN_HAND))
        return _verdict(can_drop_piece(data.board, usi.drop_type, usi.to, data.turn))
    assert usi.from_ is not None
    return _verdict(validate_move(data.board, usi.from_, usi.to, data.turn))


def main() -> None:
    """Run the web server.

    `shogi-web` または `python -m shogi_online.web.app` で起動する。
    """
    import uvicorn

    global config
    config = ServerConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Starting server on %s:%d", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
