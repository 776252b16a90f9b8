"""CLI entry point for shogi-online: two players on one terminal.

コマンドラインで動く本将棋の対局プログラム（先手・後手とも人間）。
指し手は USI 形式で入力する（例: 7g7f, 8h2b+, P*5e）。

起動方法: `shogi-cli`
"""

from __future__ import annotations

import logging

from shogi_online.game.display import format_board, format_move, player_name
from shogi_online.game.sfen import parse_usi
from shogi_online.game.state import GameState, GameStatus, IllegalMoveError

logger = logging.getLogger(__name__)

HELP = "指し手: 7g7f / 8h2b+ / P*5e   コマンド: undo, resign, quit"


def play_turn(state: GameState, line: str) -> GameState:
    """Apply one line of user input and return the next state.

    1行分の入力を解釈する。不正な入力は ValueError（IllegalMoveError を含む）。
    """
    command = line.strip()
    if command == "undo":
        return state.undo()
    if command == "resign":
        return state.resign()

    usi = parse_usi(command)
    if usi.drop_type is not None:
        return state.drop(usi.drop_type, usi.to)
    assert usi.from_ is not None
    return state.move(usi.from_, usi.to, usi.promote)


def main() -> None:
    """Run a hot-seat game.

    ゲームの流れ:
    1. 盤面を表示
    2. 手番側に指し手の入力を求める
    3. 終局まで繰り返す
    """
    logging.basicConfig(level=logging.WARNING)
    print("=== 本将棋 ===")
    print(HELP)
    print()

    state = GameState()  # 平手の初期局面から開始

    while not state.is_over:
        print(format_board(state.board, state.captured))
        if state.last_move is not None:
            print(f"直前の手: {format_move(state.last_move)}")
        if state.status == GameStatus.CHECK:
            print("王手！")
        print()

        # 入力検証ループ（正しい手が入力されるまで繰り返す）
        while True:
            try:
                line = input(f"{player_name(state.current_turn)}の手: ")
            except (EOFError, KeyboardInterrupt):
                print("\nGame aborted.")
                return
            if line.strip() == "quit":
                print("Game aborted.")
                return
            try:
                state = play_turn(state, line)
                break
            except IllegalMoveError as e:
                print(f"反則: {e}")
            except ValueError as e:
                logger.debug("Bad input %r: %s", line, e)
                print(f"入力エラー: {e}")
        print()

    # 終局: 結果を表示
    print(format_board(state.board, state.captured))
    print()
    winner = state.winner
    if state.status == GameStatus.CHECKMATE:
        print("詰み")
    if winner is not None:
        print(f"{player_name(winner)}の勝ち")


if __name__ == "__main__":
    main()
