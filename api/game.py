"""
Game API Endpoints（觀戰用，唯讀）

重點：
1. 所有資料都是快照，不會修改遊戲狀態
2. endpoint 是 async，跟遊戲迴圈在同一個 event loop 上讀狀態
3. 查詢不存在的參賽者不會建立 BoardState
"""
from fastapi import APIRouter, Depends, HTTPException, Request

import logging

from core.board_store import BoardState
from core.exceptions import DirectoryUnavailable, GameNotStarted
from core.series_controller import SeriesController
from schemas import (
    BoardStateResponse,
    GameStateResponse,
    PlayerBoardResponse,
    PlayerCountResponse,
    PlayerHistoryResponse,
)

router = APIRouter(prefix="/api/game", tags=["game"])
logger = logging.getLogger(__name__)


def get_controller(request: Request) -> SeriesController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Game master not initialized")
    return controller


def _board_response(board: BoardState) -> BoardStateResponse:
    return BoardStateResponse(
        guesses=list(board.guesses),
        feedback=list(board.feedback),
        guess_count=board.guess_count,
        complete=board.complete,
        won_round=board.won_round,
    )


@router.get("/state", response_model=GameStateResponse)
async def get_game_state(controller: SeriesController = Depends(get_controller)):
    """
    取得目前系列賽狀態

    返回：
        - round_number / round_start_time / round_duration: 倒數計時用
        - last_word: 上一回合的答案
        - last_winner: 上一個系列賽冠軍
        - players: 每位參賽者的 BoardState 與勝負紀錄
    """
    try:
        state = controller.require_state()
    except GameNotStarted:
        raise HTTPException(status_code=404, detail="No active series")

    players = [
        PlayerBoardResponse(
            participant_id=participant_id,
            board=_board_response(board),
            wins=state.win_counts.get(participant_id, 0),
            history=controller.player_history(participant_id),
        )
        for participant_id, board in state.board_states.snapshot().items()
    ]

    return GameStateResponse(
        round_number=state.round_number,
        round_start_time=state.round_start_time,
        round_duration=controller.scheduler.round_duration,
        phase=state.phase.value,
        last_word=state.last_word,
        last_winner=controller.last_winner,
        win_counts=dict(state.win_counts),
        players=players,
    )


@router.get("/boards/{participant_id}", response_model=BoardStateResponse)
async def get_board(participant_id: str, controller: SeriesController = Depends(get_controller)):
    try:
        state = controller.require_state()
    except GameNotStarted:
        raise HTTPException(status_code=404, detail="No active series")

    return _board_response(state.board_states.peek(participant_id))


@router.get("/players/{participant_id}/history", response_model=PlayerHistoryResponse)
async def get_player_history(participant_id: str, controller: SeriesController = Depends(get_controller)):
    try:
        results = controller.player_history(participant_id)
    except GameNotStarted:
        raise HTTPException(status_code=404, detail="No active series")

    return PlayerHistoryResponse(participant_id=participant_id, results=results)


@router.get("/player-count", response_model=PlayerCountResponse)
async def get_player_count(controller: SeriesController = Depends(get_controller)):
    try:
        count = await controller.player_count()
    except DirectoryUnavailable as e:
        logger.warning(f"Failed to count players: {e}")
        raise HTTPException(status_code=502, detail="Participant directory unavailable")

    return PlayerCountResponse(player_count=count)
