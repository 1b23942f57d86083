import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from pcoin.core.auth_middleware import get_current_active_user
from pcoin.core.dependencies import get_game_service
from pcoin.schemas.game import (
    GameInfo,
    GameSessionEntry,
    GameStats,
    JackpotResponse,
    LeaderboardEntry,
    PlayRequest,
    PlayResponse,
)
from pcoin.schemas.user import User as UserSchema
from pcoin.services.game_service import GameService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])


@router.get("", response_model=List[GameInfo])
def list_games(
    game_service: GameService = Depends(get_game_service),
) -> List[GameInfo]:
    """플레이 가능한 게임 목록과 파라미터 설명"""
    return game_service.list_games()


@router.post("/play", response_model=PlayResponse)
def play(
    request: PlayRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    game_service: GameService = Depends(get_game_service),
) -> PlayResponse:
    """
    게임 1회 플레이

    요청 예시:
        {"game_type": "roulette", "bet_amount": "10", "game_params": {"selected_numbers": [17]}}

    룰렛은 한 번에 한 종류의 베팅만 받는다 (selected_numbers, selected_color,
    selected_parity 중 하나). 여러 종류를 함께 보내면 422.
    최대 당첨 시 잔액 상한을 넘을 수 있는 베팅은 난수를 뽑기 전에 422로 거부한다.

    HTTP Status:
        200: 정산 완료 (승/패/무 모두 200)
        400: 잔액 부족
        403: 계정 또는 게임 차단
        404: 알 수 없는 게임
        422: 잘못된 베팅액/파라미터
    """
    return game_service.play_request(current_user.id, request)


@router.get("/stats", response_model=GameStats)
def my_stats(
    current_user: UserSchema = Depends(get_current_active_user),
    game_service: GameService = Depends(get_game_service),
) -> GameStats:
    return game_service.get_stats(current_user.id)


@router.get("/recent", response_model=List[GameSessionEntry])
def my_recent_games(
    limit: int = Query(20, ge=1, le=100),
    current_user: UserSchema = Depends(get_current_active_user),
    game_service: GameService = Depends(get_game_service),
) -> List[GameSessionEntry]:
    return game_service.recent_games(current_user.id, limit=limit)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
def leaderboard(
    limit: int = Query(10, ge=1, le=100),
    game_service: GameService = Depends(get_game_service),
) -> List[LeaderboardEntry]:
    """총 당첨금 기준 순위"""
    return game_service.leaderboard(limit=limit)


@router.get("/jackpot", response_model=JackpotResponse)
def jackpot(
    game_service: GameService = Depends(get_game_service),
) -> JackpotResponse:
    """현재 잭팟 풀 금액"""
    return game_service.jackpot_amount()
