import logging
import random
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from pcoin.config import Settings, settings as default_settings
from pcoin.core.exceptions import (
    AccountBanned,
    AmountTooLarge,
    GameBanned,
    InsufficientFunds,
    NotFoundError,
)
from pcoin.database.session import atomic
from pcoin.games.base import GameEngine
from pcoin.games.registry import build_registry
from pcoin.models.ledger import TransactionCategory
from pcoin.repositories.game_repository import GameRepository
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.repositories.user_repository import UserRepository
from pcoin.schemas.game import (
    GameInfo,
    GameSessionEntry,
    GameStats,
    JackpotResponse,
    LeaderboardEntry,
    PlayRequest,
    PlayResponse,
)
from pcoin.services.jackpot_service import JackpotPool
from pcoin.utils.money import ZERO, Number, positive_amount

logger = logging.getLogger(__name__)

MULTIPLIER_PLACES = Decimal("0.0001")


class GameService:
    """게임 정산 서비스

    한 판의 처리 순서 (하나의 작업 단위):
    1. 베팅액/게임 종류/파라미터 검증
    2. 사용자 행 잠금 후 계정 차단, 게임 차단, 잔액 확인
    3. 최대 지급액으로도 잔액 상한을 넘지 않는지 확인 (난수 사용 전)
    4. 엔진 실행
    5. 순변동(지급액 - 베팅액)을 지갑에 한 번에 반영
    6. 세션 기록 추가

    커밋이 끝난 뒤에만 엔진의 on_settled(잭팟 적립)를 호출한다.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings = default_settings,
        jackpot_pool: Optional[JackpotPool] = None,
        rng: Optional[random.Random] = None,
    ):
        self.db = db
        self.settings = settings
        self.jackpot_pool = jackpot_pool or JackpotPool.from_settings(settings)
        self.rng = rng or random.SystemRandom()
        self.engines: Dict[str, GameEngine] = build_registry(
            self.jackpot_pool, settings.JACKPOT_MIN_BET
        )
        self.game_repo = GameRepository(db)
        self.ledger_repo = LedgerRepository(db, max_balance=settings.MAX_BALANCE)
        self.user_repo = UserRepository(db)

    def _engine(self, game_type: str) -> GameEngine:
        engine = self.engines.get((game_type or "").lower())
        if engine is None:
            raise NotFoundError(
                f"Unknown game: {game_type}",
                details={"game_type": game_type, "available": sorted(self.engines)},
                error_code="GAME_003",
            )
        return engine

    def play_request(self, user_id: int, request: PlayRequest) -> PlayResponse:
        return self.play(
            user_id, request.game_type, request.bet_amount, request.game_params
        )

    def play(
        self,
        user_id: int,
        game_type: str,
        bet_amount: Number,
        params: Optional[dict] = None,
    ) -> PlayResponse:
        """게임 1회 진행 및 정산

        Args:
            user_id: 플레이어 ID
            game_type: 게임 종류
            bet_amount: 베팅 금액
            params: 게임별 파라미터

        Returns:
            PlayResponse: 결과와 새 잔액

        Raises:
            InvalidAmount: 베팅액이 잘못된 경우
            InvalidGameParams: 파라미터가 잘못된 경우
            AccountBanned / GameBanned: 차단된 경우
            InsufficientFunds: 잔액 부족
            AmountTooLarge: 베팅 한도 초과, 또는 최대 당첨 시 잔액 상한 초과 (난수 사용 전 거부)
        """
        bet = positive_amount(bet_amount)
        if bet > self.settings.MAX_BET:
            raise AmountTooLarge(self.settings.MAX_BET, details={"bet_amount": str(bet)})
        engine = self._engine(game_type)
        normalized = engine.validate(bet, params or {})

        claimed: Optional[Decimal] = None
        try:
            with atomic(self.db):
                user = self.user_repo.lock(user_id)
                if user.is_banned:
                    raise AccountBanned(user.banned_reason)
                if self.game_repo.is_banned(user_id, engine.game_type):
                    raise GameBanned(engine.game_type)
                if user.p_coin_balance < bet:
                    raise InsufficientFunds(required=bet, available=user.p_coin_balance)
                max_win = engine.max_payout(bet, normalized)
                if user.p_coin_balance - bet + max_win > self.settings.MAX_BALANCE:
                    raise AmountTooLarge(
                        self.settings.MAX_BALANCE,
                        details={"balance": str(user.p_coin_balance), "max_win": str(max_win)},
                    )

                outcome = engine.play(bet, normalized, self.rng)
                if outcome.outcome.get("jackpot_won"):
                    claimed = outcome.payout

                win_amount = outcome.win_amount(bet)
                result = outcome.result_for(bet)
                net = win_amount - bet
                if net > ZERO:
                    category = TransactionCategory.GAME_WIN
                elif net < ZERO:
                    category = TransactionCategory.GAME_LOSS
                else:
                    category = TransactionCategory.GAME_PUSH

                new_balance = self.ledger_repo.apply_delta(
                    user_id,
                    net,
                    category,
                    f"{engine.name}: bet {bet}, won {win_amount}",
                )
                multiplier = (
                    (win_amount / bet).quantize(MULTIPLIER_PLACES) if bet else ZERO
                )
                session = self.game_repo.add_session(
                    user_id=user_id,
                    game_type=engine.game_type,
                    bet_amount=bet,
                    win_amount=win_amount,
                    multiplier=multiplier,
                    result=result,
                    game_data={"params": normalized, "outcome": outcome.outcome},
                )
                session_id = session.id
        except Exception:
            if claimed is not None:
                self.jackpot_pool.restore(claimed)
            raise

        engine.on_settled(bet)

        logger.info(
            f"Game {engine.game_type} user={user_id} bet={bet} win={win_amount} result={result.value}"
        )
        return PlayResponse(
            session_id=session_id,
            game_type=engine.game_type,
            bet_amount=bet,
            win_amount=win_amount,
            multiplier=multiplier,
            result=result,
            new_balance=new_balance,
            outcome=outcome.outcome,
        )

    def get_stats(self, user_id: int) -> GameStats:
        return self.game_repo.stats(user_id)

    def recent_games(self, user_id: int, limit: int = 20) -> List[GameSessionEntry]:
        return self.game_repo.recent(user_id, limit=min(limit, 100))

    def leaderboard(self, limit: int = 10) -> List[LeaderboardEntry]:
        return self.game_repo.leaderboard(limit=min(limit, 100))

    def list_games(self) -> List[GameInfo]:
        return [
            GameInfo(
                game_type=engine.game_type,
                name=engine.name,
                description=engine.description,
                params=dict(engine.params_help),
            )
            for engine in self.engines.values()
        ]

    def jackpot_amount(self) -> JackpotResponse:
        return JackpotResponse(
            amount=self.jackpot_pool.current(), seed=self.jackpot_pool.seed
        )
