from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import case, desc, func, select
from sqlalchemy.orm import Session

from pcoin.models.game import GameBan, GameResult, GameSession
from pcoin.models.user import User as UserModel
from pcoin.repositories.base import BaseRepository
from pcoin.schemas.admin import GameBanEntry
from pcoin.schemas.game import GameSessionEntry, GameStats, LeaderboardEntry
from pcoin.utils.money import ZERO


class GameRepository(BaseRepository[GameSession, GameSessionEntry]):
    """게임 세션 기록 + 게임별 차단 리포지토리

    통계는 저장하지 않고 세션 로그에서 매번 집계한다.
    """

    def __init__(self, db: Session):
        super().__init__(GameSession, GameSessionEntry, db)

    # ------------------------------------------------------------------
    # 세션 기록
    # ------------------------------------------------------------------

    def add_session(
        self,
        user_id: int,
        game_type: str,
        bet_amount: Decimal,
        win_amount: Decimal,
        multiplier: Decimal,
        result: GameResult,
        game_data: Optional[Dict[str, Any]] = None,
    ) -> GameSession:
        return self.create(
            user_id=user_id,
            game_type=game_type,
            bet_amount=bet_amount,
            win_amount=win_amount,
            multiplier=multiplier,
            result=result.value,
            game_data=game_data,
        )

    def recent(self, user_id: int, limit: int = 20) -> List[GameSessionEntry]:
        stmt = (
            select(GameSession)
            .where(GameSession.user_id == user_id)
            .order_by(desc(GameSession.id))
            .limit(limit)
        )
        return self._to_schemas(list(self.db.execute(stmt).scalars().all()))

    def stats(self, user_id: int) -> GameStats:
        is_win = GameSession.result == GameResult.WIN.value
        stmt = select(
            func.count(GameSession.id),
            func.coalesce(func.sum(case((is_win, 1), else_=0)), 0),
            func.coalesce(func.sum(case((is_win, GameSession.win_amount), else_=0)), 0),
            func.coalesce(func.max(case((is_win, GameSession.win_amount), else_=None)), 0),
        ).where(GameSession.user_id == user_id)
        played, wins, winnings, biggest = self.db.execute(stmt).one()
        return GameStats(
            user_id=user_id,
            games_played=int(played or 0),
            total_wins=int(wins or 0),
            total_winnings=Decimal(str(winnings or ZERO)),
            biggest_win=Decimal(str(biggest or ZERO)),
        )

    def leaderboard(self, limit: int = 10) -> List[LeaderboardEntry]:
        """총 당첨금 순위 (세션 로그에서 집계)"""
        is_win = GameSession.result == GameResult.WIN.value
        winnings = func.coalesce(
            func.sum(case((is_win, GameSession.win_amount), else_=0)), 0
        ).label("total_winnings")
        stmt = (
            select(
                UserModel.id,
                UserModel.username,
                winnings,
                func.count(GameSession.id).label("games_played"),
                func.coalesce(
                    func.max(case((is_win, GameSession.win_amount), else_=None)), 0
                ).label("biggest_win"),
                func.coalesce(func.sum(case((is_win, 1), else_=0)), 0).label("wins"),
            )
            .join(GameSession, GameSession.user_id == UserModel.id)
            .group_by(UserModel.id, UserModel.username)
            .order_by(desc("total_winnings"), UserModel.id)
            .limit(limit)
        )
        entries = []
        for rank, row in enumerate(self.db.execute(stmt).all(), start=1):
            played = int(row.games_played or 0)
            entries.append(
                LeaderboardEntry(
                    rank=rank,
                    user_id=row.id,
                    username=row.username,
                    total_winnings=Decimal(str(row.total_winnings or ZERO)),
                    games_played=played,
                    biggest_win=Decimal(str(row.biggest_win or ZERO)),
                    win_rate=(int(row.wins or 0) / played) if played else 0.0,
                )
            )
        return entries

    def total_count(self) -> int:
        return self.count()

    # ------------------------------------------------------------------
    # 게임별 차단
    # ------------------------------------------------------------------

    def is_banned(self, user_id: int, game_type: str) -> bool:
        stmt = select(func.count(GameBan.id)).where(
            GameBan.user_id == user_id, GameBan.game_type == game_type
        )
        return int(self.db.execute(stmt).scalar_one()) > 0

    def add_ban(
        self,
        user_id: int,
        game_type: str,
        reason: Optional[str],
        banned_by: Optional[int],
    ) -> GameBan:
        stmt = select(GameBan).where(
            GameBan.user_id == user_id, GameBan.game_type == game_type
        )
        existing = self.db.execute(stmt).scalars().first()
        if existing is not None:
            existing.reason = reason
            existing.banned_by = banned_by
            self.db.flush()
            return existing
        ban = GameBan(
            user_id=user_id, game_type=game_type, reason=reason, banned_by=banned_by
        )
        self.db.add(ban)
        self.db.flush()
        return ban

    def remove_ban(self, user_id: int, game_type: str) -> bool:
        stmt = select(GameBan).where(
            GameBan.user_id == user_id, GameBan.game_type == game_type
        )
        ban = self.db.execute(stmt).scalars().first()
        if ban is None:
            return False
        self.db.delete(ban)
        self.db.flush()
        return True

    def list_bans(self, user_id: Optional[int] = None) -> List[GameBanEntry]:
        stmt = select(GameBan).order_by(desc(GameBan.id))
        if user_id is not None:
            stmt = stmt.where(GameBan.user_id == user_id)
        return [
            GameBanEntry.model_validate(b)
            for b in self.db.execute(stmt).scalars().all()
        ]
