from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from pcoin.core.exceptions import UserNotFound
from pcoin.models.bank import BankAccount, BankTransaction
from pcoin.models.game import GameBan, GameSession
from pcoin.models.ledger import CoinTransaction
from pcoin.models.redeem import CodeRedemption, RedeemCode
from pcoin.models.trade import Trade
from pcoin.models.user import User as UserModel, UserRole
from pcoin.schemas.user import User as UserSchema
from pcoin.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, UserSchema]):
    """사용자 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def get_by_username(self, username: str) -> Optional[UserSchema]:
        """사용자명으로 조회 (대소문자 무시)"""
        return self._to_schema(self.get_model_by_username(username))

    def get_model_by_username(self, username: str) -> Optional[UserModel]:
        stmt = select(UserModel).where(
            func.lower(UserModel.username) == username.strip().lower()
        )
        return self.db.execute(stmt).scalars().first()

    def require(self, user_id: int) -> UserModel:
        user = self.get_model(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def lock(self, user_id: int) -> UserModel:
        """사용자 행 잠금 - 같은 사용자의 잔액 변경을 직렬화"""
        user = self.get_for_update(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def create_user(
        self,
        username: str,
        password_hash: Optional[str],
        role: UserRole = UserRole.USER,
    ) -> UserModel:
        return self.create(
            username=username,
            password_hash=password_hash,
            role=role.value,
            p_coin_balance=Decimal("0.00"),
        )

    def list_users(self, limit: int = 100, offset: int = 0) -> List[UserSchema]:
        return self.find_all(
            order_by="created_at", descending=True, limit=limit, offset=offset
        )

    def list_by_role(self, role: UserRole) -> List[UserSchema]:
        return self.find_all(filters={"role": role.value}, order_by="id")

    def total_coins(self) -> Decimal:
        total = self.db.execute(select(func.sum(UserModel.p_coin_balance))).scalar()
        return Decimal(total or 0).quantize(Decimal("0.01"))

    def set_role(self, user: UserModel, role: UserRole) -> UserModel:
        user.role = role.value
        self.db.flush()
        return user

    def set_vip(
        self, user: UserModel, is_vip: bool, duration_days: Optional[int] = None
    ) -> UserModel:
        user.is_vip = is_vip
        if is_vip and duration_days:
            user.vip_expires_at = datetime.now(timezone.utc) + timedelta(days=duration_days)
        else:
            user.vip_expires_at = None
        self.db.flush()
        return user

    def set_banned(
        self, user: UserModel, banned: bool, reason: Optional[str] = None
    ) -> UserModel:
        user.is_banned = banned
        user.banned_at = datetime.now(timezone.utc) if banned else None
        user.banned_reason = reason if banned else None
        self.db.flush()
        return user

    def delete_user(self, user: UserModel) -> None:
        """사용자와 사용자 소유 데이터를 함께 삭제

        외래키 ON DELETE CASCADE를 지원하지 않는 환경(sqlite 기본값)을 위해
        하위 행을 명시적으로 먼저 지운다.
        """
        uid = user.id
        account_ids = select(BankAccount.id).where(BankAccount.user_id == uid)
        self.db.execute(delete(BankTransaction).where(BankTransaction.account_id.in_(account_ids)))
        self.db.execute(delete(BankAccount).where(BankAccount.user_id == uid))
        self.db.execute(delete(CoinTransaction).where(CoinTransaction.user_id == uid))
        self.db.execute(delete(GameSession).where(GameSession.user_id == uid))
        self.db.execute(delete(GameBan).where(GameBan.user_id == uid))
        self.db.execute(delete(CodeRedemption).where(CodeRedemption.user_id == uid))
        self.db.execute(
            delete(Trade).where((Trade.sender_id == uid) | (Trade.receiver_id == uid))
        )
        # 생성자/차단자 참조는 기록을 남기고 NULL 처리
        self.db.query(RedeemCode).filter(RedeemCode.created_by == uid).update(
            {RedeemCode.created_by: None}, synchronize_session=False
        )
        self.db.query(GameBan).filter(GameBan.banned_by == uid).update(
            {GameBan.banned_by: None}, synchronize_session=False
        )
        self.db.delete(user)
        self.db.flush()
