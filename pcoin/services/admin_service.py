import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from pcoin.config import Settings, settings as default_settings
from pcoin.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from pcoin.database.session import atomic
from pcoin.games.registry import GAME_TYPES
from pcoin.models.ledger import TransactionCategory
from pcoin.models.user import User as UserModel, UserRole
from pcoin.repositories.bank_repository import BankRepository
from pcoin.repositories.game_repository import GameRepository
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.repositories.user_repository import UserRepository
from pcoin.schemas.admin import AdminStats, GameBanEntry
from pcoin.schemas.bank import BankAccountListResponse
from pcoin.schemas.ledger import BalanceChangeResponse, TransactionListResponse
from pcoin.schemas.user import User as UserSchema, UserListResponse
from pcoin.services.bank_service import BankService
from pcoin.services.trade_service import TradeService
from pcoin.utils.money import Number, positive_amount, quantize

logger = logging.getLogger(__name__)


class AdminService:
    """관리자/소유자 권한 작업

    대상 규칙:
    - 자기 자신은 수정할 수 없다 (set_coins 제외)
    - 관리자는 다른 관리자나 소유자를 수정할 수 없다
    - 관리자 권한 부여/회수는 소유자만 가능하며, 소유자 권한은 누구도 부여할 수 없다
    """

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.settings = settings
        self.user_repo = UserRepository(db)
        self.ledger_repo = LedgerRepository(db, max_balance=settings.MAX_BALANCE)
        self.game_repo = GameRepository(db)
        self.bank_repo = BankRepository(db)

    # ------------------------------------------------------------------
    # 대상 검증
    # ------------------------------------------------------------------

    @staticmethod
    def _ensure_can_modify(actor: UserSchema, target: UserModel) -> None:
        if actor.id == target.id:
            raise AuthorizationError("You cannot modify your own account")
        if target.has_at_least(UserRole.OWNER):
            raise AuthorizationError("Owner accounts cannot be modified")
        if target.has_at_least(UserRole.ADMIN) and not actor.is_owner:
            raise AuthorizationError("Admins cannot modify other admins")

    @staticmethod
    def _ensure_game_type(game_type: str) -> str:
        normalized = (game_type or "").lower()
        if normalized not in GAME_TYPES:
            raise NotFoundError(
                f"Unknown game: {game_type}",
                details={"available": sorted(GAME_TYPES)},
                error_code="GAME_003",
            )
        return normalized

    # ------------------------------------------------------------------
    # 코인
    # ------------------------------------------------------------------

    def add_coins(
        self, actor: UserSchema, user_id: int, amount: Number, reason: str = ""
    ) -> BalanceChangeResponse:
        """잔액에 금액 추가 (양수만)"""
        value = positive_amount(amount)
        with atomic(self.db):
            new_balance = self.ledger_repo.apply_delta(
                user_id,
                value,
                TransactionCategory.ADMIN_ADD,
                reason or f"Added by {actor.username}",
            )
        logger.info(f"Admin {actor.id} added {value} to user {user_id}")
        return BalanceChangeResponse(
            user_id=user_id,
            amount=value,
            category=TransactionCategory.ADMIN_ADD,
            new_balance=new_balance,
            message="Coins added",
        )

    def set_coins(
        self, actor: UserSchema, user_id: int, amount: Number, reason: str = ""
    ) -> BalanceChangeResponse:
        """잔액을 절대값으로 설정 (소유자 전용, 자기 자신 포함)"""
        value = quantize(amount)
        with atomic(self.db):
            new_balance = self.ledger_repo.set_balance(
                user_id,
                value,
                TransactionCategory.ADMIN_ADJUSTMENT,
                reason or f"Balance set by {actor.username}",
            )
        logger.info(f"Owner {actor.id} set balance of user {user_id} to {value}")
        return BalanceChangeResponse(
            user_id=user_id,
            amount=value,
            category=TransactionCategory.ADMIN_ADJUSTMENT,
            new_balance=new_balance,
            message="Balance set",
        )

    def reset_coins(self, actor: UserSchema, user_id: int) -> BalanceChangeResponse:
        with atomic(self.db):
            new_balance = self.ledger_repo.set_balance(
                user_id,
                0,
                TransactionCategory.OWNER_RESET,
                f"Balance reset by {actor.username}",
            )
        logger.info(f"Owner {actor.id} reset balance of user {user_id}")
        return BalanceChangeResponse(
            user_id=user_id,
            amount=new_balance,
            category=TransactionCategory.OWNER_RESET,
            new_balance=new_balance,
            message="Balance reset",
        )

    # ------------------------------------------------------------------
    # 차단
    # ------------------------------------------------------------------

    def ban_user(self, actor: UserSchema, user_id: int, reason: str = "") -> UserSchema:
        """플랫폼 전체 차단 (소유자 전용)"""
        with atomic(self.db):
            target = self.user_repo.lock(user_id)
            if target.id == actor.id:
                raise AuthorizationError("You cannot ban yourself")
            if target.has_at_least(UserRole.OWNER):
                raise AuthorizationError("Owner accounts cannot be banned")
            self.user_repo.set_banned(target, True, reason or None)
        logger.warning(f"User {user_id} banned by {actor.id}: {reason}")
        return UserSchema.model_validate(target)

    def unban_user(self, actor: UserSchema, user_id: int) -> UserSchema:
        with atomic(self.db):
            target = self.user_repo.lock(user_id)
            self._ensure_can_modify(actor, target)
            self.user_repo.set_banned(target, False)
        logger.info(f"User {user_id} unbanned by {actor.id}")
        return UserSchema.model_validate(target)

    def ban_game(
        self, actor: UserSchema, user_id: int, game_type: str, reason: str = ""
    ) -> GameBanEntry:
        game = self._ensure_game_type(game_type)
        with atomic(self.db):
            target = self.user_repo.require(user_id)
            self._ensure_can_modify(actor, target)
            ban = self.game_repo.add_ban(user_id, game, reason or None, actor.id)
        logger.info(f"User {user_id} banned from {game} by {actor.id}")
        return GameBanEntry.model_validate(ban)

    def unban_game(self, actor: UserSchema, user_id: int, game_type: str) -> bool:
        game = self._ensure_game_type(game_type)
        with atomic(self.db):
            self.user_repo.require(user_id)
            removed = self.game_repo.remove_ban(user_id, game)
        if not removed:
            raise NotFoundError(
                f"User {user_id} is not banned from {game}", error_code="GAME_004"
            )
        logger.info(f"User {user_id} unbanned from {game} by {actor.id}")
        return True

    def list_game_bans(self, user_id: Optional[int] = None) -> List[GameBanEntry]:
        return self.game_repo.list_bans(user_id)

    # ------------------------------------------------------------------
    # 사용자 관리
    # ------------------------------------------------------------------

    def set_vip(
        self,
        actor: UserSchema,
        user_id: int,
        is_vip: bool,
        duration_days: Optional[int] = None,
    ) -> UserSchema:
        with atomic(self.db):
            target = self.user_repo.lock(user_id)
            self._ensure_can_modify(actor, target)
            self.user_repo.set_vip(target, is_vip, duration_days)
        logger.info(f"User {user_id} VIP={is_vip} ({duration_days} days) by {actor.id}")
        return UserSchema.model_validate(target)

    def update_role(self, actor: UserSchema, user_id: int, role: UserRole) -> UserSchema:
        """역할 변경

        Raises:
            AuthorizationError: 대상 규칙 위반, 소유자 권한 부여 시도
        """
        role = UserRole(role)
        if role == UserRole.OWNER:
            raise AuthorizationError("Owner role cannot be granted")
        with atomic(self.db):
            target = self.user_repo.lock(user_id)
            self._ensure_can_modify(actor, target)
            touches_admin = role == UserRole.ADMIN or target.role == UserRole.ADMIN.value
            if touches_admin and not actor.is_owner:
                raise AuthorizationError("Only owners can grant or revoke admin")
            previous = target.role
            self.user_repo.set_role(target, role)
        logger.warning(f"User {user_id} role {previous} -> {role.value} by {actor.id}")
        return UserSchema.model_validate(target)

    def promote_admin(self, actor: UserSchema, user_id: int) -> UserSchema:
        return self.update_role(actor, user_id, UserRole.ADMIN)

    def remove_admin(self, actor: UserSchema, user_id: int) -> UserSchema:
        target = self.user_repo.require(user_id)
        if target.role != UserRole.ADMIN.value:
            raise ValidationError(f"User {user_id} is not an admin", error_code="ROLE_001")
        return self.update_role(actor, user_id, UserRole.USER)

    def delete_user(self, actor: UserSchema, user_id: int) -> bool:
        """사용자 삭제 - 대기 중인 거래를 먼저 정리한다"""
        with atomic(self.db):
            target = self.user_repo.lock(user_id)
            self._ensure_can_modify(actor, target)
            username = target.username
            TradeService(self.db, self.settings).cancel_pending_for_user(user_id)
            self.user_repo.delete_user(target)
        logger.warning(f"User {user_id} ({username}) deleted by {actor.id}")
        return True

    def list_users(self, limit: int = 100, offset: int = 0) -> UserListResponse:
        users = self.user_repo.list_users(limit=min(limit, 500), offset=offset)
        return UserListResponse(users=users, total_count=self.user_repo.count())

    def list_admins(self) -> UserListResponse:
        users = self.user_repo.list_by_role(UserRole.OWNER) + self.user_repo.list_by_role(
            UserRole.ADMIN
        )
        return UserListResponse(users=users, total_count=len(users))

    def list_transactions(self, limit: int = 100, offset: int = 0) -> TransactionListResponse:
        entries = self.ledger_repo.list_all(limit=min(limit, 500), offset=offset)
        total = self.ledger_repo.total_count()
        return TransactionListResponse(
            entries=entries,
            total_count=total,
            has_next=offset + len(entries) < total,
        )

    def stats(self) -> AdminStats:
        return AdminStats(
            total_users=self.user_repo.count(),
            total_coins=self.user_repo.total_coins(),
            total_transactions=self.ledger_repo.total_count(),
            total_bank_balance=self.bank_repo.total_balance(),
            total_games_played=self.game_repo.total_count(),
        )

    def list_bank_accounts(self) -> BankAccountListResponse:
        return BankService(self.db, self.settings).list_all_accounts()
