import logging
import secrets
import string
from typing import Optional

from sqlalchemy.orm import Session

from pcoin.config import Settings, settings as default_settings
from pcoin.core.exceptions import (
    AlreadyRedeemed,
    CodeExhausted,
    ConflictError,
    InvalidCode,
    ValidationError,
)
from pcoin.database.session import atomic
from pcoin.models.ledger import TransactionCategory
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.repositories.redeem_repository import RedeemRepository
from pcoin.schemas.redeem import (
    RedeemCodeListResponse,
    RedeemCodeResponse,
    RedeemResponse,
)
from pcoin.utils.money import Number, positive_amount

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_code(raw: str) -> str:
    return raw.strip().upper()


class RedeemService:
    """프로모션 코드 발급/사용 서비스

    사용자당 코드 1회, 코드당 전체 사용 횟수 제한.
    사용 처리(카운트 증가 + 사용 기록 + 지갑 입금)는 하나의 작업 단위다.
    """

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.settings = settings
        self.redeem_repo = RedeemRepository(db)
        self.ledger_repo = LedgerRepository(db, max_balance=settings.MAX_BALANCE)

    def _new_code(self) -> str:
        length = self.settings.REDEEM_CODE_LENGTH
        for _ in range(self.settings.REDEEM_CODE_MAX_ATTEMPTS):
            code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
            if not self.redeem_repo.code_exists(code):
                return code
        raise ConflictError(
            "Could not generate a unique redeem code", error_code="CODE_004"
        )

    def generate(
        self,
        amount: Number,
        usage_limit: int,
        creator_id: Optional[int],
        code: Optional[str] = None,
    ) -> RedeemCodeResponse:
        """코드 발급

        Args:
            amount: 코드 사용 시 지급 금액
            usage_limit: 전체 사용 가능 횟수
            creator_id: 발급자 ID
            code: 지정 코드 (없으면 무작위 생성)

        Returns:
            RedeemCodeResponse: 발급된 코드
        """
        value = positive_amount(amount)
        if value > self.settings.MAX_BALANCE:
            raise ValidationError("Code amount exceeds the maximum balance")
        if usage_limit < 1:
            raise ValidationError("Usage limit must be at least 1")

        with atomic(self.db):
            if code is not None:
                code = normalize_code(code)
                if len(code) != self.settings.REDEEM_CODE_LENGTH or any(
                    c not in CODE_ALPHABET for c in code
                ):
                    raise ValidationError(
                        f"Code must be {self.settings.REDEEM_CODE_LENGTH} characters of A-Z0-9"
                    )
                if self.redeem_repo.code_exists(code):
                    raise ConflictError("Redeem code already exists", error_code="CODE_005")
            else:
                code = self._new_code()
            created = self.redeem_repo.create_code(code, value, usage_limit, creator_id)

        logger.info(
            f"Redeem code {code} generated by {creator_id}: amount={value} limit={usage_limit}"
        )
        return RedeemCodeResponse.model_validate(created)

    def redeem(self, code_string: str, user_id: int) -> RedeemResponse:
        """코드 사용

        검사 순서: 존재하지 않음(InvalidCode) -> 이미 사용(AlreadyRedeemed) -> 소진(CodeExhausted)
        """
        code_value = normalize_code(code_string)
        with atomic(self.db):
            code = self.redeem_repo.lock_by_code(code_value)
            if code is None:
                raise InvalidCode(code_value)
            if self.redeem_repo.has_redeemed(code.id, user_id):
                raise AlreadyRedeemed(code_value)
            if code.is_exhausted:
                raise CodeExhausted(code_value)

            code.used_count = code.used_count + 1
            self.redeem_repo.add_redemption(code, user_id)
            new_balance = self.ledger_repo.apply_delta(
                user_id,
                code.amount,
                TransactionCategory.CODE_REDEEM,
                f"Redeemed code: {code_value}",
            )
            amount = code.amount

        logger.info(f"User {user_id} redeemed code {code_value} for {amount}")
        return RedeemResponse(
            code=code_value,
            amount=amount,
            new_balance=new_balance,
            message=f"Redeemed {amount} P COIN",
        )

    def list_codes(self) -> RedeemCodeListResponse:
        codes = self.redeem_repo.list_codes()
        return RedeemCodeListResponse(codes=codes, total_count=len(codes))
