from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from pcoin.models.redeem import CodeRedemption, RedeemCode
from pcoin.repositories.base import BaseRepository
from pcoin.schemas.redeem import RedeemCodeResponse


class RedeemRepository(BaseRepository[RedeemCode, RedeemCodeResponse]):
    """리딤 코드 / 사용 기록 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(RedeemCode, RedeemCodeResponse, db)

    def code_exists(self, code: str) -> bool:
        return self.exists({"code": code})

    def create_code(
        self, code: str, amount: Decimal, usage_limit: int, created_by: Optional[int]
    ) -> RedeemCode:
        return self.create(
            code=code,
            amount=amount,
            usage_limit=usage_limit,
            used_count=0,
            created_by=created_by,
        )

    def lock_by_code(self, code: str) -> Optional[RedeemCode]:
        stmt = select(RedeemCode).where(RedeemCode.code == code).with_for_update()
        return self.db.execute(stmt).scalars().first()

    def has_redeemed(self, code_id: int, user_id: int) -> bool:
        stmt = select(CodeRedemption.id).where(
            CodeRedemption.code_id == code_id, CodeRedemption.user_id == user_id
        )
        return self.db.execute(stmt).first() is not None

    def add_redemption(self, code: RedeemCode, user_id: int) -> CodeRedemption:
        return self.add(
            CodeRedemption(code_id=code.id, user_id=user_id, amount=code.amount)
        )

    def list_codes(self) -> List[RedeemCodeResponse]:
        stmt = select(RedeemCode).order_by(desc(RedeemCode.id))
        return self._to_schemas(list(self.db.execute(stmt).scalars().all()))
