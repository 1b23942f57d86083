"""
개발용 시드 스크립트
소유자/관리자/데모 사용자 계정과 데모 프로모션 코드를 생성
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from decimal import Decimal

from pcoin.core.security import hash_password
from pcoin.database.session import get_db_context
from pcoin.models.ledger import TransactionCategory
from pcoin.models.user import UserRole
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.repositories.redeem_repository import RedeemRepository
from pcoin.repositories.user_repository import UserRepository

DEFAULT_PASSWORD = "changeme123"

SEED_USERS = [
    ("owner", UserRole.OWNER, Decimal("10000.00")),
    ("admin", UserRole.ADMIN, Decimal("1000.00")),
    ("alice", UserRole.USER, Decimal("100.00")),
    ("bob", UserRole.USER, Decimal("100.00")),
]

DEMO_CODE = ("PCOIN1", Decimal("25.00"), 100)


def seed_users():
    """기본 계정 생성 (이미 있으면 건너뜀)"""
    with get_db_context() as db:
        users = UserRepository(db)
        ledger = LedgerRepository(db)
        owner_id = None
        for username, role, balance in SEED_USERS:
            existing = users.get_model_by_username(username)
            if existing is not None:
                print(f"   - {username} already exists (id={existing.id})")
                if role == UserRole.OWNER:
                    owner_id = existing.id
                continue
            user = users.create_user(username, hash_password(DEFAULT_PASSWORD), role=role)
            ledger.set_balance(user.id, balance, TransactionCategory.ADMIN_ADJUSTMENT, "Seed balance")
            if role == UserRole.OWNER:
                owner_id = user.id
            print(f"   + {username} ({role.value}) balance={balance}")
    return owner_id


def seed_codes(owner_id):
    code, amount, limit = DEMO_CODE
    with get_db_context() as db:
        codes = RedeemRepository(db)
        if codes.code_exists(code):
            print(f"   - code {code} already exists")
            return
        codes.create_code(code, amount, limit, owner_id)
        print(f"   + code {code}: {amount} P COIN x {limit}")


if __name__ == "__main__":
    print("🌱 Seeding users")
    owner = seed_users()
    print("🎟  Seeding redeem codes")
    seed_codes(owner)
    print(f"✅ Done (password for all seed accounts: {DEFAULT_PASSWORD})")
