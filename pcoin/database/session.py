from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from pcoin.database.connection import SessionLocal


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context():
    """컨텍스트 매니저를 사용한 데이터베이스 세션 관리"""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """하나의 작업 단위(unit of work)로 묶어 실행

    블록 안의 모든 쓰기는 함께 커밋되고, 예외가 발생하면 전부 롤백된다.
    FOR UPDATE로 잡은 행 잠금은 커밋/롤백 시점까지 유지된다.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
