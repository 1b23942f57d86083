from sqlalchemy import BigInteger, Column, DateTime, Integer, Numeric, func
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()

# 지갑/거래 금액: decimal(10,2), 은행 잔액: decimal(15,2)
WalletAmount = Numeric(10, 2, asdecimal=True)
BankAmount = Numeric(15, 2, asdecimal=True)

# sqlite는 INTEGER PRIMARY KEY만 자동 증가
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


class CreatedAtMixin:
    """생성 시각만 갖는 append-only 레코드용 믹스인"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TimestampMixin(CreatedAtMixin):
    """타임스탬프 필드를 위한 믹스인"""

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
        )


class BaseModel(Base, TimestampMixin):
    """변경 가능한 모델의 베이스 클래스"""

    __abstract__ = True

    def dict(self):
        """모델을 딕셔너리로 변환"""
        return {
            column.name: getattr(self, column.name) for column in self.__table__.columns
        }


class LogModel(Base, CreatedAtMixin):
    """불변(append-only) 로그 모델의 베이스 클래스"""

    __abstract__ = True

    def dict(self):
        return {
            column.name: getattr(self, column.name) for column in self.__table__.columns
        }
