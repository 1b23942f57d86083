from abc import ABC
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

T = TypeVar("T")
SchemaType = TypeVar("SchemaType", bound=BaseModel)


class BaseRepository(Generic[T, SchemaType], ABC):
    """모든 리포지토리의 베이스 클래스 - Pydantic 응답 보장

    리포지토리는 커밋하지 않는다. 트랜잭션 경계(작업 단위)는 서비스가
    `atomic(db)`로 소유하며, 리포지토리는 flush까지만 수행한다.
    """

    def __init__(
        self, model_class: Type[T], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, model_instance: Any) -> Optional[SchemaType]:
        """SQLAlchemy 모델을 Pydantic 스키마로 변환"""
        if model_instance is None:
            return None
        # Pydantic v2의 model_validate를 사용하여 from_attributes 활용
        return self.schema_class.model_validate(model_instance)

    def _to_schemas(self, model_instances: List[Any]) -> List[SchemaType]:
        return [self.schema_class.model_validate(m) for m in model_instances]

    def get_model(self, id: Any) -> Optional[T]:
        """ID로 ORM 인스턴스 조회"""
        return self.db.get(self.model_class, id)

    def get_for_update(self, id: Any) -> Optional[T]:
        """ID로 조회하면서 행 잠금(SELECT ... FOR UPDATE)을 건다

        잠금은 현재 트랜잭션이 커밋/롤백될 때까지 유지된다.
        """
        stmt = (
            select(self.model_class)
            .where(getattr(self.model_class, "id") == id)
            .with_for_update()
        )
        return self.db.execute(stmt).scalars().first()

    def get_by_id(self, id: Any) -> Optional[SchemaType]:
        """ID로 조회 - Pydantic 스키마 반환"""
        return self._to_schema(self.get_model(id))

    def get_by_field(self, field_name: str, value: Any) -> Optional[SchemaType]:
        """특정 필드로 조회 - Pydantic 스키마 반환"""
        stmt = select(self.model_class).where(
            getattr(self.model_class, field_name) == value
        )
        return self._to_schema(self.db.execute(stmt).scalars().first())

    def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SchemaType]:
        """조건에 맞는 모든 레코드 조회 - Pydantic 스키마 리스트 반환"""
        stmt = select(self.model_class)

        for key, value in (filters or {}).items():
            if hasattr(self.model_class, key):
                stmt = stmt.where(getattr(self.model_class, key) == value)

        if order_by and hasattr(self.model_class, order_by):
            column = getattr(self.model_class, order_by)
            stmt = stmt.order_by(column.desc() if descending else column)

        if offset:
            stmt = stmt.offset(offset)

        if limit:
            stmt = stmt.limit(limit)

        return self._to_schemas(list(self.db.execute(stmt).scalars().all()))

    def add(self, instance: T) -> T:
        """인스턴스를 세션에 추가하고 flush (커밋은 호출자 책임)"""
        self.db.add(instance)
        self.db.flush()
        return instance

    def create(self, **kwargs) -> T:
        """새 레코드 생성 - ORM 인스턴스 반환"""
        return self.add(self.model_class(**kwargs))

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """레코드 수 조회"""
        stmt = select(func.count()).select_from(self.model_class)

        for key, value in (filters or {}).items():
            if hasattr(self.model_class, key):
                stmt = stmt.where(getattr(self.model_class, key) == value)

        return int(self.db.execute(stmt).scalar_one())

    def exists(self, filters: Dict[str, Any]) -> bool:
        """레코드 존재 여부 확인"""
        return self.count(filters) > 0
