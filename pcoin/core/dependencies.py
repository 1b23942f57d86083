"""요청 단위 서비스 의존성

서비스는 컨테이너의 Factory로 만들되, DB 세션은 FastAPI의 ``Depends(get_db)``로
요청마다 새로 연다. 같은 요청 안에서는 인증과 서비스가 하나의 세션을 공유하고,
다른 요청과는 세션(트랜잭션, 행 잠금)을 공유하지 않는다.
"""

from typing import Callable

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.orm import Session

from pcoin.containers import Container
from pcoin.database.session import get_db
from pcoin.services.admin_service import AdminService
from pcoin.services.auth_service import AuthService
from pcoin.services.bank_service import BankService
from pcoin.services.game_service import GameService
from pcoin.services.ledger_service import LedgerService
from pcoin.services.redeem_service import RedeemService
from pcoin.services.trade_service import TradeService


@inject
def get_auth_service(
    db: Session = Depends(get_db),
    factory: Callable[..., AuthService] = Depends(Provide[Container.services.auth_service.provider]),
) -> AuthService:
    return factory(db=db)


@inject
def get_ledger_service(
    db: Session = Depends(get_db),
    factory: Callable[..., LedgerService] = Depends(Provide[Container.services.ledger_service.provider]),
) -> LedgerService:
    return factory(db=db)


@inject
def get_trade_service(
    db: Session = Depends(get_db),
    factory: Callable[..., TradeService] = Depends(Provide[Container.services.trade_service.provider]),
) -> TradeService:
    return factory(db=db)


@inject
def get_bank_service(
    db: Session = Depends(get_db),
    factory: Callable[..., BankService] = Depends(Provide[Container.services.bank_service.provider]),
) -> BankService:
    return factory(db=db)


@inject
def get_redeem_service(
    db: Session = Depends(get_db),
    factory: Callable[..., RedeemService] = Depends(Provide[Container.services.redeem_service.provider]),
) -> RedeemService:
    return factory(db=db)


@inject
def get_game_service(
    db: Session = Depends(get_db),
    factory: Callable[..., GameService] = Depends(Provide[Container.services.game_service.provider]),
) -> GameService:
    return factory(db=db)


@inject
def get_admin_service(
    db: Session = Depends(get_db),
    factory: Callable[..., AdminService] = Depends(Provide[Container.services.admin_service.provider]),
) -> AdminService:
    return factory(db=db)
