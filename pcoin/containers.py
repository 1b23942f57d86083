from dependency_injector import containers, providers

from pcoin.config import Settings
from pcoin.database.connection import SessionLocal
from pcoin.services.admin_service import AdminService
from pcoin.services.auth_service import AuthService
from pcoin.services.bank_service import BankService
from pcoin.services.game_service import GameService
from pcoin.services.jackpot_service import JackpotPool
from pcoin.services.ledger_service import LedgerService
from pcoin.services.redeem_service import RedeemService
from pcoin.services.trade_service import TradeService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class RepositoryModule(containers.DeclarativeContainer):
    """Database session.

    호출할 때마다 새 세션을 만든다. 요청 처리에서는 pcoin.core.dependencies가
    FastAPI의 요청 세션을 db 인자로 넘긴다.
    """

    session = providers.Factory(SessionLocal)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies."""

    config = providers.DependenciesContainer()
    repositories = providers.DependenciesContainer()

    # 프로세스 전역 잭팟 풀
    jackpot_pool = providers.Singleton(JackpotPool.from_settings, settings=config.config)

    auth_service = providers.Factory(AuthService, db=repositories.session, settings=config.config)
    ledger_service = providers.Factory(LedgerService, db=repositories.session, settings=config.config)
    trade_service = providers.Factory(TradeService, db=repositories.session, settings=config.config)
    bank_service = providers.Factory(BankService, db=repositories.session, settings=config.config)
    redeem_service = providers.Factory(RedeemService, db=repositories.session, settings=config.config)
    game_service = providers.Factory(
        GameService,
        db=repositories.session,
        settings=config.config,
        jackpot_pool=jackpot_pool,
    )
    admin_service = providers.Factory(AdminService, db=repositories.session, settings=config.config)


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=["pcoin.core.dependencies"],
    )

    config = providers.Container(ConfigModule)
    repositories = providers.Container(RepositoryModule)
    services = providers.Container(
        ServiceModule, config=config, repositories=repositories
    )
