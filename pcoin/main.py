import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from pcoin import containers
from pcoin.config import settings
from pcoin.core.exception_handlers import register_exception_handlers
from pcoin.core.logging_middleware import LoggingMiddleware
from pcoin.logging_config import setup_logging
from pcoin.routers import (
    admin_router,
    auth_router,
    bank_router,
    game_router,
    health_router,
    owner_router,
    redeem_router,
    trade_router,
    wallet_router,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_dotenv("pcoin/.env")
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)
    app.container = containers.Container()  # type: ignore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)

    @app.get("/")
    def hello() -> dict:
        return {"message": f"{settings.APP_NAME} is running"}

    app.include_router(health_router.router)
    for module in (
        auth_router,
        wallet_router,
        game_router,
        trade_router,
        bank_router,
        redeem_router,
        admin_router,
        owner_router,
    ):
        app.include_router(module.router, prefix=settings.API_V1_STR)

    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
