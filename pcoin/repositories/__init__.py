# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .user_repository import UserRepository
from .ledger_repository import LedgerRepository
from .trade_repository import TradeRepository
from .bank_repository import BankRepository
from .redeem_repository import RedeemRepository
from .game_repository import GameRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "LedgerRepository",
    "TradeRepository",
    "BankRepository",
    "RedeemRepository",
    "GameRepository",
]
