from pcoin.models.base import Base
from pcoin.models.user import User, UserRole
from pcoin.models.ledger import CoinTransaction, TransactionCategory
from pcoin.models.trade import Trade, TradeStatus
from pcoin.models.bank import BankAccount, BankTransaction, BankTransactionType
from pcoin.models.redeem import CodeRedemption, RedeemCode
from pcoin.models.game import GameBan, GameResult, GameSession

__all__ = [
    "Base",
    "User",
    "UserRole",
    "CoinTransaction",
    "TransactionCategory",
    "Trade",
    "TradeStatus",
    "BankAccount",
    "BankTransaction",
    "BankTransactionType",
    "RedeemCode",
    "CodeRedemption",
    "GameBan",
    "GameResult",
    "GameSession",
]
