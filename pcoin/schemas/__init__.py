from .auth import Token, TokenData, RegisterRequest, LoginRequest
from .user import User
from .ledger import BalanceResponse, TransactionEntry
from .trade import TradeResponse
from .game import PlayRequest, PlayResponse
