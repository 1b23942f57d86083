from fastapi import HTTPException, status
from typing import Optional, Dict, Any

class BaseAPIException(HTTPException):
    """Base exception for API errors"""
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": error_code,
                    "message": message,
                    "details": self.details
                }
            }
        )

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message

class AuthenticationError(BaseAPIException):
    """Authentication related errors"""
    def __init__(self, message: str = "Authentication failed", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTH_001",
            message=message,
            details=details
        )

class AuthorizationError(BaseAPIException):
    """Authorization related errors (Forbidden)"""
    def __init__(self, message: str = "Access forbidden", details: Optional[Dict] = None, error_code: str = "AUTH_002"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code=error_code,
            message=message,
            details=details
        )

class ValidationError(BaseAPIException):
    """Validation errors"""
    def __init__(self, message: str = "Validation failed", details: Optional[Dict] = None, error_code: str = "VALIDATION_001"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=error_code,
            message=message,
            details=details
        )

class BusinessLogicError(BaseAPIException):
    """Business logic errors"""
    def __init__(self, error_code: str, message: str, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            details=details
        )

class NotFoundError(BaseAPIException):
    """Resource not found errors"""
    def __init__(self, message: str = "Resource not found", details: Optional[Dict] = None, error_code: str = "NOT_FOUND_001"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            message=message,
            details=details
        )

class ConflictError(BaseAPIException):
    """Resource conflict errors"""
    def __init__(self, message: str = "Resource conflict", details: Optional[Dict] = None, error_code: str = "CONFLICT_001"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code=error_code,
            message=message,
            details=details
        )

class InternalServerError(BaseAPIException):
    """Internal server errors"""
    def __init__(self, message: str = "Internal server error", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_001",
            message=message,
            details=details
        )

class InsufficientBalanceError(BaseAPIException):
    """Insufficient balance errors"""
    def __init__(self, message: str = "Insufficient balance", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="BALANCE_001",
            message=message,
            details=details
        )


# ---------------------------------------------------------------------------
# Economy errors
# ---------------------------------------------------------------------------

class InsufficientFunds(InsufficientBalanceError):
    """잔액 부족 - 차감 후 잔액이 음수가 되는 경우"""
    def __init__(self, required: Any = None, available: Any = None):
        details = {}
        if required is not None:
            details["required"] = str(required)
        if available is not None:
            details["available"] = str(available)
        super().__init__(
            message=f"Insufficient funds. Required: {required}, Available: {available}",
            details=details,
        )

class InvalidAmount(ValidationError):
    def __init__(self, message: str = "Amount must be a positive number", details: Optional[Dict] = None):
        super().__init__(message=message, details=details, error_code="AMOUNT_001")

class AmountTooLarge(ValidationError):
    def __init__(self, limit: Any, details: Optional[Dict] = None):
        super().__init__(
            message=f"Amount exceeds the maximum of {limit}",
            details={"limit": str(limit), **(details or {})},
            error_code="AMOUNT_002",
        )

class UserNotFound(NotFoundError):
    def __init__(self, user_ref: Any):
        super().__init__(
            message=f"User not found: {user_ref}",
            details={"user": str(user_ref)},
            error_code="USER_002",
        )

class TradeNotFound(NotFoundError):
    def __init__(self, trade_id: int):
        super().__init__(
            message=f"Trade not found: {trade_id}",
            details={"trade_id": trade_id},
            error_code="TRADE_001",
        )

class AlreadyInTerminalState(ConflictError):
    """이미 종료된 상태(완료/취소/소진)에서 다시 전이하려는 경우"""
    def __init__(self, message: str = "Already in a terminal state", details: Optional[Dict] = None, error_code: str = "STATE_001"):
        super().__init__(message=message, details=details, error_code=error_code)

class InvalidCode(NotFoundError):
    def __init__(self, code: str):
        super().__init__(
            message="Invalid redeem code",
            details={"code": code},
            error_code="CODE_001",
        )

class CodeExhausted(AlreadyInTerminalState):
    def __init__(self, code: str):
        super().__init__(
            message="Redeem code has reached its usage limit",
            details={"code": code},
            error_code="CODE_002",
        )

class AlreadyRedeemed(ConflictError):
    def __init__(self, code: str):
        super().__init__(
            message="You have already redeemed this code",
            details={"code": code},
            error_code="CODE_003",
        )

class InvalidGameParams(ValidationError):
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message=message, details=details, error_code="GAME_001")

class GameBanned(AuthorizationError):
    def __init__(self, game_type: str):
        super().__init__(
            message=f"You are banned from playing {game_type}",
            details={"game_type": game_type},
            error_code="GAME_002",
        )

class AccountBanned(AuthorizationError):
    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            message="Account is banned",
            details={"reason": reason} if reason else None,
            error_code="AUTH_005",
        )
