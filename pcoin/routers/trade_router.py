import logging

from fastapi import APIRouter, Depends, Path, status

from pcoin.core.auth_middleware import get_current_active_user
from pcoin.core.dependencies import get_trade_service
from pcoin.schemas.trade import TradeActionResponse, TradeCreateRequest, TradeListResponse
from pcoin.schemas.user import User as UserSchema
from pcoin.services.trade_service import TradeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trades", tags=["trades"])


@router.post("", response_model=TradeActionResponse, status_code=status.HTTP_201_CREATED)
def create_trade(
    request: TradeCreateRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    trade_service: TradeService = Depends(get_trade_service),
) -> TradeActionResponse:
    """
    송금 요청 생성 - 금액은 즉시 차감되어 수신자가 수락할 때까지 보관된다

    HTTP Status:
        201: 생성됨
        400: 잔액 부족
        404: 수신자 없음
        422: 자기 자신에게 송금, 잘못된 금액
    """
    return trade_service.create_trade(current_user.id, request)


@router.get("/sent", response_model=TradeListResponse)
def sent_trades(
    current_user: UserSchema = Depends(get_current_active_user),
    trade_service: TradeService = Depends(get_trade_service),
) -> TradeListResponse:
    return trade_service.list_sent(current_user.id)


@router.get("/received", response_model=TradeListResponse)
def received_trades(
    current_user: UserSchema = Depends(get_current_active_user),
    trade_service: TradeService = Depends(get_trade_service),
) -> TradeListResponse:
    return trade_service.list_received(current_user.id)


@router.post("/{trade_id}/accept", response_model=TradeActionResponse)
def accept_trade(
    trade_id: int = Path(..., gt=0),
    current_user: UserSchema = Depends(get_current_active_user),
    trade_service: TradeService = Depends(get_trade_service),
) -> TradeActionResponse:
    """수신자만 수락 가능, 이미 처리된 거래는 409"""
    return trade_service.accept(trade_id, current_user.id)


@router.post("/{trade_id}/cancel", response_model=TradeActionResponse)
def cancel_trade(
    trade_id: int = Path(..., gt=0),
    current_user: UserSchema = Depends(get_current_active_user),
    trade_service: TradeService = Depends(get_trade_service),
) -> TradeActionResponse:
    """송신자 또는 수신자가 취소 - 송신자에게 환불"""
    return trade_service.cancel(trade_id, current_user.id)
