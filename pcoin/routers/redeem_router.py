from fastapi import APIRouter, Depends

from pcoin.core.auth_middleware import get_current_active_user
from pcoin.core.dependencies import get_redeem_service
from pcoin.schemas.redeem import RedeemRequest, RedeemResponse
from pcoin.schemas.user import User as UserSchema
from pcoin.services.redeem_service import RedeemService

router = APIRouter(prefix="/redeem", tags=["redeem"])


@router.post("", response_model=RedeemResponse)
def redeem_code(
    request: RedeemRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    redeem_service: RedeemService = Depends(get_redeem_service),
) -> RedeemResponse:
    """
    프로모션 코드 사용 (대소문자/공백 무시)

    HTTP Status:
        200: 지급 완료
        404: 존재하지 않는 코드
        409: 이미 사용한 코드 또는 소진된 코드
    """
    return redeem_service.redeem(request.code, current_user.id)
