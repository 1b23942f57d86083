import logging
import threading
from decimal import Decimal

from pcoin.config import Settings
from pcoin.utils.money import quantize

logger = logging.getLogger(__name__)


class JackpotPool:
    """프로세스 전역 잭팟 풀

    컨테이너에서 Singleton으로 생성되며, 모든 증감은 락으로 보호된다.
    풀은 메모리에만 존재하므로 프로세스 재시작 시 seed 값으로 초기화된다.
    """

    def __init__(self, seed: Decimal, contribution_rate: Decimal):
        self.seed = quantize(seed)
        self.contribution_rate = Decimal(contribution_rate)
        self._amount = self.seed
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "JackpotPool":
        return cls(settings.JACKPOT_SEED, settings.JACKPOT_CONTRIBUTION_RATE)

    def current(self) -> Decimal:
        with self._lock:
            return self._amount

    def contribute(self, bet: Decimal) -> Decimal:
        """베팅액의 일정 비율을 풀에 적립, 적립 후 풀 금액 반환"""
        share = quantize(bet * self.contribution_rate)
        with self._lock:
            self._amount += share
            return self._amount

    def claim(self) -> Decimal:
        """풀 전액을 지급하고 seed로 초기화"""
        with self._lock:
            won, self._amount = self._amount, self.seed
        logger.info(f"Jackpot claimed: {won} (reset to {self.seed})")
        return won

    def restore(self, amount: Decimal) -> None:
        """지급이 확정되지 못한 경우 되돌림"""
        with self._lock:
            self._amount += amount - self.seed
        logger.warning(f"Jackpot payout {amount} restored to pool")
