from decimal import Decimal
from typing import Dict

from pcoin.games.base import GameEngine
from pcoin.games.blackjack import BlackjackEngine
from pcoin.games.cases import CasesEngine
from pcoin.games.cups import CupsEngine
from pcoin.games.jackpot import JackpotEngine
from pcoin.games.mines import MinesEngine
from pcoin.games.plinko import PlinkoEngine
from pcoin.games.poker import PokerEngine
from pcoin.games.roulette import RouletteEngine
from pcoin.games.slide import SlideEngine
from pcoin.games.towers import TowersEngine
from pcoin.services.jackpot_service import JackpotPool


def build_registry(
    jackpot_pool: JackpotPool, jackpot_min_bet: Decimal = Decimal("1.00")
) -> Dict[str, GameEngine]:
    """game_type -> 엔진 인스턴스"""
    engines = [
        RouletteEngine(),
        SlideEngine(),
        PlinkoEngine(),
        CupsEngine(),
        JackpotEngine(jackpot_pool, jackpot_min_bet),
        MinesEngine(),
        BlackjackEngine(),
        PokerEngine(),
        CasesEngine(),
        TowersEngine(),
    ]
    return {engine.game_type: engine for engine in engines}


GAME_TYPES = frozenset(
    cls.game_type
    for cls in (
        RouletteEngine,
        SlideEngine,
        PlinkoEngine,
        CupsEngine,
        JackpotEngine,
        MinesEngine,
        BlackjackEngine,
        PokerEngine,
        CasesEngine,
        TowersEngine,
    )
)
