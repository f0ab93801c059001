"""
初始化阶段处理器
"""
from typing import Optional, TYPE_CHECKING

from ..events.domain_events import EventType
from ..rules import moves
from .types import GamePhase, GameEvent, GameContext
from .base_phase_handler import BasePhaseHandler

if TYPE_CHECKING:
    from .game_state_machine import GameStateMachine

__all__ = ['InitHandler']


class InitHandler(BasePhaseHandler):
    """初始化阶段处理器：启动时重置牌组、洗牌、发牌"""

    def __init__(self):
        super().__init__(GamePhase.INIT)

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        if event.event_type != "START" or not event.internal:
            return None
        moves.deal_new_hand(ctx, machine.deck)
        machine.publish(EventType.HAND_DEALT, {'hand_number': ctx.hand_number})
        return self._event("HAND_DEALT")
