"""
基础阶段处理器模块
"""
import logging
from typing import Optional, TYPE_CHECKING

from .types import GamePhase, GameContext, GameEvent

if TYPE_CHECKING:
    from .game_state_machine import GameStateMachine

__all__ = ['BasePhaseHandler']

logger = logging.getLogger(__name__)


class BasePhaseHandler:
    """
    基础阶段处理器，提供通用功能

    transient为True的阶段是无等待的决策节点：进入后立即调用evaluate.
    """

    transient = False

    def __init__(self, phase: GamePhase):
        self.phase = phase

    def on_enter(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        """进入阶段的默认处理"""
        logger.debug(f"[游戏阶段] 进入阶段: {self.phase.value}")

    def on_exit(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        """退出阶段的默认处理"""
        logger.debug(f"[游戏阶段] 退出阶段: {self.phase.value}")

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        """默认忽略所有事件"""
        return None

    def evaluate(self, ctx: GameContext, machine: 'GameStateMachine') -> GameEvent:
        raise NotImplementedError(f"{self.phase.value} 不是瞬时阶段")

    def _event(self, event_type: str, **data) -> GameEvent:
        return GameEvent(event_type=event_type, data=data, source_phase=self.phase, internal=True)
