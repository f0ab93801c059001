"""
游戏结束阶段处理器
"""
from typing import TYPE_CHECKING

from .types import GamePhase, GameContext
from .base_phase_handler import BasePhaseHandler

if TYPE_CHECKING:
    from .game_state_machine import GameStateMachine

__all__ = ['EndGameHandler']


class EndGameHandler(BasePhaseHandler):
    """终止阶段：不再接受任何事件"""

    def __init__(self):
        super().__init__(GamePhase.END_GAME)

    def on_enter(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        super().on_enter(ctx, machine)
        machine.mark_done()
