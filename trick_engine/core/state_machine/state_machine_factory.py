"""
状态机工厂

提供创建配置好的状态机实例的工厂方法.
"""

import random
from typing import Dict, Mapping, Optional, Tuple

from ..events.event_bus import EventBus
from ..rules.types import GameRules, PassingMode
from .types import GamePhase, PhaseHandler
from .init_handler import InitHandler
from .passing_handlers import PassingWaitingHandler, PassingRequestingHandler, PassingEvaluatingHandler
from .playing_handlers import (
    PlayingRequestingHandler,
    PlayingResolvingHandler,
    PlayingEvaluatingHandler,
    PlayingEndTurnHandler,
)
from .end_game_handler import EndGameHandler
from .scheduler import Scheduler

__all__ = ['StateMachineFactory']

Transitions = Dict[Tuple[GamePhase, str], GamePhase]

_FIRST_PHASE = {
    PassingMode.NONE: GamePhase.PLAYING_REQUESTING,
    PassingMode.TIMED: GamePhase.PASSING_WAITING,
    PassingMode.REQUEST: GamePhase.PASSING_REQUESTING,
}


class StateMachineFactory:
    """状态机工厂类"""

    @staticmethod
    def create_default_phases() -> Dict[GamePhase, PhaseHandler]:
        return {
            GamePhase.INIT: InitHandler(),
            GamePhase.PASSING_WAITING: PassingWaitingHandler(),
            GamePhase.PASSING_REQUESTING: PassingRequestingHandler(),
            GamePhase.PASSING_EVALUATING: PassingEvaluatingHandler(),
            GamePhase.PLAYING_REQUESTING: PlayingRequestingHandler(),
            GamePhase.PLAYING_RESOLVING: PlayingResolvingHandler(),
            GamePhase.PLAYING_EVALUATING: PlayingEvaluatingHandler(),
            GamePhase.PLAYING_END_TURN: PlayingEndTurnHandler(),
            GamePhase.END_GAME: EndGameHandler(),
        }

    @staticmethod
    def create_transitions(rules: GameRules) -> Transitions:
        """
        构建转换表

        每手牌的第一个阶段取决于传牌模式.
        """
        first_phase = _FIRST_PHASE[rules.passing_mode]
        return {
            (GamePhase.INIT, "HAND_DEALT"): first_phase,
            (GamePhase.PASSING_WAITING, "PASSING_TIMED_OUT"): GamePhase.PLAYING_REQUESTING,
            (GamePhase.PASSING_REQUESTING, "PASSES_SUBMITTED"): GamePhase.PASSING_EVALUATING,
            (GamePhase.PASSING_EVALUATING, "PASSES_EXCHANGED"): GamePhase.PLAYING_REQUESTING,
            (GamePhase.PLAYING_REQUESTING, "REQUEST_RESOLVED"): GamePhase.PLAYING_RESOLVING,
            (GamePhase.PLAYING_RESOLVING, "PLAY_ACCEPTED"): GamePhase.PLAYING_EVALUATING,
            (GamePhase.PLAYING_EVALUATING, "NEXT_PLAYER"): GamePhase.PLAYING_REQUESTING,
            (GamePhase.PLAYING_EVALUATING, "TRICK_COMPLETED"): GamePhase.PLAYING_END_TURN,
            (GamePhase.PLAYING_END_TURN, "TRICK_CLEARED"): GamePhase.PLAYING_REQUESTING,
            (GamePhase.PLAYING_END_TURN, "HAND_COMPLETED"): first_phase,
            (GamePhase.PLAYING_END_TURN, "GAME_OVER"): GamePhase.END_GAME,
        }

    @staticmethod
    def create(game_id: str,
               players: Mapping[str, str],
               rules: GameRules,
               scheduler: Scheduler,
               event_bus: Optional[EventBus] = None,
               rng: Optional[random.Random] = None,
               custom_handlers: Optional[Dict[GamePhase, PhaseHandler]] = None):
        """
        创建配置好的状态机

        Args:
            game_id: 游戏ID
            players: 玩家ID到名字的有序映射
            rules: 规则参数
            scheduler: 定时器调度器
            event_bus: 事件总线
            rng: 洗牌随机数生成器
            custom_handlers: 覆盖默认处理器

        Returns:
            配置好的GameStateMachine实例
        """
        # 延迟导入避免循环依赖
        from .game_state_machine import GameStateMachine

        phases = StateMachineFactory.create_default_phases()
        if custom_handlers:
            phases.update(custom_handlers)

        return GameStateMachine(
            game_id=game_id,
            players=players,
            rules=rules,
            phases=phases,
            transitions=StateMachineFactory.create_transitions(rules),
            scheduler=scheduler,
            event_bus=event_bus,
            rng=rng,
        )
