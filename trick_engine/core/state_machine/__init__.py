"""
游戏状态机模块

提供出牌游戏的层级阶段管理和阶段转换功能.
"""
from .types import GamePhase, GameEvent, GameContext, PlayerState, PhaseHandler
from .scheduler import TimerHandle, Scheduler, AsyncioScheduler, ManualScheduler
from .base_phase_handler import BasePhaseHandler
from .init_handler import InitHandler
from .passing_handlers import PassingWaitingHandler, PassingRequestingHandler, PassingEvaluatingHandler
from .playing_handlers import (
    PlayingRequestingHandler,
    PlayingResolvingHandler,
    PlayingEvaluatingHandler,
    PlayingEndTurnHandler,
)
from .end_game_handler import EndGameHandler
from .game_state_machine import GameStateMachine
from .state_machine_factory import StateMachineFactory


__all__ = [
    # Core Types
    'GamePhase',
    'GameEvent',
    'GameContext',
    'PlayerState',

    # Scheduling
    'TimerHandle',
    'Scheduler',
    'AsyncioScheduler',
    'ManualScheduler',

    # Handlers
    'PhaseHandler',
    'BasePhaseHandler',
    'InitHandler',
    'PassingWaitingHandler',
    'PassingRequestingHandler',
    'PassingEvaluatingHandler',
    'PlayingRequestingHandler',
    'PlayingResolvingHandler',
    'PlayingEvaluatingHandler',
    'PlayingEndTurnHandler',
    'EndGameHandler',

    # Main classes
    'GameStateMachine',
    'StateMachineFactory',
]
