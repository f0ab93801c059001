"""
状态机类型定义

定义阶段枚举、事件、游戏上下文以及阶段处理器协议.
"""

from enum import Enum
from typing import Protocol, Dict, Optional, Any, Tuple, Union, TYPE_CHECKING
from dataclasses import dataclass, field

from ..rules.types import TrickResult

if TYPE_CHECKING:
    from .game_state_machine import GameStateMachine

__all__ = [
    'GamePhase',
    'GameEvent',
    'PlayerState',
    'GameContext',
    'PhaseHandler',
]


class GamePhase(Enum):
    """
    游戏阶段枚举

    value是点分隔的层级状态路径.
    """
    INIT = "init"
    PASSING_WAITING = "passing"
    PASSING_REQUESTING = "passing.requesting"
    PASSING_EVALUATING = "passing.evaluating"
    PLAYING_REQUESTING = "playing.requesting"
    PLAYING_RESOLVING = "playing.resolvingRequest"
    PLAYING_EVALUATING = "playing.evaluating"
    PLAYING_END_TURN = "playing.endTurn"
    END_GAME = "endGame"

    @property
    def path(self) -> Tuple[str, ...]:
        return tuple(self.value.split("."))

    @property
    def top_level(self) -> str:
        return self.path[0]

    def to_state_value(self) -> Union[str, Dict[str, Any]]:
        """转换为嵌套的状态值，如 {"playing": "requesting"}"""
        parts = self.path
        value: Union[str, Dict[str, Any]] = parts[-1]
        for part in reversed(parts[:-1]):
            value = {part: value}
        return value


@dataclass(frozen=True)
class GameEvent:
    """
    游戏事件

    internal为True表示由引擎自身产生（raise）的事件，外部不能伪造.
    """
    event_type: str
    data: Dict[str, Any] = field(default_factory=dict)
    source_phase: Optional[GamePhase] = None
    internal: bool = False


@dataclass(frozen=True)
class PlayerState:
    """玩家状态；只能由引擎的变更动作整体替换"""
    player_id: str
    name: str
    hand: Tuple[int, ...] = ()
    play_area: Tuple[int, ...] = ()
    score: int = 0

    def __post_init__(self):
        if not self.player_id:
            raise ValueError("player_id不能为空")
        if self.score < 0:
            raise ValueError("score不能为负数")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.player_id,
            'name': self.name,
            'hand': list(self.hand),
            'playArea': list(self.play_area),
            'score': self.score,
        }


@dataclass
class GameContext:
    """
    游戏上下文

    字段值按值语义替换：变更动作构造新的元组/字典，不就地修改旧值.
    """
    game_id: str
    player_order: Tuple[str, ...]
    players: Dict[str, PlayerState]
    current_player: str
    deck: Tuple[int, ...] = ()
    discard: Tuple[int, ...] = ()
    round: int = 1
    hand_number: int = 1
    hearts_broken: bool = False
    winner: Optional[str] = None
    pass_selections: Dict[str, Tuple[int, ...]] = field(default_factory=dict)
    last_trick: Optional[TrickResult] = None

    def __post_init__(self):
        """验证游戏上下文的有效性"""
        if not self.game_id:
            raise ValueError("game_id不能为空")
        if not self.player_order:
            raise ValueError("player_order不能为空")
        if len(set(self.player_order)) != len(self.player_order):
            raise ValueError("player_order中有重复的玩家")
        if set(self.player_order) != set(self.players):
            raise ValueError("players与player_order不一致")
        if self.current_player not in self.player_order:
            raise ValueError(f"current_player({self.current_player})不在座位中")
        if self.round < 1:
            raise ValueError("round必须从1开始")

    @property
    def player_count(self) -> int:
        return len(self.player_order)

    def seated_players(self):
        """按座位顺序返回玩家"""
        return [self.players[pid] for pid in self.player_order]

    @classmethod
    def create(cls, game_id: str, players: Dict[str, str]) -> 'GameContext':
        """
        按座位顺序创建初始上下文

        Args:
            game_id: 游戏ID
            players: 玩家ID到名字的有序映射
        """
        order = tuple(players)
        if not order:
            raise ValueError("至少需要1个玩家")
        return cls(
            game_id=game_id,
            player_order=order,
            players={pid: PlayerState(player_id=pid, name=name) for pid, name in players.items()},
            current_player=order[0],
        )


class PhaseHandler(Protocol):
    """阶段处理器协议"""

    phase: GamePhase
    transient: bool

    def on_enter(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        """进入阶段时的处理逻辑"""
        ...

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        """处理事件，返回结果事件；返回None表示忽略"""
        ...

    def evaluate(self, ctx: GameContext, machine: 'GameStateMachine') -> GameEvent:
        """瞬时阶段进入后立即求值"""
        ...

    def on_exit(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        """退出阶段时的处理逻辑"""
        ...
