"""
状态快照类型定义

定义对外快照的不可变数据结构.
"""

from dataclasses import dataclass
from typing import Tuple, Dict, Optional, TYPE_CHECKING

from ..rules.types import TrickResult

if TYPE_CHECKING:
    from ..state_machine.types import GamePhase

__all__ = [
    'PlayerSnapshot',
    'RequestSnapshot',
    'GameInfoSnapshot',
]


@dataclass(frozen=True)
class PlayerSnapshot:
    """玩家状态快照"""
    player_id: str
    name: str
    hand: Tuple[int, ...]
    play_area: Tuple[int, ...]
    score: int

    def __post_init__(self):
        """验证玩家快照的有效性"""
        if not self.player_id:
            raise ValueError("player_id不能为空")
        if self.score < 0:
            raise ValueError("score不能为负数")


@dataclass(frozen=True)
class RequestSnapshot:
    """活动请求快照"""
    request_id: str
    player_id: str
    tag: str
    count: int
    completed: bool = False


@dataclass(frozen=True)
class GameInfoSnapshot:
    """引擎状态快照"""
    game_id: str
    status: str  # 'active' / 'done' / 'stopped'
    phase: 'GamePhase'
    players: Tuple[PlayerSnapshot, ...]
    player_order: Tuple[str, ...]
    current_player: str
    deck: Tuple[int, ...]
    discard: Tuple[int, ...]
    round: int
    hand_number: int
    hearts_broken: bool
    winner: Optional[str]
    pass_selections: Tuple[Tuple[str, Tuple[int, ...]], ...]
    last_trick: Optional[TrickResult]
    requests: Tuple[RequestSnapshot, ...]

    def __post_init__(self):
        """验证快照的有效性"""
        if not self.game_id:
            raise ValueError("game_id不能为空")
        if not self.players:
            raise ValueError("players不能为空")
        if self.current_player not in self.player_order:
            raise ValueError(f"current_player({self.current_player})不在座位中")

    def get_player_by_id(self, player_id: str) -> Optional[PlayerSnapshot]:
        """根据ID获取玩家快照"""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def total_cards(self) -> int:
        """牌组、手牌、出牌区和弃牌堆中的牌总数"""
        return (len(self.deck) + len(self.discard)
                + sum(len(p.hand) + len(p.play_area) for p in self.players))

    def scores(self) -> Dict[str, int]:
        return {p.player_id: p.score for p in self.players}
