"""
快照管理器

从引擎上下文和请求注册表创建快照.
"""

from typing import Optional, TYPE_CHECKING

from ..requests.request_registry import RequestRegistry
from .types import GameInfoSnapshot, PlayerSnapshot, RequestSnapshot

if TYPE_CHECKING:
    from ..state_machine.types import GameContext, GamePhase

__all__ = ['SnapshotManager', 'SnapshotCreationError']


class SnapshotCreationError(Exception):
    """快照创建错误"""
    pass


class SnapshotManager:
    """
    快照管理器

    保留最近一次创建的快照，便于调用方比较前后两次状态.
    """

    def __init__(self):
        self._latest: Optional[GameInfoSnapshot] = None

    @property
    def latest(self) -> Optional[GameInfoSnapshot]:
        return self._latest

    def create_snapshot(self, ctx: 'GameContext', phase: 'GamePhase',
                        registry: RequestRegistry, status: str = 'active') -> GameInfoSnapshot:
        """
        从游戏上下文创建快照

        Args:
            ctx: 游戏上下文
            phase: 当前阶段
            registry: 活动请求
            status: 引擎运行状态

        Returns:
            GameInfoSnapshot: 快照

        Raises:
            SnapshotCreationError: 上下文不完整时抛出
        """
        try:
            players = tuple(
                PlayerSnapshot(
                    player_id=p.player_id,
                    name=p.name,
                    hand=p.hand,
                    play_area=p.play_area,
                    score=p.score,
                )
                for p in ctx.seated_players()
            )
            requests = tuple(
                RequestSnapshot(
                    request_id=r.request_id,
                    player_id=r.player_id,
                    tag=r.tag,
                    count=r.count,
                    completed=r.completed,
                )
                for r in registry.live_requests()
            )
            snapshot = GameInfoSnapshot(
                game_id=ctx.game_id,
                status=status,
                phase=phase,
                players=players,
                player_order=ctx.player_order,
                current_player=ctx.current_player,
                deck=ctx.deck,
                discard=ctx.discard,
                round=ctx.round,
                hand_number=ctx.hand_number,
                hearts_broken=ctx.hearts_broken,
                winner=ctx.winner,
                pass_selections=tuple(
                    (pid, ctx.pass_selections[pid])
                    for pid in ctx.player_order if pid in ctx.pass_selections
                ),
                last_trick=ctx.last_trick,
                requests=requests,
            )
        except (KeyError, ValueError) as e:
            raise SnapshotCreationError(f"创建快照失败: {str(e)}") from e

        self._latest = snapshot
        return snapshot
