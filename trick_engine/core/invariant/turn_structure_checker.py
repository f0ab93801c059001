"""
回合结构检查器

检查当前玩家、墩数和活动请求是否与所处阶段一致.
"""

from collections import Counter
from typing import Optional

from ..snapshot.types import GameInfoSnapshot
from .base_checker import BaseInvariantChecker
from .types import InvariantType

__all__ = ['TurnStructureChecker']

# 这些阶段不应有任何活动请求
_QUIET_PHASES = {"passing", "playing.endTurn", "endGame", "init"}


class TurnStructureChecker(BaseInvariantChecker):
    """回合结构检查器"""

    def __init__(self, max_rounds: Optional[int] = None):
        """
        Args:
            max_rounds: 每手墩数上限，None表示按 52 // 玩家数 计算
        """
        super().__init__(InvariantType.TURN_STRUCTURE)
        self._max_rounds = max_rounds

    def _perform_check(self, snapshot: GameInfoSnapshot) -> bool:
        if snapshot.current_player not in snapshot.player_order:
            self._add_violation(f"当前玩家 {snapshot.current_player} 不在座位中")

        max_rounds = self._max_rounds or 52 // len(snapshot.player_order)
        if not 1 <= snapshot.round <= max_rounds:
            self._add_violation(
                f"墩数{snapshot.round}超出范围 [1, {max_rounds}]",
                context={'round': snapshot.round}
            )

        per_slot = Counter((r.player_id, r.tag) for r in snapshot.requests)
        doubled = [slot for slot, n in per_slot.items() if n > 1]
        if doubled:
            self._add_violation(f"同一玩家同一标签存在多个活动请求: {doubled}")

        phase = snapshot.phase.value
        if phase == "playing.requesting":
            live = [r for r in snapshot.requests if not r.completed]
            if len(live) != 1 or live[0].player_id != snapshot.current_player or live[0].tag != "hand":
                self._add_violation(
                    "出牌请求阶段必须恰好有一个当前玩家的hand请求",
                    context={'requests': [(r.request_id, r.player_id, r.tag) for r in live]}
                )
        elif phase in _QUIET_PHASES and snapshot.requests:
            self._add_violation(
                f"阶段 {phase} 不应存在活动请求",
                context={'requests': [r.request_id for r in snapshot.requests]}
            )

        return not self._violations
