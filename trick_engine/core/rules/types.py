"""
核心规则类型定义

定义规则变体和吃墩结果的数据结构.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..deck.types import RankVariant

__all__ = [
    'PassingMode',
    'LeadRestriction',
    'TrickResolution',
    'GameRules',
    'TrickResult',
]


class PassingMode(Enum):
    """传牌阶段变体"""
    NONE = "none"          # 没有传牌阶段
    TIMED = "timed"        # 旧版：固定延时后进入出牌，期间接受pass动作
    REQUEST = "request"    # 每个玩家一个批量请求


class LeadRestriction(Enum):
    """首攻限制变体"""
    NONE = "none"
    UNTIL_BROKEN = "until_broken"  # 受限花色被打出前不能首攻


class TrickResolution(Enum):
    """吃墩判定变体"""
    SUIT_AWARE = "suit_aware"
    LEGACY_MAX_ID = "legacy_max_id"  # 旧版：按首张牌编号取最大


@dataclass(frozen=True)
class GameRules:
    """
    引擎使用的规则参数

    Attributes:
        rank_variant: 点数编码
        passing_mode: 传牌阶段变体
        pass_count: 每人传出的牌数
        pass_offset: 传给顺位偏移几个座位的玩家
        pass_delay: 旧版传牌阶段的停留秒数
        settle_delay: 一墩结束后的停留秒数
        max_rounds: 每手的墩数，None表示 52 // 玩家数
        lead_restriction: 首攻限制
        trick_resolution: 吃墩判定方式
        target_score: 任一玩家达到该分数时结束游戏
        max_hands: 最多进行的手数
        enforce_request_owner: 是否只接受被请求玩家本人的提交
        enable_invariant_checks: 每次状态稳定后是否检查不变量
    """
    rank_variant: RankVariant = RankVariant.ACE_HIGH
    passing_mode: PassingMode = PassingMode.NONE
    pass_count: int = 3
    pass_offset: int = 1
    pass_delay: float = 1.0
    settle_delay: float = 1.0
    max_rounds: Optional[int] = None
    lead_restriction: LeadRestriction = LeadRestriction.NONE
    trick_resolution: TrickResolution = TrickResolution.SUIT_AWARE
    target_score: Optional[int] = None
    max_hands: Optional[int] = None
    enforce_request_owner: bool = True
    enable_invariant_checks: bool = False

    def __post_init__(self):
        """验证规则参数"""
        if self.pass_count <= 0:
            raise ValueError("pass_count必须大于0")
        if self.pass_delay < 0:
            raise ValueError("pass_delay不能为负数")
        if self.settle_delay < 0:
            raise ValueError("settle_delay不能为负数")
        if self.max_rounds is not None and self.max_rounds <= 0:
            raise ValueError("max_rounds必须大于0")
        if self.target_score is not None and self.target_score <= 0:
            raise ValueError("target_score必须大于0")
        if self.max_hands is not None and self.max_hands <= 0:
            raise ValueError("max_hands必须大于0")

    def rounds_per_hand(self, player_count: int) -> int:
        """每手的墩数"""
        if self.max_rounds is not None:
            return self.max_rounds
        return 52 // player_count


@dataclass(frozen=True)
class TrickResult:
    """一墩的结算结果"""
    leader: str
    winner: str
    score: int
    cards: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'leader': self.leader,
            'winner': self.winner,
            'score': self.score,
            'cards': dict(self.cards),
        }
