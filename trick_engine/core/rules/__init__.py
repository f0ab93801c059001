"""
Rules Module - 游戏规则

- 出牌合法性校验（跟花色、首攻限制）
- 吃墩赢家与分值计算
- 座位顺序
- 对游戏上下文的变更动作
"""

from .types import PassingMode, LeadRestriction, TrickResolution, GameRules, TrickResult
from .turn_order import next_player

__all__ = [
    'PassingMode',
    'LeadRestriction',
    'TrickResolution',
    'GameRules',
    'TrickResult',
    'next_player',
]
