"""
Invariant Module - 不变量检查

Classes:
    InvariantType: 不变量类型
    InvariantViolation: 违反记录
    InvariantCheckResult: 检查结果
    InvariantError: 不变量违反异常
    BaseInvariantChecker: 检查器基类
    CardConservationChecker: 52张牌守恒
    TurnStructureChecker: 回合结构一致性
    GameInvariants: 统一检查入口
"""

from .types import InvariantType, InvariantViolation, InvariantCheckResult, InvariantError
from .base_checker import BaseInvariantChecker
from .card_conservation_checker import CardConservationChecker
from .turn_structure_checker import TurnStructureChecker
from .game_invariants import GameInvariants

__all__ = [
    'InvariantType',
    'InvariantViolation',
    'InvariantCheckResult',
    'InvariantError',
    'BaseInvariantChecker',
    'CardConservationChecker',
    'TurnStructureChecker',
    'GameInvariants',
]
