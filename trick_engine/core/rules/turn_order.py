"""
座位顺序计算
"""
from typing import Sequence

__all__ = ['next_player']


def next_player(order: Sequence[str], from_player: str, offset: int = 1) -> str:
    """
    按座位顺序循环移动offset个座位.

    offset可以为负数，用于回看本墩的首攻玩家.

    Args:
        order: 固定的座位顺序
        from_player: 起始玩家ID
        offset: 移动的座位数

    Returns:
        str: 目标玩家ID

    Raises:
        ValueError: 当from_player不在座位中时
    """
    if not order:
        raise ValueError("座位顺序不能为空")
    if from_player not in order:
        raise ValueError(f"玩家 {from_player} 不在座位中")
    # Python的 % 结果与除数同号，对负偏移也不会得到负下标
    return order[(list(order).index(from_player) + offset) % len(order)]
