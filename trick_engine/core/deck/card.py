"""
扑克牌信息推导.

card_id -> (花色, 点数, 点数值) 以及分值计算，全部是纯函数.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .types import (
    Suit, RankVariant, DECK_SIZE, SUIT_SIZE, POINT_SUIT, PENALTY_QUEEN_SUIT
)

__all__ = ['CardInfo', 'card_info', 'card_score', 'card_label', 'is_card_id']

_FACE_RANKS: Dict[int, str] = {1: "A", 11: "J", 12: "Q", 13: "K", 14: "A"}


@dataclass(frozen=True)
class CardInfo:
    """
    一张牌的推导信息.

    Attributes:
        suit: 花色
        rank: 点数显示名，如 "Q"、"10"
        rank_value: 用于比较大小的点数值

    Examples:
        >>> card_info(10)
        CardInfo(suit=<Suit.SPADES: 0>, rank='Q', rank_value=12)
    """

    suit: Suit
    rank: str
    rank_value: int

    def to_dict(self) -> Dict[str, Any]:
        return {'suit': int(self.suit), 'rank': self.rank, 'rankValue': self.rank_value}


def is_card_id(value: Any) -> bool:
    """
    判断值是否是合法的牌编号.

    bool 是 int 的子类，需要单独排除.
    """
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < DECK_SIZE


def _rank_name(rank_value: int) -> str:
    return _FACE_RANKS.get(rank_value, str(rank_value))


def card_info(card_id: int, variant: RankVariant = RankVariant.ACE_HIGH) -> CardInfo:
    """
    推导牌的花色和点数.

    Args:
        card_id: 牌编号，范围 [0, 52)
        variant: 点数编码变体

    Returns:
        CardInfo: 花色、点数名和点数值

    Raises:
        TypeError: card_id 不是整数
        ValueError: card_id 超出范围
    """
    if not isinstance(card_id, int) or isinstance(card_id, bool):
        raise TypeError(f"牌编号必须是int类型，实际: {type(card_id)}")
    if not 0 <= card_id < DECK_SIZE:
        raise ValueError(f"牌编号超出范围: {card_id}")

    rank_value = card_id % SUIT_SIZE + variant.base
    return CardInfo(
        suit=Suit(card_id // SUIT_SIZE),
        rank=_rank_name(rank_value),
        rank_value=rank_value,
    )


def card_score(card_id: int, variant: RankVariant = RankVariant.ACE_HIGH) -> int:
    """
    计算一张牌的分值.

    红桃每张1分，黑桃Q为13分，其余为0.
    """
    info = card_info(card_id, variant)
    if info.suit == POINT_SUIT:
        return 1
    if info.suit == PENALTY_QUEEN_SUIT and info.rank == "Q":
        return 13
    return 0


def card_label(card_id: int, variant: RankVariant = RankVariant.ACE_HIGH) -> str:
    """返回牌的可读表示，如 "Q♠"."""
    info = card_info(card_id, variant)
    return f"{info.rank}{info.suit.symbol}"
