"""
牌组相关类型定义.

牌以 [0, 52) 的整数表示，花色和点数由编号推导，不单独存储.
"""

from enum import Enum, IntEnum

__all__ = ['Suit', 'RankVariant', 'DECK_SIZE', 'SUIT_SIZE', 'POINT_SUIT', 'PENALTY_QUEEN_SUIT']

DECK_SIZE = 52
SUIT_SIZE = 13


class Suit(IntEnum):
    """
    花色枚举.

    数值即 card_id // 13 的结果.
    """

    SPADES = 0
    DIAMONDS = 1
    CLUBS = 2
    HEARTS = 3

    @property
    def symbol(self) -> str:
        """花色的Unicode符号"""
        return _SUIT_SYMBOLS[self.value]


_SUIT_SYMBOLS = ("♠", "♦", "♣", "♥")

# 红桃每张1分，也是首攻受限的花色
POINT_SUIT = Suit.HEARTS
# 黑桃Q计13分
PENALTY_QUEEN_SUIT = Suit.SPADES


class RankVariant(Enum):
    """
    点数编码变体.

    value 为点数基数：card_id % 13 加上基数得到点数值.
    """

    ACE_LOW = 1    # A=1 ... K=13
    ACE_HIGH = 2   # 2=2 ... A=14

    @property
    def base(self) -> int:
        return self.value
