"""
牌组管理.

Deck 只管理尚未发出的牌；发到手里的牌归玩家所有.
"""

import random
from typing import List, Optional

from .types import DECK_SIZE

__all__ = ['Deck', 'build_deck']


def build_deck() -> List[int]:
    """返回编号 0..51 的完整牌序列."""
    return list(range(DECK_SIZE))


class Deck:
    """
    表示一副整数编码的扑克牌.

    使用可选的随机数生成器以支持确定性测试.

    Examples:
        >>> deck = Deck(random.Random(7))
        >>> deck.shuffle()
        >>> hands = deck.deal(4)
        >>> len(deck)
        0
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._cards: List[int] = build_deck()

    @property
    def cards(self) -> List[int]:
        """剩余未发的牌（副本）"""
        return list(self._cards)

    def reset(self) -> None:
        """重置为完整的52张牌."""
        self._cards = build_deck()

    def shuffle(self) -> None:
        """洗牌."""
        self._rng.shuffle(self._cards)

    def deal(self, player_count: int) -> List[List[int]]:
        """
        轮流把剩余的牌全部发给玩家.

        Args:
            player_count: 玩家数

        Returns:
            List[List[int]]: 每个座位一手已排序的牌

        Raises:
            ValueError: 当player_count不是正数时
        """
        if player_count <= 0:
            raise ValueError("player_count必须大于0")

        hands: List[List[int]] = [[] for _ in range(player_count)]
        for index, card in enumerate(self._cards):
            hands[index % player_count].append(card)
        self._cards = []
        return [sorted(hand) for hand in hands]

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck(cards_remaining={len(self._cards)})"
