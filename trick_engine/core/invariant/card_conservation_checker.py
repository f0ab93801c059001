"""
牌守恒检查器

牌组 + 手牌 + 出牌区 + 弃牌堆 恰好是52张互不相同的牌.
"""

from collections import Counter

from ..deck.types import DECK_SIZE
from ..snapshot.types import GameInfoSnapshot
from .base_checker import BaseInvariantChecker
from .types import InvariantType

__all__ = ['CardConservationChecker']


class CardConservationChecker(BaseInvariantChecker):
    """牌守恒检查器"""

    def __init__(self):
        super().__init__(InvariantType.CARD_CONSERVATION)

    def _perform_check(self, snapshot: GameInfoSnapshot) -> bool:
        all_cards = list(snapshot.deck) + list(snapshot.discard)
        for player in snapshot.players:
            all_cards.extend(player.hand)
            all_cards.extend(player.play_area)

        if len(all_cards) != DECK_SIZE:
            self._add_violation(
                f"牌总数为{len(all_cards)}，应为{DECK_SIZE}",
                context={'total': len(all_cards)}
            )

        duplicates = sorted(card for card, n in Counter(all_cards).items() if n > 1)
        if duplicates:
            self._add_violation(
                f"牌在多个位置出现: {duplicates}",
                context={'duplicates': duplicates}
            )

        unknown = sorted(c for c in set(all_cards) if not 0 <= c < DECK_SIZE)
        if unknown:
            self._add_violation(f"非法的牌编号: {unknown}", context={'unknown': unknown})

        return not self._violations
