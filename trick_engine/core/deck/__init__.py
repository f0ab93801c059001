"""
牌组管理模块.

整数编码的52张牌：花色、点数、分值和发牌.
"""

from .types import Suit, RankVariant, DECK_SIZE, SUIT_SIZE, POINT_SUIT
from .card import CardInfo, card_info, card_score, card_label, is_card_id
from .deck import Deck, build_deck

__all__ = [
    'Suit',
    'RankVariant',
    'DECK_SIZE',
    'SUIT_SIZE',
    'POINT_SUIT',
    'CardInfo',
    'card_info',
    'card_score',
    'card_label',
    'is_card_id',
    'Deck',
    'build_deck',
]
