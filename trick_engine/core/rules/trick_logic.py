"""
吃墩规则

出牌合法性、首攻玩家、赢家和分值的计算，全部只读上下文.
"""

from typing import Dict, Optional, Sequence, Tuple, TYPE_CHECKING

from ..deck.card import card_info, card_score, is_card_id
from ..deck.types import POINT_SUIT, RankVariant, Suit
from ..requests.types import Validation
from .turn_order import next_player
from .types import GameRules, LeadRestriction, TrickResolution, TrickResult

if TYPE_CHECKING:
    from ..state_machine.types import GameContext

__all__ = [
    'cards_played_this_trick',
    'trick_leader',
    'lead_suit',
    'is_play_legal',
    'make_play_validation',
    'make_pass_validation',
    'trick_winner',
    'legacy_trick_winner',
    'trick_score',
    'resolve_trick',
]


def cards_played_this_trick(ctx: 'GameContext') -> int:
    """本墩已经出牌的玩家数"""
    return sum(1 for p in ctx.players.values() if p.play_area)


def trick_leader(ctx: 'GameContext') -> Optional[str]:
    """
    本墩的首攻玩家

    从当前玩家往回数已出牌的张数；当前玩家若已出牌则少数一位.
    还没有人出牌时返回None.
    """
    played = cards_played_this_trick(ctx)
    if played == 0:
        return None
    current_has_played = bool(ctx.players[ctx.current_player].play_area)
    offset = played - 1 if current_has_played else played
    return next_player(ctx.player_order, ctx.current_player, -offset)


def lead_suit(ctx: 'GameContext', variant: RankVariant) -> Optional[Suit]:
    """本墩首攻花色"""
    leader = trick_leader(ctx)
    if leader is None:
        return None
    return card_info(ctx.players[leader].play_area[0], variant).suit


def is_play_legal(ctx: 'GameContext', player_id: str, value: object, rules: GameRules) -> bool:
    """
    判断玩家此刻打出value是否合法

    - 必须是该玩家手里的牌
    - 首攻：受限花色未被打开时不能首攻该花色，除非手里只剩该花色
    - 跟牌：有首攻花色必须跟
    """
    if not is_card_id(value):
        return False
    player = ctx.players.get(player_id)
    if player is None or value not in player.hand:
        return False

    variant = rules.rank_variant
    suit = card_info(value, variant).suit
    suits_in_hand = {card_info(c, variant).suit for c in player.hand}

    required = lead_suit(ctx, variant)
    if required is None:
        if (rules.lead_restriction is LeadRestriction.UNTIL_BROKEN
                and suit == POINT_SUIT
                and not ctx.hearts_broken):
            return suits_in_hand == {POINT_SUIT}
        return True

    if suit == required:
        return True
    return required not in suits_in_hand


def make_play_validation(ctx: 'GameContext', player_id: str, rules: GameRules) -> Validation:
    """为出牌请求生成校验函数；每次调用时读取上下文的当前值"""
    def validate(value: object) -> bool:
        return is_play_legal(ctx, player_id, value, rules)
    return validate


def make_pass_validation(ctx: 'GameContext', player_id: str) -> Validation:
    """为传牌请求生成校验函数：值必须在该玩家手里"""
    def validate(value: object) -> bool:
        player = ctx.players.get(player_id)
        return is_card_id(value) and player is not None and value in player.hand
    return validate


def trick_winner(plays: Sequence[Tuple[str, int]], variant: RankVariant) -> str:
    """
    按出牌顺序折叠求赢家

    候选者只有在与当前赢家同花色且点数更大时才取代它，
    因此以首攻玩家开头时，非首攻花色的牌永远不会赢.

    Args:
        plays: (玩家ID, 牌) 序列，首攻玩家在最前
        variant: 点数编码

    Returns:
        str: 赢家ID
    """
    if not plays:
        raise ValueError("plays不能为空")
    winner, winning_card = plays[0]
    best = card_info(winning_card, variant)
    for player_id, card in plays[1:]:
        info = card_info(card, variant)
        if info.suit == best.suit and info.rank_value > best.rank_value:
            winner, best = player_id, info
    return winner


def legacy_trick_winner(plays: Sequence[Tuple[str, int]]) -> str:
    """旧版规则：不看花色，直接取编号最大的牌"""
    if not plays:
        raise ValueError("plays不能为空")
    winner, winning_card = plays[0]
    for player_id, card in plays[1:]:
        if card > winning_card:
            winner, winning_card = player_id, card
    return winner


def trick_score(cards: Sequence[int], variant: RankVariant) -> int:
    """一墩中所有牌的分值之和"""
    return sum(card_score(card, variant) for card in cards)


def resolve_trick(ctx: 'GameContext', rules: GameRules) -> TrickResult:
    """
    结算已完成的一墩

    调用前提：每个玩家的出牌区都不为空.
    """
    leader = trick_leader(ctx)
    if leader is None or cards_played_this_trick(ctx) != ctx.player_count:
        raise ValueError("本墩尚未完成，不能结算")

    cards: Dict[str, int] = {pid: ctx.players[pid].play_area[0] for pid in ctx.player_order}

    if rules.trick_resolution is TrickResolution.LEGACY_MAX_ID:
        winner = legacy_trick_winner([(pid, cards[pid]) for pid in ctx.player_order])
    else:
        rotation = []
        pid = leader
        for _ in range(ctx.player_count):
            rotation.append((pid, cards[pid]))
            pid = next_player(ctx.player_order, pid)
        winner = trick_winner(rotation, rules.rank_variant)

    return TrickResult(
        leader=leader,
        winner=winner,
        score=trick_score(list(cards.values()), rules.rank_variant),
        cards=cards,
    )
