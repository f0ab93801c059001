"""
游戏上下文的变更动作

所有对玩家、牌组、当前玩家的写入都经过这里.
每个动作按值语义构造新的聚合值再赋回上下文.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional, Sequence, Tuple, TYPE_CHECKING

from ..deck.card import card_info
from ..deck.deck import Deck
from ..deck.types import POINT_SUIT
from .turn_order import next_player
from .types import GameRules, TrickResult

if TYPE_CHECKING:
    from ..state_machine.types import GameContext, PlayerState

__all__ = [
    'deal_new_hand',
    'play_card',
    'discard_from_hand',
    'record_pass_selection',
    'exchange_passes',
    'clear_play_areas',
    'award_trick',
    'advance_turn',
    'advance_round',
    'is_game_over',
    'conclude_game',
]

logger = logging.getLogger(__name__)


def _with_player(ctx: 'GameContext', player: 'PlayerState') -> None:
    ctx.players = {**ctx.players, player.player_id: player}


def deal_new_hand(ctx: 'GameContext', deck: Deck) -> None:
    """
    收回所有牌，重置、洗牌、发牌

    同时重置每手有效的规则标志和墩数.
    """
    deck.reset()
    deck.shuffle()
    hands = deck.deal(ctx.player_count)
    ctx.players = {
        pid: replace(ctx.players[pid], hand=tuple(hand), play_area=())
        for pid, hand in zip(ctx.player_order, hands)
    }
    ctx.deck = tuple(deck.cards)
    ctx.discard = ()
    ctx.hearts_broken = False
    ctx.pass_selections = {}
    ctx.round = 1
    logger.info(f"[发牌] 第{ctx.hand_number}手，每人 {[len(h) for h in hands]} 张")


def play_card(ctx: 'GameContext', player_id: str, card: int, rules: GameRules) -> None:
    """把牌从手牌移到出牌区，必要时打开受限花色"""
    player = ctx.players[player_id]
    _with_player(ctx, replace(
        player,
        hand=tuple(c for c in player.hand if c != card),
        play_area=player.play_area + (card,),
    ))
    if card_info(card, rules.rank_variant).suit == POINT_SUIT and not ctx.hearts_broken:
        ctx.hearts_broken = True
        logger.info(f"[规则] 玩家 {player_id} 打开了受限花色")


def discard_from_hand(ctx: 'GameContext', player_id: str, card: int) -> None:
    """旧版传牌：把牌从手牌移入弃牌堆"""
    player = ctx.players[player_id]
    _with_player(ctx, replace(player, hand=tuple(c for c in player.hand if c != card)))
    ctx.discard = ctx.discard + (card,)


def record_pass_selection(ctx: 'GameContext', player_id: str, cards: Sequence[int]) -> None:
    """记录玩家选定要传出的牌；牌在交换前仍留在手里"""
    ctx.pass_selections = {**ctx.pass_selections, player_id: tuple(cards)}


def exchange_passes(ctx: 'GameContext', offset: int) -> Dict[str, str]:
    """
    按座位偏移交换所有玩家选定的牌

    Returns:
        Dict[str, str]: 传出者到接收者的映射
    """
    targets = {pid: next_player(ctx.player_order, pid, offset) for pid in ctx.player_order}
    received: Dict[str, Tuple[int, ...]] = {pid: () for pid in ctx.player_order}
    for giver, receiver in targets.items():
        received[receiver] = received[receiver] + ctx.pass_selections.get(giver, ())

    players = {}
    for pid in ctx.player_order:
        player = ctx.players[pid]
        given = set(ctx.pass_selections.get(pid, ()))
        hand = [c for c in player.hand if c not in given] + list(received[pid])
        players[pid] = replace(player, hand=tuple(sorted(hand)))
    ctx.players = players
    ctx.pass_selections = {}
    return targets


def clear_play_areas(ctx: 'GameContext') -> None:
    """清空出牌区，打出的牌进入弃牌堆"""
    collected = tuple(card for p in ctx.seated_players() for card in p.play_area)
    ctx.players = {pid: replace(p, play_area=()) for pid, p in ctx.players.items()}
    ctx.discard = ctx.discard + collected


def award_trick(ctx: 'GameContext', result: TrickResult) -> None:
    """把一墩的分数记给赢家，赢家成为下一墩的首攻"""
    winner = ctx.players[result.winner]
    _with_player(ctx, replace(winner, score=winner.score + result.score))
    ctx.current_player = result.winner
    ctx.last_trick = result


def advance_turn(ctx: 'GameContext') -> None:
    ctx.current_player = next_player(ctx.player_order, ctx.current_player)


def advance_round(ctx: 'GameContext') -> None:
    ctx.round += 1


def is_game_over(ctx: 'GameContext', rules: GameRules) -> bool:
    """一手结束时判断是否结束游戏"""
    if rules.target_score is not None and any(
            p.score >= rules.target_score for p in ctx.players.values()):
        return True
    if rules.max_hands is not None and ctx.hand_number >= rules.max_hands:
        return True
    return False


def conclude_game(ctx: 'GameContext') -> Optional[str]:
    """以最低分者为赢家，平分时按座位顺序取先者"""
    winner = min(ctx.seated_players(), key=lambda p: p.score)
    ctx.winner = winner.player_id
    return ctx.winner
