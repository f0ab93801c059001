"""
出牌阶段处理器

每一墩循环：requesting -> resolvingRequest -> evaluating -> (requesting | endTurn).
"""
import logging
from typing import Optional, TYPE_CHECKING

from ..deck.card import card_label
from ..events.domain_events import EventType
from ..rules import moves
from ..rules.trick_logic import cards_played_this_trick, make_play_validation, resolve_trick
from .types import GamePhase, GameEvent, GameContext
from .base_phase_handler import BasePhaseHandler

if TYPE_CHECKING:
    from .game_state_machine import GameStateMachine

__all__ = [
    'PlayingRequestingHandler',
    'PlayingResolvingHandler',
    'PlayingEvaluatingHandler',
    'PlayingEndTurnHandler',
]

logger = logging.getLogger(__name__)

HAND_TAG = "hand"


class PlayingRequestingHandler(BasePhaseHandler):
    """为当前玩家生成出牌请求，完成后停止请求并产生内部play事件"""

    def __init__(self):
        super().__init__(GamePhase.PLAYING_REQUESTING)

    def on_enter(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        super().on_enter(ctx, machine)
        machine.spawn_request(
            ctx.current_player,
            HAND_TAG,
            make_play_validation(ctx, ctx.current_player, machine.rules),
        )

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        if event.event_type != "REQUEST_DONE" or event.data.get('tag') != HAND_TAG:
            return None
        if event.data['player_id'] != ctx.current_player:
            return None

        # 先停止请求再应用结果
        machine.stop_request(event.data['request_id'])
        machine.raise_event(GameEvent(
            event_type="play",
            data={'cardId': event.data['values'][0], 'playerId': ctx.current_player},
            source_phase=self.phase,
            internal=True,
        ))
        return self._event("REQUEST_RESOLVED", request_id=event.data['request_id'])

    def on_exit(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        for request in machine.requests.live_requests():
            if request.tag == HAND_TAG:
                machine.stop_request(request.request_id)
        super().on_exit(ctx, machine)


class PlayingResolvingHandler(BasePhaseHandler):
    """应用内部play事件：手牌 -> 出牌区"""

    def __init__(self):
        super().__init__(GamePhase.PLAYING_RESOLVING)

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        if event.event_type != "play" or not event.internal:
            return None
        player_id = event.data['playerId']
        card = event.data['cardId']
        if player_id != ctx.current_player:
            return None

        moves.play_card(ctx, player_id, card, machine.rules)
        machine.publish(EventType.CARD_PLAYED, {
            'player_id': player_id,
            'card': card,
            'round': ctx.round,
            'hearts_broken': ctx.hearts_broken,
        })
        logger.info(f"[出牌] 玩家 {player_id} 打出 {card_label(card, machine.rules.rank_variant)}")
        return self._event("PLAY_ACCEPTED", player_id=player_id, card=card)


class PlayingEvaluatingHandler(BasePhaseHandler):
    """所有人都出过牌则结算本墩，否则轮到下一位"""

    transient = True

    def __init__(self):
        super().__init__(GamePhase.PLAYING_EVALUATING)

    def evaluate(self, ctx: GameContext, machine: 'GameStateMachine') -> GameEvent:
        if cards_played_this_trick(ctx) < ctx.player_count:
            moves.advance_turn(ctx)
            return self._event("NEXT_PLAYER")

        result = resolve_trick(ctx, machine.rules)
        moves.award_trick(ctx, result)
        machine.publish(EventType.TRICK_COMPLETED, {**result.to_dict(), 'round': ctx.round})
        logger.info(f"[结算] 第{ctx.round}墩由 {result.winner} 赢得，得分 {result.score}")
        return self._event("TRICK_COMPLETED", winner=result.winner, score=result.score)


class PlayingEndTurnHandler(BasePhaseHandler):
    """停留settle_delay秒后进入下一墩、下一手或结束游戏"""

    def __init__(self):
        super().__init__(GamePhase.PLAYING_END_TURN)

    def on_enter(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        super().on_enter(ctx, machine)
        machine.schedule(machine.rules.settle_delay, "SETTLE_TIMEOUT")

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        if event.event_type != "SETTLE_TIMEOUT" or not event.internal:
            return None

        rules = machine.rules
        hand_finished = (ctx.round >= rules.rounds_per_hand(ctx.player_count)
                         or any(not p.hand for p in ctx.players.values()))
        moves.clear_play_areas(ctx)

        if not hand_finished:
            moves.advance_round(ctx)
            machine.publish(EventType.ROUND_ADVANCED, {'round': ctx.round})
            return self._event("TRICK_CLEARED")

        scores = {p.player_id: p.score for p in ctx.seated_players()}
        machine.publish(EventType.HAND_COMPLETED, {'hand_number': ctx.hand_number, 'scores': scores})

        if moves.is_game_over(ctx, rules):
            winner = moves.conclude_game(ctx)
            machine.publish(EventType.GAME_ENDED, {'winner': winner, 'scores': scores})
            logger.info(f"[游戏结束] 赢家: {winner}，比分: {scores}")
            return self._event("GAME_OVER", winner=winner)

        ctx.hand_number += 1
        moves.deal_new_hand(ctx, machine.deck)
        machine.publish(EventType.HAND_DEALT, {'hand_number': ctx.hand_number})
        return self._event("HAND_COMPLETED")
