"""
传牌阶段处理器

- PassingWaitingHandler: 旧版定时传牌，固定延时后进入出牌
- PassingRequestingHandler: 每个玩家一个批量请求
- PassingEvaluatingHandler: 所有请求完成后交换传出的牌
"""
import logging
from typing import Optional, TYPE_CHECKING

from ..deck.card import is_card_id
from ..events.domain_events import EventType
from ..rules import moves
from ..rules.trick_logic import make_pass_validation
from .types import GamePhase, GameEvent, GameContext
from .base_phase_handler import BasePhaseHandler

if TYPE_CHECKING:
    from .game_state_machine import GameStateMachine

__all__ = ['PassingWaitingHandler', 'PassingRequestingHandler', 'PassingEvaluatingHandler']

logger = logging.getLogger(__name__)

PASS_TAG = "pass"


class PassingWaitingHandler(BasePhaseHandler):
    """旧版传牌阶段：接受pass动作直到定时器触发"""

    def __init__(self):
        super().__init__(GamePhase.PASSING_WAITING)

    def on_enter(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        super().on_enter(ctx, machine)
        machine.schedule(machine.rules.pass_delay, "PASS_TIMEOUT")

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        if event.event_type == "PASS_TIMEOUT" and event.internal:
            return self._event("PASSING_TIMED_OUT")
        if event.event_type == "pass":
            return self._handle_pass(ctx, event, machine)
        return None

    def _handle_pass(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        card = event.data.get('cardId')
        player_id = event.data.get('playerId')
        player = ctx.players.get(player_id) if isinstance(player_id, str) else None

        if player is None or not is_card_id(card) or card not in player.hand:
            logger.debug(f"[传牌] 忽略非法的pass: {event.data}")
            return None
        if machine.rules.enforce_request_owner and event.data.get('userId') != player_id:
            logger.debug(f"[传牌] 用户 {event.data.get('userId')} 不能替 {player_id} 传牌")
            return None
        already = ctx.pass_selections.get(player_id, ())
        if len(already) >= machine.rules.pass_count:
            logger.debug(f"[传牌] 玩家 {player_id} 已传满 {len(already)} 张")
            return None

        moves.discard_from_hand(ctx, player_id, card)
        moves.record_pass_selection(ctx, player_id, already + (card,))
        machine.publish(EventType.CARDS_PASSED, {'player_id': player_id, 'cards': [card]})
        return self._event("CARD_PASSED", player_id=player_id, card=card)

    def on_exit(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        # 旧版传出的牌已进入弃牌堆，选择记录不再需要
        ctx.pass_selections = {}
        super().on_exit(ctx, machine)


class PassingRequestingHandler(BasePhaseHandler):
    """为每个玩家生成一个传牌请求"""

    def __init__(self):
        super().__init__(GamePhase.PASSING_REQUESTING)

    def on_enter(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        super().on_enter(ctx, machine)
        for player_id in ctx.player_order:
            machine.spawn_request(
                player_id,
                PASS_TAG,
                make_pass_validation(ctx, player_id),
                count=machine.rules.pass_count,
            )

    def handle_event(self, ctx: GameContext, event: GameEvent,
                     machine: 'GameStateMachine') -> Optional[GameEvent]:
        if event.event_type != "REQUEST_DONE" or event.data.get('tag') != PASS_TAG:
            return None

        player_id = event.data['player_id']
        machine.stop_request(event.data['request_id'])
        moves.record_pass_selection(ctx, player_id, event.data['values'])
        logger.info(f"[传牌] 玩家 {player_id} 选定了 {len(event.data['values'])} 张牌")

        if len(ctx.pass_selections) == ctx.player_count:
            return self._event("PASSES_SUBMITTED")
        return self._event("PASS_RECORDED", player_id=player_id)

    def on_exit(self, ctx: GameContext, machine: 'GameStateMachine') -> None:
        for request in machine.requests.live_requests():
            if request.tag == PASS_TAG:
                machine.stop_request(request.request_id)
        super().on_exit(ctx, machine)


class PassingEvaluatingHandler(BasePhaseHandler):
    """交换传出的牌"""

    transient = True

    def __init__(self):
        super().__init__(GamePhase.PASSING_EVALUATING)

    def evaluate(self, ctx: GameContext, machine: 'GameStateMachine') -> GameEvent:
        selections = dict(ctx.pass_selections)
        targets = moves.exchange_passes(ctx, machine.rules.pass_offset)
        machine.publish(EventType.CARDS_PASSED, {
            'exchanges': [
                {'from': giver, 'to': receiver, 'cards': list(selections.get(giver, ()))}
                for giver, receiver in targets.items()
            ]
        })
        logger.info(f"[传牌] 交换完成，偏移 {machine.rules.pass_offset}")
        return self._event("PASSES_EXCHANGED")
