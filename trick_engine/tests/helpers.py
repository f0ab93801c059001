"""
测试辅助函数

通过引擎的公开接口驱动对局：找到活动请求、选择合法的牌、提交.
"""

from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from trick_engine.core.requests.types import PendingRequest
from trick_engine.core.rules.trick_logic import is_play_legal
from trick_engine.core.state_machine import GameStateMachine, ManualScheduler


def hand_request(engine: GameStateMachine) -> Optional[PendingRequest]:
    """当前玩家的出牌请求"""
    return engine.requests.find(engine.context.current_player, "hand")


def submit(engine: GameStateMachine, request_id: str, value, user_id: str) -> bool:
    return engine.send({
        'type': 'request',
        'requestId': request_id,
        'value': value,
        'user': {'id': user_id},
    })


def legal_cards(engine: GameStateMachine, player_id: str) -> List[int]:
    ctx = engine.context
    return [c for c in ctx.players[player_id].hand if is_play_legal(ctx, player_id, c, engine.rules)]


def play_legal_card(engine: GameStateMachine,
                    choose: Callable[[Sequence[int]], int] = min) -> int:
    """当前玩家打出一张合法的牌，返回打出的牌"""
    request = hand_request(engine)
    assert request is not None, f"阶段 {engine.current_phase.value} 没有出牌请求"
    card = choose(legal_cards(engine, request.player_id))
    assert submit(engine, request.request_id, card, request.player_id)
    return card


def play_trick(engine: GameStateMachine, scheduler: ManualScheduler,
               choose: Callable[[Sequence[int]], int] = min) -> None:
    """每个玩家各出一张，然后推进到结算延时结束"""
    for _ in range(engine.context.player_count):
        play_legal_card(engine, choose)
    scheduler.run_all()


def install_hands(engine: GameStateMachine, hands: Dict[str, Sequence[int]]) -> None:
    """
    替换玩家手牌以构造确定的牌局

    hands必须恰好划分52张牌，牌组和弃牌堆被清空.
    """
    ctx = engine.context
    ctx.players = {
        pid: replace(ctx.players[pid], hand=tuple(sorted(hands[pid])), play_area=())
        for pid in ctx.player_order
    }
    ctx.deck = ()
    ctx.discard = ()
