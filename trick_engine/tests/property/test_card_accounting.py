"""
牌守恒属性测试

随机选择合法的出牌，验证每个稳定状态下52张牌都恰好在一个位置.
"""

import random

import pytest
from hypothesis import given, settings, strategies as st

from trick_engine.core.rules.types import GameRules, LeadRestriction, PassingMode
from trick_engine.core.state_machine import GamePhase, ManualScheduler, StateMachineFactory
from trick_engine.tests.helpers import hand_request, legal_cards, submit

PLAYERS = {"A": "A", "B": "B", "C": "C", "D": "D"}


def assert_accounting(engine):
    snapshot = engine.get_snapshot()
    cards = list(snapshot.deck) + list(snapshot.discard)
    for player in snapshot.players:
        cards.extend(player.hand)
        cards.extend(player.play_area)
    assert sorted(cards) == list(range(52))


@pytest.mark.property_test
@settings(max_examples=25, deadline=None)
@given(
    seed=st.integers(min_value=0, max_value=10_000),
    picks=st.lists(st.integers(min_value=0, max_value=12), min_size=60, max_size=60),
    restriction=st.sampled_from(list(LeadRestriction)),
)
def test_accounting_over_random_legal_play(seed, picks, restriction):
    """Property test: 随机合法出牌过程中牌守恒、只有当前玩家能出牌"""
    scheduler = ManualScheduler()
    rules = GameRules(settle_delay=0.0, lead_restriction=restriction, enable_invariant_checks=True)
    engine = StateMachineFactory.create("prop", PLAYERS, rules, scheduler, rng=random.Random(seed))
    engine.start()

    for pick in picks:
        if engine.current_phase == GamePhase.PLAYING_END_TURN:
            scheduler.run_all()
        request = hand_request(engine)
        assert request is not None
        assert [r.player_id for r in engine.requests.live_requests()] == [engine.context.current_player]

        # 其他玩家的提交总是被忽略
        others = [pid for pid in PLAYERS if pid != request.player_id]
        assert not submit(engine, request.request_id, engine.context.players[request.player_id].hand[0], others[0])

        options = legal_cards(engine, request.player_id)
        assert options
        card = options[pick % len(options)]
        assert submit(engine, request.request_id, card, request.player_id)
        assert_accounting(engine)


@pytest.mark.property_test
@settings(max_examples=15, deadline=None)
@given(
    seed=st.integers(min_value=0, max_value=10_000),
    offset=st.integers(min_value=-3, max_value=3),
)
def test_accounting_through_request_passing(seed, offset):
    """Property test: 批量传牌交换前后牌守恒且每人仍有13张"""
    scheduler = ManualScheduler()
    rules = GameRules(passing_mode=PassingMode.REQUEST, pass_offset=offset, enable_invariant_checks=True)
    engine = StateMachineFactory.create("prop", PLAYERS, rules, scheduler, rng=random.Random(seed))
    engine.start()

    for pid in PLAYERS:
        request = engine.requests.find(pid, "pass")
        assert submit(engine, request.request_id, list(engine.context.players[pid].hand[-3:]), pid)
        assert_accounting(engine)

    assert engine.current_phase == GamePhase.PLAYING_REQUESTING
    assert all(len(p.hand) == 13 for p in engine.context.seated_players())
