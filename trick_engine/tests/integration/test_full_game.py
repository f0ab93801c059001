"""
完整对局集成测试

通过公开接口驱动引擎：确定的首墩、整手牌的轮转、游戏结束.
"""

from dataclasses import replace

import pytest

from trick_engine.core.events import EventType
from trick_engine.core.rules.types import GameRules, LeadRestriction
from trick_engine.core.state_machine import GamePhase
from trick_engine.tests.helpers import hand_request, install_hands, play_trick, submit

# 黑桃: A持3(5♠)，B持10(Q♠)，D持1(3♠)，C没有黑桃但持25(A♦)
SCENARIO_HANDS = {
    "A": [0, 2, 3, 4, 5] + list(range(26, 34)),
    "B": [6, 7, 8, 9, 10, 11] + list(range(34, 41)),
    "C": list(range(13, 26)),
    "D": [1, 12] + list(range(41, 52)),
}


@pytest.mark.integration
class TestEndToEndTrick:
    """四人首墩的完整流程"""

    def test_scenario(self, engine, scheduler):
        install_hands(engine, SCENARIO_HANDS)

        def answer(player_id, card):
            request = hand_request(engine)
            assert request.player_id == player_id
            return submit(engine, request.request_id, card, player_id)

        assert answer("A", 3)

        # B有黑桃，必须跟黑桃
        assert not answer("B", 34)
        assert answer("B", 10)

        # C没有黑桃，可以垫任意牌
        assert answer("C", 25)

        # D有黑桃，不能垫红桃
        assert not answer("D", 41)
        assert answer("D", 1)

        ctx = engine.context
        assert engine.current_phase == GamePhase.PLAYING_END_TURN
        assert ctx.last_trick.leader == "A"
        assert ctx.last_trick.winner == "B"
        assert ctx.last_trick.score == 13
        assert ctx.players["B"].score == 13
        assert ctx.current_player == "B"
        assert len(engine.requests) == 0

        scheduler.run_all()

        assert engine.current_phase == GamePhase.PLAYING_REQUESTING
        assert ctx.round == 2
        assert all(not p.play_area for p in ctx.players.values())
        assert sorted(ctx.discard) == [1, 3, 10, 25]
        assert hand_request(engine).player_id == "B"

    def test_trick_events_published(self, engine, scheduler):
        install_hands(engine, SCENARIO_HANDS)
        for player_id, card in (("A", 3), ("B", 10), ("C", 25), ("D", 1)):
            submit(engine, hand_request(engine).request_id, card, player_id)

        played = engine.event_bus.get_event_history(EventType.CARD_PLAYED)
        assert [e.data['card'] for e in played] == [3, 10, 25, 1]
        completed = engine.event_bus.get_event_history(EventType.TRICK_COMPLETED)
        assert completed[-1].data['winner'] == "B"
        assert completed[-1].data['score'] == 13


@pytest.mark.integration
class TestHandRollover:
    """整手牌打完后的轮转"""

    def test_round_rollover_after_thirteen_tricks(self, engine, scheduler):
        for expected_round in range(1, 14):
            assert engine.context.round == expected_round
            play_trick(engine, scheduler)

        ctx = engine.context
        assert ctx.hand_number == 2
        assert ctx.round == 1
        assert ctx.hearts_broken is False
        assert all(not p.play_area for p in ctx.players.values())
        hands = [p.hand for p in ctx.seated_players()]
        assert all(len(h) == 13 for h in hands)
        assert sorted(c for h in hands for c in h) == list(range(52))
        assert sum(p.score for p in ctx.players.values()) == 26
        assert engine.current_phase == GamePhase.PLAYING_REQUESTING
        assert len(engine.event_bus.get_event_history(EventType.HAND_COMPLETED)) == 1

    def test_max_rounds_shortens_hand(self, make_engine, quick_rules, scheduler):
        engine = make_engine(replace(quick_rules, max_rounds=2))
        play_trick(engine, scheduler)
        play_trick(engine, scheduler)
        assert engine.context.hand_number == 2
        assert engine.context.round == 1

    def test_lead_restriction_holds_over_a_hand(self, make_engine, quick_rules, scheduler):
        """测试受限花色在打开前从未被首攻"""
        engine = make_engine(replace(quick_rules, lead_restriction=LeadRestriction.UNTIL_BROKEN))
        leads = []

        for _ in range(13):
            leader = engine.context.current_player
            broken_before = engine.context.hearts_broken
            hand_before = engine.context.players[leader].hand
            play_trick(engine, scheduler, choose=max)
            lead_card = engine.context.last_trick.cards[leader]
            leads.append((lead_card, broken_before, hand_before))

        for card, broken_before, hand_before in leads:
            if card // 13 == 3 and not broken_before:
                assert all(c // 13 == 3 for c in hand_before)


@pytest.mark.integration
class TestGameOver:
    """游戏结束"""

    def test_max_hands_ends_game(self, make_engine, quick_rules, scheduler):
        engine = make_engine(replace(quick_rules, max_hands=1))
        for _ in range(13):
            play_trick(engine, scheduler)

        ctx = engine.context
        assert engine.current_phase == GamePhase.END_GAME
        assert engine.status == 'done'
        lowest = min(p.score for p in ctx.seated_players())
        assert ctx.players[ctx.winner].score == lowest

        data = engine.get_persisted_snapshot()
        assert data['value'] == "endGame"
        assert data['status'] == 'done'
        assert data['context']['winner']['id'] == ctx.winner
        assert data['children'] == {}
        assert len(engine.event_bus.get_event_history(EventType.GAME_ENDED)) == 1

        assert not engine.send({'type': 'request', 'requestId': '1', 'value': 0, 'user': {'id': 'A'}})

    def test_target_score_ends_game(self, make_engine, quick_rules, scheduler):
        engine = make_engine(replace(quick_rules, target_score=1))
        hands_played = 0
        while engine.status == 'active' and hands_played < 20:
            for _ in range(13):
                play_trick(engine, scheduler)
            hands_played += 1
        assert engine.status == 'done'
        assert hands_played == 1
        assert any(p.score >= 1 for p in engine.context.seated_players())
