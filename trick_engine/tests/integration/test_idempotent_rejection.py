"""
拒绝输入的幂等性集成测试

被拒绝的输入不能改变会话快照的任何一个字节.
"""

import pytest

from trick_engine.application import GameSession, GameRulesConfig
from trick_engine.tests.helpers import hand_request, legal_cards


@pytest.fixture
def session(scheduler):
    config = GameRulesConfig(player_ids=["A", "B", "C", "D"], settle_delay=0.0,
                             enable_invariant_checks=True, seed=5)
    session = GameSession("room", config, scheduler, clock=lambda: 100.0)
    for user_id in ("u1", "u2", "u3", "u4"):
        session.on_user_join({'id': user_id})
    return session


@pytest.mark.integration
class TestIdempotentRejection:
    """重复或无关的提交"""

    def test_resubmitting_applied_request(self, session):
        request = hand_request(session.engine)
        card = legal_cards(session.engine, "A")[0]
        action = {'type': 'request', 'requestId': request.request_id, 'value': card}
        assert session.on_action(action, {'id': 'u1'}).success

        before = session.serialize_state()
        assert not session.on_action(action, {'id': 'u1'}).success
        other = legal_cards(session.engine, "B")[0]
        assert not session.on_action({**action, 'value': other}, {'id': 'u2'}).success
        assert session.serialize_state() == before

    def test_unrelated_request_id(self, session):
        before = session.serialize_state()
        card = session.engine.context.players["A"].hand[0]
        for request_id in ("999", "0", None, "abc"):
            session.on_action({'type': 'request', 'requestId': request_id, 'value': card}, {'id': 'u1'})
        assert session.serialize_state() == before

    def test_illegal_values(self, session):
        before = session.serialize_state()
        request = hand_request(session.engine)
        for value in (-1, 52, "7", [1, 2], None, {'card': 1}):
            session.on_action({'type': 'request', 'requestId': request.request_id, 'value': value}, {'id': 'u1'})
        assert session.serialize_state() == before

    def test_spectator_cannot_play(self, session):
        session.on_user_join({'id': 'watcher'})
        before = session.serialize_state()
        request = hand_request(session.engine)
        card = legal_cards(session.engine, "A")[0]
        assert not session.on_action(
            {'type': 'request', 'requestId': request.request_id, 'value': card}, {'id': 'watcher'}
        ).success
        assert session.serialize_state() == before
