"""
不变量检查单元测试
"""

from dataclasses import replace

import pytest

from trick_engine.core.invariant import (
    GameInvariants, InvariantError, InvariantType,
    CardConservationChecker, TurnStructureChecker,
)
from trick_engine.core.snapshot import RequestSnapshot
from trick_engine.core.state_machine import GamePhase


class TestCardConservation:
    """测试52张牌守恒"""

    def test_fresh_engine_is_valid(self, engine):
        result = CardConservationChecker().check(engine.get_snapshot())
        assert result.is_valid
        assert result.invariant_type == InvariantType.CARD_CONSERVATION

    def test_missing_card_detected(self, engine):
        snapshot = engine.get_snapshot()
        player = snapshot.players[0]
        broken = replace(snapshot, players=(replace(player, hand=player.hand[1:]),) + snapshot.players[1:])
        result = CardConservationChecker().check(broken)
        assert not result.is_valid
        assert "51" in result.violations[0].description

    def test_duplicate_card_detected(self, engine):
        snapshot = engine.get_snapshot()
        duplicated = replace(snapshot, discard=(snapshot.players[0].hand[0],))
        result = CardConservationChecker().check(duplicated)
        assert not result.is_valid
        assert len(result.violations) == 2


class TestTurnStructure:
    """测试回合结构"""

    def test_fresh_engine_is_valid(self, engine):
        assert TurnStructureChecker().check(engine.get_snapshot()).is_valid

    def test_requesting_needs_current_player_request(self, engine):
        snapshot = replace(engine.get_snapshot(), requests=())
        assert not TurnStructureChecker().check(snapshot).is_valid

    def test_wrong_player_request(self, engine):
        snapshot = replace(engine.get_snapshot(), requests=(RequestSnapshot("9", "B", "hand", 1),))
        assert not TurnStructureChecker().check(snapshot).is_valid

    def test_quiet_phase_with_request(self, engine):
        snapshot = replace(engine.get_snapshot(), phase=GamePhase.PLAYING_END_TURN)
        assert not TurnStructureChecker().check(snapshot).is_valid

    def test_round_out_of_range(self, engine):
        snapshot = replace(engine.get_snapshot(), round=14)
        assert not TurnStructureChecker().check(snapshot).is_valid
        assert TurnStructureChecker(max_rounds=20).check(snapshot).is_valid


class TestGameInvariants:
    """测试统一检查入口"""

    def test_check_all(self, engine):
        results = GameInvariants().check_all(engine.get_snapshot())
        assert set(results) == {InvariantType.CARD_CONSERVATION, InvariantType.TURN_STRUCTURE}
        assert all(r.is_valid for r in results.values())

    def test_validate_and_raise(self, engine):
        snapshot = replace(engine.get_snapshot(), deck=(0,))
        with pytest.raises(InvariantError) as exc_info:
            GameInvariants().validate_and_raise(snapshot)
        assert exc_info.value.violations
