"""
配置服务单元测试
"""

import logging

import pytest

from trick_engine.application.config_service import (
    ConfigService, ConfigType, GameRulesConfig, LoggingConfig, SessionConfig,
    configure_logging, get_config_service,
)
from trick_engine.core.rules.types import GameRules, LeadRestriction, PassingMode


class TestGameRulesConfig:
    """测试游戏规则配置"""

    def test_defaults(self):
        config = GameRulesConfig()
        assert config.player_ids == ["Player:1", "Player:2", "Player:3", "Player:4"]
        assert isinstance(config.to_game_rules(), GameRules)

    def test_to_game_rules_copies_fields(self):
        config = GameRulesConfig(passing_mode=PassingMode.REQUEST, pass_count=2, target_score=50)
        rules = config.to_game_rules()
        assert rules.passing_mode is PassingMode.REQUEST
        assert rules.pass_count == 2
        assert rules.target_score == 50

    @pytest.mark.parametrize("kwargs", [
        {'player_ids': ["solo"]},
        {'player_ids': ["A", "A", "B"]},
        {'pass_count': 0},
        {'settle_delay': -1.0},
        {'max_rounds': 0},
        {'passing_mode': PassingMode.REQUEST, 'pass_count': 14},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            GameRulesConfig(**kwargs)

    def test_session_config_validation(self):
        assert SessionConfig().max_log_size == 4
        with pytest.raises(ValueError):
            SessionConfig(max_log_size=0)


class TestConfigService:
    """测试配置服务"""

    def setup_method(self):
        self.service = ConfigService()

    def test_default_profile_is_hearts(self):
        result = self.service.get_game_rules_config()
        assert result.success
        assert result.data.passing_mode is PassingMode.REQUEST
        assert result.data.lead_restriction is LeadRestriction.UNTIL_BROKEN
        assert result.data.target_score == 100

    def test_classic_and_quick_profiles(self):
        classic = self.service.get_game_rules_config("classic").data
        quick = self.service.get_game_rules_config("quick").data
        assert classic.passing_mode is PassingMode.TIMED
        assert classic.target_score is None
        assert quick.passing_mode is PassingMode.NONE
        assert quick.settle_delay == 0.0

    def test_unknown_profile_falls_back_to_default(self):
        result = self.service.get_game_rules_config("no_such_profile")
        assert result.success
        assert result.data == self.service.get_game_rules_config("default").data

    def test_other_config_types(self):
        assert self.service.get_server_config().data.port == 8765
        assert self.service.get_server_config("public").data.host == "0.0.0.0"
        assert self.service.get_session_config().data.max_log_size == 4
        assert self.service.get_logging_config("debug").data.log_level == 'DEBUG'

    def test_merged_config(self):
        result = self.service.get_merged_config(ConfigType.SERVER)
        assert result.success
        assert result.data == {'host': 'localhost', 'port': 8765}

    def test_register_profile(self):
        result = self.service.register_profile(ConfigType.GAME_RULES, "duo", GameRulesConfig(player_ids=["A", "B"]))
        assert result.success
        assert self.service.get_game_rules_config("duo").data.player_ids == ["A", "B"]
        assert "duo" in self.service.list_available_profiles(ConfigType.GAME_RULES).data

    def test_register_profile_type_mismatch(self):
        result = self.service.register_profile(ConfigType.SERVER, "bad", SessionConfig())
        assert not result.success
        assert result.error_code == "CONFIG_TYPE_MISMATCH"

    def test_list_profiles(self):
        assert self.service.list_available_profiles(ConfigType.GAME_RULES).data == ['classic', 'default', 'quick']

    def test_global_instance(self):
        assert get_config_service() is get_config_service()


class TestConfigureLogging:
    """测试日志配置"""

    def test_configure_logging_sets_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging(LoggingConfig(log_level='debug'))
            # 测试运行器可能已经安装了处理器，basicConfig此时不会改变级别
            assert root.level in (logging.DEBUG, previous)
        finally:
            root.setLevel(previous)
