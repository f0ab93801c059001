#!/usr/bin/env python3
"""
ConfigService - 配置管理服务

负责集中化管理所有配置，包括：
- 游戏规则配置
- 会话配置
- 服务器配置
- 日志配置

通过命名的配置文件(profile)提供，返回QueryResult.
"""

import logging
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field, asdict
from enum import Enum

from ..core.deck.types import RankVariant
from ..core.rules.types import GameRules, PassingMode, LeadRestriction, TrickResolution
from .types import QueryResult


class ConfigType(Enum):
    """配置类型枚举"""
    GAME_RULES = "game_rules"
    SESSION = "session"
    SERVER = "server"
    LOGGING = "logging"


DEFAULT_PLAYER_IDS = ["Player:1", "Player:2", "Player:3", "Player:4"]


@dataclass
class GameRulesConfig:
    """游戏规则配置"""
    player_ids: List[str] = field(default_factory=lambda: list(DEFAULT_PLAYER_IDS))
    rank_variant: RankVariant = RankVariant.ACE_HIGH
    passing_mode: PassingMode = PassingMode.NONE
    pass_count: int = 3
    pass_offset: int = 1
    pass_delay: float = 1.0
    settle_delay: float = 1.0
    max_rounds: Optional[int] = None
    lead_restriction: LeadRestriction = LeadRestriction.NONE
    trick_resolution: TrickResolution = TrickResolution.SUIT_AWARE
    target_score: Optional[int] = None
    max_hands: Optional[int] = None
    enforce_request_owner: bool = True
    enable_invariant_checks: bool = False
    seed: Optional[int] = None

    def __post_init__(self):
        """验证玩家列表"""
        if len(self.player_ids) < 2:
            raise ValueError(f"至少需要2个玩家，当前: {len(self.player_ids)}")
        if len(self.player_ids) > 52:
            raise ValueError(f"玩家数量不能超过52，当前: {len(self.player_ids)}")
        if len(set(self.player_ids)) != len(self.player_ids):
            raise ValueError(f"玩家ID重复: {self.player_ids}")
        if self.passing_mode is PassingMode.REQUEST and self.pass_count * len(self.player_ids) > 52:
            raise ValueError("传牌数量超过手牌数量")
        # 其余字段由GameRules校验
        self.to_game_rules()

    def to_game_rules(self) -> GameRules:
        """转换为引擎使用的规则参数"""
        return GameRules(
            rank_variant=self.rank_variant,
            passing_mode=self.passing_mode,
            pass_count=self.pass_count,
            pass_offset=self.pass_offset,
            pass_delay=self.pass_delay,
            settle_delay=self.settle_delay,
            max_rounds=self.max_rounds,
            lead_restriction=self.lead_restriction,
            trick_resolution=self.trick_resolution,
            target_score=self.target_score,
            max_hands=self.max_hands,
            enforce_request_owner=self.enforce_request_owner,
            enable_invariant_checks=self.enable_invariant_checks,
        )


@dataclass
class SessionConfig:
    """会话配置"""
    max_log_size: int = 4

    def __post_init__(self):
        if self.max_log_size <= 0:
            raise ValueError("max_log_size必须大于0")


@dataclass
class ServerConfig:
    """服务器配置"""
    host: str = "localhost"
    port: int = 8765


@dataclass
class LoggingConfig:
    """日志配置"""
    log_level: str = 'INFO'
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """按日志配置初始化根日志器"""
    config = config or LoggingConfig()
    logging.basicConfig(level=config.log_level.upper(), format=config.log_format)


class ConfigService:
    """配置管理服务"""

    def __init__(self):
        """初始化配置服务"""
        self.logger = logging.getLogger(__name__)
        self._configs: Dict[ConfigType, Dict[str, Any]] = {}
        self._load_default_configs()

    def _load_default_configs(self):
        """加载默认配置"""
        # 游戏规则配置
        self._configs[ConfigType.GAME_RULES] = {
            'default': GameRulesConfig(
                passing_mode=PassingMode.REQUEST,
                pass_count=3,
                lead_restriction=LeadRestriction.UNTIL_BROKEN,
                target_score=100,
            ),
            'classic': GameRulesConfig(
                passing_mode=PassingMode.TIMED,
                pass_delay=1.0,
                settle_delay=1.0,
            ),
            'quick': GameRulesConfig(
                passing_mode=PassingMode.NONE,
                pass_delay=0.0,
                settle_delay=0.0,
                enable_invariant_checks=True,
            ),
        }

        # 会话配置
        self._configs[ConfigType.SESSION] = {
            'default': SessionConfig(),
        }

        # 服务器配置
        self._configs[ConfigType.SERVER] = {
            'default': ServerConfig(),
            'public': ServerConfig(host="0.0.0.0"),
        }

        # 日志配置
        self._configs[ConfigType.LOGGING] = {
            'default': LoggingConfig(),
            'debug': LoggingConfig(log_level='DEBUG'),
            'production': LoggingConfig(log_level='WARNING'),
        }

        self.logger.debug("默认配置加载完成")

    def _get(self, config_type: ConfigType, profile: str, error_code: str) -> QueryResult[Any]:
        config_profiles = self._configs.get(config_type, {})
        if profile not in config_profiles:
            self.logger.warning(f"未找到{config_type.value}配置 '{profile}'，使用默认配置")
            profile = "default"
        if profile not in config_profiles:
            return QueryResult.failure_result(
                f"配置类型 {config_type.value} 没有默认配置",
                error_code=error_code
            )
        return QueryResult.success_result(config_profiles[profile])

    def get_game_rules_config(self, profile: str = "default") -> QueryResult[GameRulesConfig]:
        """
        获取游戏规则配置

        Args:
            profile: 配置文件名 (default, classic, quick)

        Returns:
            查询结果，包含游戏规则配置
        """
        return self._get(ConfigType.GAME_RULES, profile, "GET_GAME_RULES_CONFIG_FAILED")

    def get_session_config(self, profile: str = "default") -> QueryResult[SessionConfig]:
        """获取会话配置"""
        return self._get(ConfigType.SESSION, profile, "GET_SESSION_CONFIG_FAILED")

    def get_server_config(self, profile: str = "default") -> QueryResult[ServerConfig]:
        """获取服务器配置"""
        return self._get(ConfigType.SERVER, profile, "GET_SERVER_CONFIG_FAILED")

    def get_logging_config(self, profile: str = "default") -> QueryResult[LoggingConfig]:
        """获取日志配置"""
        return self._get(ConfigType.LOGGING, profile, "GET_LOGGING_CONFIG_FAILED")

    def get_merged_config(self, config_type: ConfigType, profile: str = "default") -> QueryResult[Dict[str, Any]]:
        """
        获取配置字典

        Args:
            config_type: 配置类型
            profile: 配置文件名

        Returns:
            查询结果，包含配置字典
        """
        result = self._get(config_type, profile, "GET_MERGED_CONFIG_FAILED")
        if not result.success:
            return result
        return QueryResult.success_result(asdict(result.data))

    def register_profile(self, config_type: ConfigType, profile: str, config: Any) -> QueryResult[bool]:
        """
        注册或替换一个配置文件

        Args:
            config_type: 配置类型
            profile: 配置文件名
            config: 配置对象

        Returns:
            查询结果，包含注册是否成功
        """
        expected = type(self._configs[config_type]['default'])
        if not isinstance(config, expected):
            return QueryResult.failure_result(
                f"配置 {profile} 的类型应为 {expected.__name__}",
                error_code="CONFIG_TYPE_MISMATCH"
            )
        self._configs[config_type][profile] = config
        self.logger.info(f"配置 {config_type.value}.{profile} 注册成功")
        return QueryResult.success_result(True)

    def list_available_profiles(self, config_type: ConfigType) -> QueryResult[List[str]]:
        """
        列出可用的配置文件

        Args:
            config_type: 配置类型

        Returns:
            查询结果，包含可用配置文件列表
        """
        if config_type not in self._configs:
            return QueryResult.failure_result(
                f"配置类型 {config_type} 不存在",
                error_code="CONFIG_TYPE_NOT_FOUND"
            )
        return QueryResult.success_result(sorted(self._configs[config_type]))


# 全局配置服务实例
_config_service: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """获取全局配置服务实例"""
    global _config_service
    if _config_service is None:
        _config_service = ConfigService()
    return _config_service
