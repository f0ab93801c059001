"""
Application Layer - 应用服务层

应用层可以访问核心层，但不能被核心层访问.

Services:
    GameSession: 房间会话（用户、日志、引擎、广播）
    ConfigService: 配置管理服务

Types:
    CommandResult: 命令执行结果
    QueryResult: 查询结果
    User: 用户
    LogEntry: 日志条目
"""

from .types import (
    ResultStatus,
    CommandResult,
    QueryResult,
    User,
    LogEntry,
)
from .config_service import (
    ConfigType,
    GameRulesConfig,
    SessionConfig,
    ServerConfig,
    LoggingConfig,
    ConfigService,
    configure_logging,
    get_config_service,
)
from .session_service import GameSession

__all__ = [
    # 类型
    "ResultStatus",
    "CommandResult",
    "QueryResult",
    "User",
    "LogEntry",

    # 配置
    "ConfigType",
    "GameRulesConfig",
    "SessionConfig",
    "ServerConfig",
    "LoggingConfig",
    "ConfigService",
    "configure_logging",
    "get_config_service",

    # 服务
    "GameSession",
]
