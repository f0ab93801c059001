"""
命令行入口

    python -m trick_engine --host localhost --port 8765 --profile default
"""

import argparse
import asyncio
import logging

from .application.config_service import (
    ConfigService,
    LoggingConfig,
    ServerConfig,
    configure_logging,
)
from .server.websocket_server import RoomServer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trick_engine", description="出牌游戏房间服务器")
    parser.add_argument("--host", default=None, help="监听地址")
    parser.add_argument("--port", type=int, default=None, help="监听端口")
    parser.add_argument("--profile", default="default", help="游戏规则配置文件 (default, classic, quick)")
    parser.add_argument("--log-level", default=None, help="日志级别，如 DEBUG")
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    config_service = ConfigService()

    logging_config = config_service.get_logging_config().data
    if args.log_level:
        logging_config = LoggingConfig(log_level=args.log_level, log_format=logging_config.log_format)
    configure_logging(logging_config)

    server_config = config_service.get_server_config().data
    server_config = ServerConfig(
        host=args.host or server_config.host,
        port=args.port if args.port is not None else server_config.port,
    )
    rules_result = config_service.get_game_rules_config(args.profile)
    session_config = config_service.get_session_config().data

    logger.info(f"使用规则配置: {args.profile}")
    server = RoomServer(rules_result.data, server_config=server_config, session_config=session_config)
    try:
        asyncio.run(server.listen())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
