"""
WebSocket房间服务器

每个URL路径一个房间，每个房间一个GameSession.
连接ID即用户ID；文本帧按JSON解码后交给会话，快照广播给房间内所有连接.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Set

from websockets.asyncio.server import ServerConnection, broadcast, serve
from websockets.exceptions import ConnectionClosedError

from ..application.config_service import GameRulesConfig, ServerConfig, SessionConfig
from ..application.session_service import GameSession
from ..core.state_machine import AsyncioScheduler

__all__ = ['Room', 'RoomServer', 'decode_action', 'room_id_from_path']

logger = logging.getLogger(__name__)

Broadcast = Callable[[Iterable[ServerConnection], str], None]


def room_id_from_path(path: str) -> str:
    """从请求路径取出房间ID，根路径对应default房间"""
    room_id = path.split("?", 1)[0].strip("/")
    return room_id or "default"


def decode_action(message: Any) -> Optional[Dict[str, Any]]:
    """
    解码客户端帧

    Returns:
        动作字典；格式错误时返回None
    """
    if isinstance(message, bytes):
        try:
            message = message.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("[服务器] 丢弃无法解码的二进制帧")
            return None
    try:
        action = json.loads(message)
    except json.JSONDecodeError:
        logger.warning(f"[服务器] 丢弃非JSON消息: {message[:100]!r}")
        return None
    if not isinstance(action, dict):
        logger.warning(f"[服务器] 丢弃非对象消息: {action!r}")
        return None
    return action


@dataclass
class Room:
    """一个房间：会话与当前连接"""
    room_id: str
    session: GameSession
    connections: Set[ServerConnection] = field(default_factory=set)


class RoomServer:
    """
    房间服务器

    房间在第一个连接到来时创建，最后一个连接离开时关闭（取消引擎定时器）.
    """

    def __init__(self,
                 rules_config: GameRulesConfig,
                 server_config: Optional[ServerConfig] = None,
                 session_config: Optional[SessionConfig] = None,
                 broadcaster: Broadcast = broadcast):
        self._rules_config = rules_config
        self._server_config = server_config or ServerConfig()
        self._session_config = session_config or SessionConfig()
        self._broadcaster = broadcaster
        self._rooms: Dict[str, Room] = {}

    @property
    def rooms(self) -> Dict[str, Room]:
        return dict(self._rooms)

    def get_or_create_room(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is not None:
            return room

        session = GameSession(
            room_id=room_id,
            rules_config=self._rules_config,
            scheduler=AsyncioScheduler(),
            session_config=self._session_config,
        )
        room = Room(room_id=room_id, session=session)
        session.set_broadcaster(lambda message: self._broadcaster(room.connections, message))
        self._rooms[room_id] = room
        logger.info(f"[服务器] 创建房间: {room_id}")
        return room

    def close_room(self, room_id: str) -> None:
        room = self._rooms.pop(room_id, None)
        if room is None:
            return
        room.session.close()
        logger.info(f"[服务器] 关闭房间: {room_id}")

    async def handle_connection(self, connection: ServerConnection) -> None:
        """处理一个连接的整个生命周期"""
        room_id = room_id_from_path(connection.request.path)
        room = self.get_or_create_room(room_id)
        user = {'id': str(connection.id)}

        room.connections.add(connection)
        room.session.on_user_join(user)
        try:
            async for message in connection:
                action = decode_action(message)
                if action is None:
                    continue
                room.session.on_action(action, user)
        except ConnectionClosedError:
            logger.debug(f"[服务器] 连接 {user['id']} 异常关闭")
        finally:
            room.connections.discard(connection)
            room.session.on_user_leave(user)
            if not room.connections:
                self.close_room(room_id)

    async def listen(self) -> None:
        """开始监听，直到被取消"""
        host, port = self._server_config.host, self._server_config.port
        try:
            async with serve(self.handle_connection, host, port) as server:
                logger.info(f"[服务器] 监听 ws://{host}:{port}")
                await server.serve_forever()
        except asyncio.CancelledError:
            logger.info("[服务器] 正在关闭...")
        finally:
            for room_id in list(self._rooms):
                self.close_room(room_id)
