"""
Game Session Service - 房间会话服务

每个房间一个会话：维护用户名单、座位、有界日志，持有一个引擎实例，
把入站动作标记发送者后交给引擎，并在每次状态稳定后广播完整快照.
"""

import logging
import random
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional

from ..core.events import EventType
from ..core.snapshot import GameInfoSnapshot, SnapshotSerializer
from ..core.state_machine import GameStateMachine, StateMachineFactory, Scheduler
from .config_service import GameRulesConfig, SessionConfig
from .types import CommandResult, LogEntry, User

__all__ = ['GameSession']

logger = logging.getLogger(__name__)

# 只能由会话或引擎自身产生的动作类型
RESERVED_ACTION_TYPES = {"UserEntered", "UserExit", "play"}

Broadcaster = Callable[[str], None]


class GameSession:
    """
    房间会话

    会话状态 {users, log, gameInfo} 是唯一对外暴露的状态.
    """

    def __init__(self,
                 room_id: str,
                 rules_config: GameRulesConfig,
                 scheduler: Scheduler,
                 session_config: Optional[SessionConfig] = None,
                 broadcast: Optional[Broadcaster] = None,
                 clock: Callable[[], float] = time.time):
        """
        创建会话并启动引擎

        Args:
            room_id: 房间ID
            rules_config: 规则配置，player_ids即座位
            scheduler: 引擎定时器使用的调度器
            session_config: 会话配置
            broadcast: 接收JSON快照字符串的广播回调
            clock: 日志时间戳来源(秒)
        """
        self.room_id = room_id
        self._session_config = session_config or SessionConfig()
        self._broadcast = broadcast
        self._clock = clock

        self._users: List[User] = []
        self._log: Deque[LogEntry] = deque(maxlen=self._session_config.max_log_size)
        self._seats: Dict[str, Optional[str]] = {pid: None for pid in rules_config.player_ids}

        self._engine: GameStateMachine = StateMachineFactory.create(
            game_id=room_id,
            players={pid: pid for pid in rules_config.player_ids},
            rules=rules_config.to_game_rules(),
            scheduler=scheduler,
            rng=random.Random(rules_config.seed),
        )
        self._settled_handler = self._engine.subscribe(self._on_settled)
        self._engine.start()
        logger.info(f"[会话] 房间 {room_id} 已创建，座位: {list(self._seats)}")

    @property
    def engine(self) -> GameStateMachine:
        return self._engine

    @property
    def users(self) -> List[User]:
        return list(self._users)

    @property
    def log(self) -> List[LogEntry]:
        return list(self._log)

    @property
    def is_empty(self) -> bool:
        return not self._users

    def set_broadcaster(self, broadcast: Optional[Broadcaster]) -> None:
        self._broadcast = broadcast

    def seat_of(self, user_id: str) -> Optional[str]:
        """用户占据的座位ID"""
        for seat, occupant in self._seats.items():
            if occupant == user_id:
                return seat
        return None

    # ------------------------------------------------------------------
    # 入站

    def on_user_join(self, user: Mapping[str, Any]) -> CommandResult:
        """
        用户进入房间

        分配第一个空座位；座位满时以旁观者身份加入.
        """
        user_id = user.get('id')
        if not isinstance(user_id, str) or not user_id:
            return CommandResult.validation_error("用户ID无效", error_code="INVALID_USER")
        if any(u.user_id == user_id for u in self._users):
            return CommandResult.ignored(f"用户 {user_id} 已在房间中", error_code="USER_ALREADY_JOINED")

        name = user.get('name') if isinstance(user.get('name'), str) else user_id
        self._users.append(User(user_id=user_id, name=name))
        seat = self._take_seat(user_id)
        self._add_log(f"user {user_id} joined 🎉")
        self._engine.publish(EventType.USER_JOINED, {'user_id': user_id, 'seat': seat})
        logger.info(f"[会话] 用户 {user_id} 加入房间 {self.room_id}，座位: {seat}")

        self._broadcast_state()
        return CommandResult.success_result("用户已加入", data={'seat': seat})

    def on_user_leave(self, user: Mapping[str, Any]) -> CommandResult:
        """用户离开房间，释放座位"""
        user_id = user.get('id')
        if not any(u.user_id == user_id for u in self._users):
            return CommandResult.ignored(f"用户 {user_id} 不在房间中", error_code="USER_NOT_FOUND")

        self._users = [u for u in self._users if u.user_id != user_id]
        seat = self.seat_of(user_id)
        if seat is not None:
            self._seats[seat] = None
        self._add_log(f"user {user_id} left 😢")
        self._engine.publish(EventType.USER_LEFT, {'user_id': user_id, 'seat': seat})
        logger.info(f"[会话] 用户 {user_id} 离开房间 {self.room_id}")

        self._broadcast_state()
        return CommandResult.success_result("用户已离开", data={'seat': seat})

    def on_action(self, action: Any, from_user: Mapping[str, Any]) -> CommandResult:
        """
        处理客户端动作

        动作先被标记发送者（已入座时为座位ID，旁观者为None），再交给引擎.
        未加入房间的用户发来的动作直接丢弃.
        被拒绝的动作不改变任何状态，也不会触发广播.

        Args:
            action: 解码后的动作字典
            from_user: 发送者 {id}

        Returns:
            CommandResult: 是否被引擎接受
        """
        if not isinstance(action, Mapping) or not isinstance(action.get('type'), str):
            logger.debug(f"[会话] 丢弃格式错误的动作: {action!r}")
            return CommandResult.validation_error("动作格式错误", error_code="MALFORMED_ACTION")
        if action['type'] in RESERVED_ACTION_TYPES:
            logger.debug(f"[会话] 丢弃客户端发送的保留动作: {action['type']}")
            return CommandResult.ignored(f"不接受客户端发送的 {action['type']}", error_code="RESERVED_ACTION")

        sender = from_user.get('id')
        if not any(u.user_id == sender for u in self._users):
            logger.debug(f"[会话] 丢弃未加入用户 {sender!r} 的动作")
            return CommandResult.ignored("用户未加入房间", error_code="UNKNOWN_USER")
        # 未入座的旁观者不代表任何座位，其ID可能与座位ID重名
        tagged = {**action, 'user': {'id': self.seat_of(sender)}}
        logger.debug(f"[会话] 收到用户 {sender} 的动作 {tagged}")

        if self._engine.send(tagged):
            return CommandResult.success_result("动作已处理")
        return CommandResult.ignored("动作被忽略", error_code="ACTION_IGNORED")

    # ------------------------------------------------------------------
    # 出站

    def get_state(self) -> Dict[str, Any]:
        """完整会话状态 {users, log, gameInfo}"""
        return SnapshotSerializer.game_state_to_dict(
            [u.to_dict() for u in self._users],
            [entry.to_dict() for entry in self._log],
            self._engine.get_snapshot(),
        )

    def serialize_state(self) -> str:
        return SnapshotSerializer.serialize(self.get_state())

    def close(self) -> None:
        """关闭会话：停止引擎并取消全部定时器"""
        self._engine.event_bus.unsubscribe(EventType.STATE_SETTLED, self._settled_handler)
        self._engine.stop()
        self._broadcast = None
        logger.info(f"[会话] 房间 {self.room_id} 已关闭")

    def _on_settled(self, snapshot: GameInfoSnapshot) -> None:
        self._broadcast_state()

    def _broadcast_state(self) -> None:
        if self._broadcast is None:
            return
        self._broadcast(self.serialize_state())

    def _take_seat(self, user_id: str) -> Optional[str]:
        for seat, occupant in self._seats.items():
            if occupant is None:
                self._seats[seat] = user_id
                return seat
        return None

    def _add_log(self, message: str) -> None:
        # 最新的在前，超过上限的最旧条目被丢弃
        self._log.appendleft(LogEntry(dt=int(self._clock() * 1000), message=message))
