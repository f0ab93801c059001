"""
Domain Events - 领域事件定义
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, Optional
from enum import Enum, auto
import time
import uuid


class EventType(Enum):
    """事件类型枚举"""
    # 游戏生命周期事件
    GAME_STARTED = auto()
    GAME_ENDED = auto()
    HAND_DEALT = auto()
    HAND_COMPLETED = auto()

    # 阶段转换事件
    PHASE_CHANGED = auto()

    # 请求子进程事件
    REQUEST_SPAWNED = auto()
    REQUEST_COMPLETED = auto()
    REQUEST_STOPPED = auto()

    # 出牌事件
    CARD_PLAYED = auto()
    CARDS_PASSED = auto()
    TRICK_COMPLETED = auto()
    ROUND_ADVANCED = auto()

    # 状态稳定，外壳据此广播快照
    STATE_SETTLED = auto()

    # 会话事件
    USER_JOINED = auto()
    USER_LEFT = auto()


@dataclass(frozen=True)
class DomainEvent:
    """
    领域事件

    Attributes:
        event_id: 事件唯一标识符
        event_type: 事件类型
        aggregate_id: 聚合根ID（房间/游戏ID）
        timestamp: 事件发生时间戳
        data: 事件数据
        correlation_id: 关联ID，通常是请求子进程的ID
    """
    event_id: str
    event_type: EventType
    aggregate_id: str
    timestamp: float
    data: Dict[str, Any]
    correlation_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        event_type: EventType,
        aggregate_id: str,
        data: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> DomainEvent:
        """
        创建领域事件的工厂方法

        Args:
            event_type: 事件类型
            aggregate_id: 聚合根ID
            data: 事件数据
            correlation_id: 关联ID

        Returns:
            DomainEvent: 创建的事件实例
        """
        return cls(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            aggregate_id=aggregate_id,
            timestamp=time.time(),
            data=data,
            correlation_id=correlation_id
        )

    def to_dict(self) -> Dict[str, Any]:
        """将事件转换为字典格式"""
        return {
            'event_id': self.event_id,
            'event_type': self.event_type.name,
            'aggregate_id': self.aggregate_id,
            'timestamp': self.timestamp,
            'data': self.data,
            'correlation_id': self.correlation_id
        }
