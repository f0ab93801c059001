"""
Event Bus - 事件总线

负责事件的发布、订阅和分发。引擎在单线程事件循环中运行，处理器同步调用.
"""

from __future__ import annotations
from typing import Protocol, Dict, List, Callable, Optional
from collections import defaultdict
import logging

from .domain_events import DomainEvent, EventType


class EventHandler(Protocol):
    """事件处理器协议"""

    def handle(self, event: DomainEvent) -> None:
        """
        处理事件

        Args:
            event: 要处理的领域事件
        """
        ...

    def can_handle(self, event_type: EventType) -> bool:
        """检查是否能处理指定类型的事件"""
        ...


class EventBus:
    """
    事件总线

    处理器中的异常只记录日志，不会中断发布方的状态转换.
    """

    def __init__(self, max_history_size: int = 1000):
        self._handlers: Dict[EventType, List[EventHandler]] = defaultdict(list)
        self._global_handlers: List[EventHandler] = []
        self._event_history: List[DomainEvent] = []
        self._max_history_size = max_history_size
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        订阅特定类型的事件

        Args:
            event_type: 事件类型
            handler: 事件处理器
        """
        self._handlers[event_type].append(handler)
        self._logger.debug(f"Handler {handler.__class__.__name__} subscribed to {event_type.name}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """订阅所有事件"""
        self._global_handlers.append(handler)
        self._logger.debug(f"Handler {handler.__class__.__name__} subscribed to all events")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """
        取消订阅特定类型的事件

        Returns:
            bool: 是否成功取消订阅
        """
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
            return True
        return False

    def publish(self, event: DomainEvent) -> None:
        """
        发布事件

        Args:
            event: 要发布的事件
        """
        self._add_to_history(event)

        handlers = self._handlers[event.event_type][:] + self._global_handlers[:]
        self._logger.debug(f"Publishing event {event.event_type.name} with ID {event.event_id}")

        for handler in handlers:
            if hasattr(handler, 'can_handle') and not handler.can_handle(event.event_type):
                continue
            try:
                handler.handle(event)
            except Exception:
                self._logger.exception(f"Error in handler {handler.__class__.__name__}")

    def _add_to_history(self, event: DomainEvent) -> None:
        self._event_history.append(event)
        if len(self._event_history) > self._max_history_size:
            self._event_history.pop(0)

    def get_event_history(self,
                          event_type: Optional[EventType] = None,
                          limit: Optional[int] = None) -> List[DomainEvent]:
        """
        获取事件历史

        Args:
            event_type: 过滤的事件类型
            limit: 返回的最大事件数量

        Returns:
            List[DomainEvent]: 事件列表
        """
        events = self._event_history[:]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        if limit:
            events = events[-limit:]
        return events

    def clear_history(self) -> None:
        """清空事件历史"""
        self._event_history.clear()

    def get_handler_count(self, event_type: Optional[EventType] = None) -> int:
        """获取处理器数量，event_type为None时返回全局处理器数量"""
        if event_type is None:
            return len(self._global_handlers)
        return len(self._handlers[event_type])


def create_function_handler(func: Callable[[DomainEvent], None],
                            event_types: Optional[List[EventType]] = None) -> EventHandler:
    """
    创建基于函数的事件处理器

    Args:
        func: 处理函数
        event_types: 支持的事件类型列表，None表示支持所有类型

    Returns:
        EventHandler: 事件处理器
    """
    class FunctionHandler:
        def handle(self, event: DomainEvent) -> None:
            func(event)

        def can_handle(self, event_type: EventType) -> bool:
            return event_types is None or event_type in event_types

    return FunctionHandler()
