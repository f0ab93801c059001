"""
Events Module - 领域事件

Classes:
    DomainEvent: 领域事件
    EventBus: 事件总线
    EventHandler: 事件处理器协议

Functions:
    create_function_handler: 创建基于函数的事件处理器
"""

from .domain_events import EventType, DomainEvent
from .event_bus import EventHandler, EventBus, create_function_handler

__all__ = [
    "EventType",
    "DomainEvent",
    "EventHandler",
    "EventBus",
    "create_function_handler",
]
