"""
请求子进程模块

每个决策点生成一个可独立寻址的等待单元，等待指定玩家提交一次合法输入.
"""

from .types import PendingRequest, RequestCompletion, RequestConflictError, Validation
from .request_registry import RequestRegistry

__all__ = [
    'PendingRequest',
    'RequestCompletion',
    'RequestConflictError',
    'Validation',
    'RequestRegistry',
]
