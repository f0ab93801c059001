"""
请求子进程类型定义
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

__all__ = ['Validation', 'PendingRequest', 'RequestCompletion', 'RequestConflictError']

Validation = Callable[[Any], bool]


class RequestConflictError(Exception):
    """同一玩家同一标签已存在活动请求"""

    def __init__(self, player_id: str, tag: str, existing_id: str):
        super().__init__(f"玩家 {player_id} 已有标签为 {tag} 的活动请求: {existing_id}")
        self.player_id = player_id
        self.tag = tag
        self.existing_id = existing_id


@dataclass
class PendingRequest:
    """
    一个等待输入的请求记录.

    Attributes:
        request_id: 关联ID，进程内单调递增
        player_id: 被请求的玩家
        tag: 请求的值类型，如 "hand"、"pass"
        count: 需要一次性提交的值个数
        validation: 对每个元素执行的校验函数
        values: 已接受的值，完成前为None
    """
    request_id: str
    player_id: str
    tag: str
    count: int
    validation: Validation
    values: Optional[Tuple[Any, ...]] = None

    def __post_init__(self):
        if not self.request_id:
            raise ValueError("request_id不能为空")
        if self.count <= 0:
            raise ValueError("count必须大于0")

    @property
    def completed(self) -> bool:
        return self.values is not None

    def to_dict(self) -> Dict[str, Any]:
        """快照中的表示；validation不可序列化，不输出"""
        return {
            'id': self.request_id,
            'playerId': self.player_id,
            'tag': self.tag,
            'count': self.count,
            'status': 'done' if self.completed else 'active',
        }


@dataclass(frozen=True)
class RequestCompletion:
    """请求完成信号，交给生成它的引擎"""
    request_id: str
    player_id: str
    tag: str
    values: Tuple[Any, ...]

    @property
    def value(self) -> Any:
        """单值请求的值"""
        return self.values[0]
