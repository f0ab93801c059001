"""
请求注册表

关联ID到请求记录的映射："生成" 即插入，"停止" 即删除，"发送" 即查找后尝试完成.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .types import PendingRequest, RequestCompletion, RequestConflictError, Validation

__all__ = ['RequestRegistry']

logger = logging.getLogger(__name__)


def _normalize(value: Any) -> Tuple[Any, ...]:
    """把单值或批量值统一成元组"""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def _all_distinct(values: Tuple[Any, ...]) -> bool:
    try:
        return len(set(values)) == len(values)
    except TypeError:
        # 不可哈希的值（如dict）一律视为非法
        return False


class RequestRegistry:
    """
    请求注册表

    由一个引擎实例独占，关联ID计数器也属于该实例.
    """

    def __init__(self, enforce_owner: bool = True):
        """
        Args:
            enforce_owner: 是否要求提交者就是被请求的玩家
        """
        self._requests: Dict[str, PendingRequest] = {}
        self._counter = 0
        self._enforce_owner = enforce_owner

    def _next_id(self) -> str:
        self._counter += 1
        return str(self._counter)

    def spawn(self, player_id: str, tag: str, validation: Validation, count: int = 1) -> str:
        """
        生成一个新请求

        Args:
            player_id: 被请求的玩家
            tag: 请求标签
            validation: 元素校验函数
            count: 需要的值个数

        Returns:
            str: 新请求的关联ID

        Raises:
            RequestConflictError: 该玩家该标签已有活动请求
        """
        existing = self.find(player_id, tag)
        if existing is not None:
            raise RequestConflictError(player_id, tag, existing.request_id)

        request = PendingRequest(
            request_id=self._next_id(),
            player_id=player_id,
            tag=tag,
            count=count,
            validation=validation,
        )
        self._requests[request.request_id] = request
        logger.debug(f"[请求] 生成 {request.request_id}: player={player_id} tag={tag} count={count}")
        return request.request_id

    def stop(self, request_id: str) -> Optional[PendingRequest]:
        """停止并注销请求；对不存在的ID是空操作"""
        request = self._requests.pop(request_id, None)
        if request is not None:
            logger.debug(f"[请求] 停止 {request_id}")
        return request

    def stop_tag(self, tag: str) -> List[PendingRequest]:
        """停止某个标签下的全部请求"""
        stopped = [r for r in self._requests.values() if r.tag == tag]
        for request in stopped:
            self.stop(request.request_id)
        return stopped

    def clear(self) -> None:
        self._requests.clear()

    def get(self, request_id: str) -> Optional[PendingRequest]:
        return self._requests.get(request_id)

    def find(self, player_id: str, tag: str) -> Optional[PendingRequest]:
        """查找某玩家某标签的活动请求"""
        for request in self._requests.values():
            if request.player_id == player_id and request.tag == tag:
                return request
        return None

    def live_requests(self) -> List[PendingRequest]:
        """按关联ID顺序返回全部活动请求"""
        return sorted(self._requests.values(), key=lambda r: int(r.request_id))

    def send(self, request_id: Any, value: Any, user_id: Optional[str] = None) -> Optional[RequestCompletion]:
        """
        把玩家提交的值路由到对应请求

        任何不合法的提交都被静默丢弃，请求保持等待状态.

        Args:
            request_id: 目标关联ID
            value: 提交的值，单值或列表
            user_id: 提交者

        Returns:
            Optional[RequestCompletion]: 接受时返回完成信号，否则None
        """
        request = self._requests.get(str(request_id)) if request_id is not None else None
        if request is None:
            logger.debug(f"[请求] 未知或已失效的请求ID: {request_id}")
            return None
        if request.completed:
            logger.debug(f"[请求] 请求 {request.request_id} 已完成，忽略重复提交")
            return None
        if self._enforce_owner and user_id != request.player_id:
            logger.debug(f"[请求] 用户 {user_id} 不是请求 {request.request_id} 的玩家")
            return None

        values = _normalize(value)
        if len(values) != request.count:
            logger.debug(f"[请求] 请求 {request.request_id} 需要 {request.count} 个值，收到 {len(values)}")
            return None
        if not _all_distinct(values):
            logger.debug(f"[请求] 请求 {request.request_id} 的值有重复")
            return None
        if not all(request.validation(v) for v in values):
            logger.debug(f"[请求] 请求 {request.request_id} 的值未通过校验: {values}")
            return None

        request.values = values
        return RequestCompletion(
            request_id=request.request_id,
            player_id=request.player_id,
            tag=request.tag,
            values=values,
        )

    def __len__(self) -> int:
        return len(self._requests)

    def __contains__(self, request_id: str) -> bool:
        return request_id in self._requests
