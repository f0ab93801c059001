"""
Snapshot Module - 状态快照

引擎内部状态到对外快照的确定性映射.

Classes:
    GameInfoSnapshot: 引擎快照
    PlayerSnapshot: 玩家快照
    RequestSnapshot: 活动请求快照
    SnapshotManager: 从上下文创建快照
    SnapshotSerializer: 快照序列化器
"""

from .types import PlayerSnapshot, RequestSnapshot, GameInfoSnapshot
from .snapshot_manager import SnapshotManager, SnapshotCreationError
from .serializer import SnapshotSerializer, SerializationError

__all__ = [
    'PlayerSnapshot',
    'RequestSnapshot',
    'GameInfoSnapshot',
    'SnapshotManager',
    'SnapshotCreationError',
    'SnapshotSerializer',
    'SerializationError',
]
