"""
快照序列化器

把快照转换为线上格式的字典/JSON. 字段顺序固定，
同一状态总是得到逐字节相同的输出.
"""

import json
from typing import Any, Dict, Iterable, Mapping

from .types import GameInfoSnapshot, PlayerSnapshot

__all__ = ['SnapshotSerializer', 'SerializationError']


class SerializationError(Exception):
    """序列化错误"""
    pass


class SnapshotSerializer:
    """
    快照序列化器

    gameInfo 的结构为 {status, value, context, children}：
    value 是嵌套的状态路径，children 是以关联ID为键的活动请求.
    """

    @staticmethod
    def _player_to_dict(player: PlayerSnapshot) -> Dict[str, Any]:
        return {
            'id': player.player_id,
            'name': player.name,
            'hand': list(player.hand),
            'playArea': list(player.play_area),
            'score': player.score,
        }

    @staticmethod
    def game_info_to_dict(snapshot: GameInfoSnapshot) -> Dict[str, Any]:
        """引擎快照转换为字典"""
        players = {p.player_id: SnapshotSerializer._player_to_dict(p) for p in snapshot.players}
        winner = players.get(snapshot.winner) if snapshot.winner else None
        return {
            'status': snapshot.status,
            'value': snapshot.phase.to_state_value(),
            'context': {
                'deck': list(snapshot.deck),
                'players': players,
                'playerCount': len(snapshot.players),
                'currentPlayer': snapshot.current_player,
                'winner': winner,
                'round': snapshot.round,
                'handNumber': snapshot.hand_number,
                'heartsBroken': snapshot.hearts_broken,
                'discard': list(snapshot.discard),
                'playerOrder': list(snapshot.player_order),
                'passSelections': {pid: list(cards) for pid, cards in snapshot.pass_selections},
                'lastTrick': snapshot.last_trick.to_dict() if snapshot.last_trick else None,
            },
            'children': {
                r.request_id: {
                    'playerId': r.player_id,
                    'tag': r.tag,
                    'count': r.count,
                    'status': 'done' if r.completed else 'active',
                }
                for r in snapshot.requests
            },
        }

    @staticmethod
    def game_state_to_dict(users: Iterable[Mapping[str, Any]],
                           log: Iterable[Mapping[str, Any]],
                           game_info: GameInfoSnapshot) -> Dict[str, Any]:
        """会话完整状态 {users, log, gameInfo}"""
        return {
            'users': [dict(u) for u in users],
            'log': [dict(entry) for entry in log],
            'gameInfo': SnapshotSerializer.game_info_to_dict(game_info),
        }

    @staticmethod
    def serialize(state: Dict[str, Any]) -> str:
        """
        序列化为JSON字符串

        Raises:
            SerializationError: 序列化失败时抛出
        """
        try:
            return json.dumps(state, ensure_ascii=False, separators=(',', ':'))
        except (TypeError, ValueError) as e:
            raise SerializationError(f"快照序列化失败: {str(e)}") from e
