"""
传输层 - WebSocket房间服务器
"""

from .websocket_server import Room, RoomServer, decode_action, room_id_from_path

__all__ = ['Room', 'RoomServer', 'decode_action', 'room_id_from_path']
