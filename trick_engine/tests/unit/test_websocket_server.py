"""
WebSocket房间服务器单元测试

使用内存中的连接对象驱动连接处理流程.
"""

import asyncio
import json
import uuid
from types import SimpleNamespace

from trick_engine.application import GameRulesConfig
from trick_engine.server import RoomServer, decode_action, room_id_from_path


class FakeConnection:
    """只提供服务器用到的属性：id、request.path 和异步迭代"""

    def __init__(self, path, messages):
        self.id = uuid.uuid4()
        self.request = SimpleNamespace(path=path)
        self._messages = list(messages)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self._messages:
            await asyncio.sleep(0)
            yield message


class TestDecoding:
    """测试帧解码"""

    def test_valid_json_object(self):
        assert decode_action('{"type": "request", "value": 3}') == {'type': 'request', 'value': 3}

    def test_bytes_frame(self):
        assert decode_action(b'{"type": "pass"}') == {'type': 'pass'}

    def test_malformed_frames(self):
        assert decode_action("not json") is None
        assert decode_action("[1, 2]") is None
        assert decode_action(b"\xff\xfe") is None

    def test_room_id_from_path(self):
        assert room_id_from_path("/lobby") == "lobby"
        assert room_id_from_path("/lobby?x=1") == "lobby"
        assert room_id_from_path("/") == "default"


class TestRoomServer:
    """测试房间生命周期"""

    def make_server(self, sent):
        config = GameRulesConfig(player_ids=["A", "B"], settle_delay=0.0)
        return RoomServer(config, broadcaster=lambda conns, message: sent.append((set(conns), message)))

    def test_connection_joins_and_room_closes(self):
        sent = []
        server = self.make_server(sent)
        connection = FakeConnection("/room7", ['not json', '{"type": "dance"}'])

        asyncio.run(server.handle_connection(connection))

        # 加入与离开各广播一次，格式错误和被忽略的动作不广播
        assert len(sent) == 2
        joined_to, joined_message = sent[0]
        assert joined_to == {connection}
        state = json.loads(joined_message)
        assert state['users'] == [{'id': str(connection.id), 'name': str(connection.id)}]
        assert server.rooms == {}

    def test_rooms_are_keyed_by_path(self):
        server = self.make_server([])

        async def scenario():
            first = server.get_or_create_room("one")
            again = server.get_or_create_room("one")
            other = server.get_or_create_room("two")
            assert first is again
            assert first is not other
            server.close_room("one")
            server.close_room("one")
            assert set(server.rooms) == {"two"}
            server.close_room("two")

        asyncio.run(scenario())
