"""
请求注册表单元测试

测试请求的生成、路由、批量规则和停止.
"""

import pytest

from trick_engine.core.requests import RequestRegistry, RequestConflictError, PendingRequest


def in_hand(hand):
    return lambda value: value in hand


class TestSpawn:
    """测试生成请求"""

    def test_ids_are_monotonic_per_instance(self):
        registry = RequestRegistry()
        assert registry.spawn("A", "hand", in_hand({1})) == "1"
        assert registry.spawn("B", "hand", in_hand({2})) == "2"
        assert RequestRegistry().spawn("A", "hand", in_hand({1})) == "1"

    def test_conflict_on_same_player_and_tag(self):
        registry = RequestRegistry()
        first = registry.spawn("A", "pass", in_hand({1}), count=3)
        with pytest.raises(RequestConflictError) as exc_info:
            registry.spawn("A", "pass", in_hand({1}), count=3)
        assert exc_info.value.existing_id == first

    def test_same_player_different_tags_coexist(self):
        registry = RequestRegistry()
        registry.spawn("A", "pass", in_hand({1}))
        registry.spawn("A", "hand", in_hand({1}))
        assert len(registry) == 2

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            PendingRequest(request_id="1", player_id="A", tag="hand", count=0, validation=bool)


class TestSend:
    """测试提交值"""

    def setup_method(self):
        self.registry = RequestRegistry()
        self.rid = self.registry.spawn("A", "hand", in_hand({3, 5, 7}))

    def test_valid_value_completes(self):
        completion = self.registry.send(self.rid, 5, "A")
        assert completion is not None
        assert completion.value == 5
        assert completion.player_id == "A"
        assert completion.tag == "hand"
        assert self.registry.get(self.rid).completed

    def test_list_of_one_is_accepted(self):
        assert self.registry.send(self.rid, [7], "A").values == (7,)

    def test_invalid_value_ignored(self):
        assert self.registry.send(self.rid, 4, "A") is None
        assert not self.registry.get(self.rid).completed

    def test_wrong_owner_ignored(self):
        assert self.registry.send(self.rid, 5, "B") is None

    def test_owner_not_enforced(self):
        registry = RequestRegistry(enforce_owner=False)
        rid = registry.spawn("A", "hand", in_hand({5}))
        assert registry.send(rid, 5, "B") is not None

    def test_unknown_id_ignored(self):
        assert self.registry.send("99", 5, "A") is None
        assert self.registry.send(None, 5, "A") is None

    def test_numeric_request_id_is_routed(self):
        assert self.registry.send(int(self.rid), 5, "A") is not None

    def test_second_submission_is_inert(self):
        assert self.registry.send(self.rid, 5, "A") is not None
        assert self.registry.send(self.rid, 3, "A") is None
        assert self.registry.get(self.rid).values == (5,)


class TestBatch:
    """测试批量请求"""

    def setup_method(self):
        self.registry = RequestRegistry()
        self.rid = self.registry.spawn("A", "pass", in_hand({1, 2, 3, 4}), count=3)

    def test_exact_count_accepted(self):
        assert self.registry.send(self.rid, [1, 2, 3], "A").values == (1, 2, 3)

    def test_wrong_count_ignored(self):
        assert self.registry.send(self.rid, [1, 2], "A") is None
        assert self.registry.send(self.rid, [1, 2, 3, 4], "A") is None

    def test_one_invalid_element_rejects_whole_batch(self):
        """测试部分非法的批次被整体丢弃，不与后续提交合并"""
        assert self.registry.send(self.rid, [1, 2, 9], "A") is None
        assert self.registry.send(self.rid, [3], "A") is None
        assert self.registry.send(self.rid, [2, 3, 4], "A") is not None

    def test_duplicates_rejected(self):
        assert self.registry.send(self.rid, [1, 1, 2], "A") is None

    def test_unhashable_values_rejected(self):
        assert self.registry.send(self.rid, [{}, {}, {}], "A") is None


class TestStop:
    """测试停止请求"""

    def test_stop_is_idempotent(self):
        registry = RequestRegistry()
        rid = registry.spawn("A", "hand", in_hand({1}))
        assert registry.stop(rid) is not None
        assert registry.stop(rid) is None
        assert rid not in registry

    def test_send_after_stop_ignored(self):
        registry = RequestRegistry()
        rid = registry.spawn("A", "hand", in_hand({1}))
        registry.stop(rid)
        assert registry.send(rid, 1, "A") is None

    def test_stop_tag_and_live_order(self):
        registry = RequestRegistry()
        for pid in "ABCD":
            registry.spawn(pid, "pass", in_hand({1}))
        registry.spawn("A", "hand", in_hand({1}))
        assert [r.request_id for r in registry.live_requests()] == ["1", "2", "3", "4", "5"]
        stopped = registry.stop_tag("pass")
        assert len(stopped) == 4
        assert [r.tag for r in registry.live_requests()] == ["hand"]

    def test_ids_keep_increasing_after_clear(self):
        registry = RequestRegistry()
        registry.spawn("A", "hand", in_hand({1}))
        registry.clear()
        assert len(registry) == 0
        assert registry.spawn("A", "hand", in_hand({1})) == "2"
