"""
游戏状态机

拥有全部可变游戏状态：上下文、活动请求、定时器.
单线程协作式调度：一次输入被完整处理到稳定状态后才接受下一次输入.
"""
import logging
import random
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Tuple, Union

from ..deck.deck import Deck
from ..events.domain_events import DomainEvent, EventType
from ..events.event_bus import EventBus, create_function_handler
from ..invariant.game_invariants import GameInvariants
from ..requests.request_registry import RequestRegistry
from ..requests.types import Validation
from ..rules.types import GameRules
from ..snapshot.serializer import SnapshotSerializer
from ..snapshot.snapshot_manager import SnapshotManager
from ..snapshot.types import GameInfoSnapshot
from .scheduler import Scheduler, TimerHandle
from .types import GameContext, GameEvent, GamePhase, PhaseHandler

__all__ = ['GameStateMachine']

logger = logging.getLogger(__name__)

# 只能由引擎自身产生的事件类型
INTERNAL_EVENT_TYPES = {"play", "START", "REQUEST_DONE", "PASS_TIMEOUT", "SETTLE_TIMEOUT"}


class GameStateMachine:
    """
    回合/阶段状态机

    外部只能通过 send() 投递事件；所有状态写入都在阶段处理器和规则动作中完成.
    """

    def __init__(self,
                 game_id: str,
                 players: Mapping[str, str],
                 rules: GameRules,
                 phases: Dict[GamePhase, PhaseHandler],
                 transitions: Dict[Tuple[GamePhase, str], GamePhase],
                 scheduler: Scheduler,
                 event_bus: Optional[EventBus] = None,
                 rng: Optional[random.Random] = None):
        """
        初始化状态机

        Args:
            game_id: 游戏/房间ID
            players: 玩家ID到名字的有序映射，顺序即座位顺序
            rules: 规则参数
            phases: 阶段处理器映射
            transitions: (阶段, 结果事件类型) -> 目标阶段
            scheduler: 定时器调度器
            event_bus: 事件总线，默认新建
            rng: 洗牌使用的随机数生成器
        """
        missing_phases = set(GamePhase) - set(phases.keys())
        if missing_phases:
            raise ValueError(f"缺少必需的阶段处理器: {missing_phases}")

        self._phases = phases
        self._transitions = transitions
        self._rules = rules
        self._scheduler = scheduler
        self._event_bus = event_bus or EventBus()
        self._deck = Deck(rng)
        self._ctx = GameContext.create(game_id, dict(players))
        self._requests = RequestRegistry(enforce_owner=rules.enforce_request_owner)
        self._snapshot_manager = SnapshotManager()
        self._invariants = GameInvariants(rules.rounds_per_hand(self._ctx.player_count))

        self._current_phase = GamePhase.INIT
        self._status = 'idle'
        self._queue: Deque[GameEvent] = deque()
        self._processing = False
        self._timers: Dict[int, TimerHandle] = {}
        self._timer_seq = 0
        self._transition_history: Deque[Dict[str, Any]] = deque(maxlen=200)

    @property
    def current_phase(self) -> GamePhase:
        """获取当前阶段"""
        return self._current_phase

    @property
    def context(self) -> GameContext:
        return self._ctx

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def requests(self) -> RequestRegistry:
        return self._requests

    @property
    def deck(self) -> Deck:
        return self._deck

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def status(self) -> str:
        return self._status

    @property
    def transition_history(self) -> List[Dict[str, Any]]:
        """获取状态转换历史"""
        return list(self._transition_history)

    def get_handler(self, phase: Optional[GamePhase] = None) -> PhaseHandler:
        """获取指定阶段的处理器，如果未指定，则返回当前阶段的处理器"""
        return self._phases[phase or self._current_phase]

    # ------------------------------------------------------------------
    # 生命周期

    def start(self) -> None:
        """进入初始阶段：重置牌组、洗牌、发牌并进入第一个阶段"""
        if self._status != 'idle':
            raise RuntimeError(f"状态机已启动，当前状态: {self._status}")
        self._status = 'active'
        self.publish(EventType.GAME_STARTED, {'players': list(self._ctx.player_order)})
        self.get_handler().on_enter(self._ctx, self)
        self._process(GameEvent("START", internal=True))

    def stop(self) -> None:
        """停止状态机：取消所有定时器和活动请求"""
        self._cancel_timers()
        self._requests.clear()
        self._queue.clear()
        if self._status == 'active':
            self._status = 'stopped'
        logger.info(f"[状态机] 游戏 {self._ctx.game_id} 已停止")

    def mark_done(self) -> None:
        self._status = 'done'

    def subscribe(self, listener: Callable[[GameInfoSnapshot], None]):
        """
        订阅稳定状态

        每次输入或定时器处理完且状态发生变化后，listener收到一次最新快照.
        """
        handler = create_function_handler(
            lambda event: listener(self.get_snapshot()),
            [EventType.STATE_SETTLED],
        )
        self._event_bus.subscribe(EventType.STATE_SETTLED, handler)
        return handler

    # ------------------------------------------------------------------
    # 输入

    def send(self, event: Union[GameEvent, Mapping[str, Any]]) -> bool:
        """
        投递一个外部事件

        Args:
            event: GameEvent或动作字典 {type, ..., user: {id}}

        Returns:
            bool: 状态是否发生了变化
        """
        if self._status != 'active':
            return False
        if not isinstance(event, GameEvent):
            event = self._event_from_action(event)
            if event is None:
                return False
        if event.internal or event.event_type in INTERNAL_EVENT_TYPES:
            logger.debug(f"[状态机] 拒绝外部投递的内部事件: {event.event_type}")
            return False

        if event.event_type == "request":
            return self._route_request(event)
        return self._process(event)

    @staticmethod
    def _event_from_action(action: Mapping[str, Any]) -> Optional[GameEvent]:
        if not isinstance(action, Mapping) or not isinstance(action.get('type'), str):
            return None
        data = {k: v for k, v in action.items() if k not in ('type', 'user')}
        user = action.get('user')
        data['userId'] = user.get('id') if isinstance(user, Mapping) else None
        return GameEvent(event_type=action['type'], data=data)

    def _route_request(self, event: GameEvent) -> bool:
        """把request动作路由到对应关联ID的请求"""
        completion = self._requests.send(
            event.data.get('requestId'),
            event.data.get('value'),
            event.data.get('userId'),
        )
        if completion is None:
            return False

        self.publish(EventType.REQUEST_COMPLETED, {
            'player_id': completion.player_id,
            'tag': completion.tag,
            'values': list(completion.values),
        }, correlation_id=completion.request_id)
        return self._process(GameEvent(
            event_type="REQUEST_DONE",
            data={
                'request_id': completion.request_id,
                'player_id': completion.player_id,
                'tag': completion.tag,
                'values': completion.values,
            },
            internal=True,
        ))

    def raise_event(self, event: GameEvent) -> None:
        """处理器产生的内部事件，在当前转换完成后处理"""
        self._queue.append(event)

    # ------------------------------------------------------------------
    # 处理循环

    def _process(self, event: GameEvent) -> bool:
        """处理事件直到状态稳定"""
        if self._processing:
            self._queue.append(event)
            return True

        self._processing = True
        changed = False
        try:
            self._queue.append(event)
            while self._queue and self._status == 'active':
                current = self._queue.popleft()
                result = self.get_handler().handle_event(self._ctx, current, self)
                if result is None:
                    logger.debug(f"[状态机] {self._current_phase.value} 忽略事件 {current.event_type}")
                    continue
                changed = True
                self._follow(result)
        finally:
            self._processing = False
            if self._status != 'active':
                self._queue.clear()

        if changed:
            self._settle()
        return changed

    def _follow(self, result: GameEvent) -> None:
        """按结果事件转换阶段，并连续求值瞬时阶段"""
        target = self._determine_target_phase(result)
        while target is not None:
            self.transition_to(target, result)
            handler = self.get_handler()
            if not handler.transient:
                return
            result = handler.evaluate(self._ctx, self)
            target = self._determine_target_phase(result)
            if target is None:
                raise RuntimeError(f"瞬时阶段 {self._current_phase.value} 的结果 {result.event_type} 没有目标阶段")

    def _determine_target_phase(self, event: GameEvent) -> Optional[GamePhase]:
        return self._transitions.get((self._current_phase, event.event_type))

    def transition_to(self, target_phase: GamePhase, event: GameEvent) -> None:
        """
        执行到目标阶段的转换

        退出时取消本阶段的定时器.
        """
        self.get_handler().on_exit(self._ctx, self)
        self._cancel_timers()

        old_phase = self._current_phase
        self._current_phase = target_phase
        self._transition_history.append({
            'from': old_phase,
            'to': target_phase,
            'event': event.event_type,
        })
        self.publish(EventType.PHASE_CHANGED, {'from': old_phase.value, 'to': target_phase.value})

        self.get_handler().on_enter(self._ctx, self)

    def _settle(self) -> None:
        snapshot = self.get_snapshot()
        if self._rules.enable_invariant_checks:
            self._invariants.validate_and_raise(snapshot)
        self.publish(EventType.STATE_SETTLED, {'phase': self._current_phase.value})

    # ------------------------------------------------------------------
    # 处理器使用的副作用

    def spawn_request(self, player_id: str, tag: str, validation: Validation, count: int = 1) -> str:
        request_id = self._requests.spawn(player_id, tag, validation, count)
        self.publish(EventType.REQUEST_SPAWNED,
                     {'player_id': player_id, 'tag': tag, 'count': count},
                     correlation_id=request_id)
        return request_id

    def stop_request(self, request_id: str) -> None:
        if self._requests.stop(request_id) is not None:
            self.publish(EventType.REQUEST_STOPPED, {}, correlation_id=request_id)

    def schedule(self, delay: float, event_type: str) -> None:
        """安排一个定时转换；离开当前阶段时自动取消"""
        self._timer_seq += 1
        token = self._timer_seq
        self._timers[token] = self._scheduler.call_later(delay, lambda: self._on_timer(token, event_type))

    def _on_timer(self, token: int, event_type: str) -> None:
        if self._timers.pop(token, None) is None or self._status != 'active':
            return
        self._process(GameEvent(event_type, internal=True))

    def _cancel_timers(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

    def publish(self, event_type: EventType, data: Dict[str, Any],
                correlation_id: Optional[str] = None) -> None:
        self._event_bus.publish(DomainEvent.create(event_type, self._ctx.game_id, data, correlation_id))

    # ------------------------------------------------------------------
    # 快照

    def get_snapshot(self) -> GameInfoSnapshot:
        """当前状态的快照"""
        return self._snapshot_manager.create_snapshot(
            self._ctx, self._current_phase, self._requests, self._status
        )

    def get_persisted_snapshot(self) -> Dict[str, Any]:
        """线上格式的引擎快照 {status, value, context, children}"""
        return SnapshotSerializer.game_info_to_dict(self.get_snapshot())
