"""
Test Configuration - pytest配置文件

提供测试的基础设施：
- 手动推进的调度器
- 使用固定随机种子的引擎工厂
- 测试标记定义
"""

import random
from typing import Callable, Dict, Optional

import pytest

from trick_engine.core.rules.types import GameRules
from trick_engine.core.state_machine import GameStateMachine, ManualScheduler, StateMachineFactory

FOUR_PLAYERS: Dict[str, str] = {"A": "Alice", "B": "Bob", "C": "Carol", "D": "Dave"}


@pytest.fixture
def scheduler() -> ManualScheduler:
    """手动推进的调度器fixture"""
    return ManualScheduler()


@pytest.fixture
def quick_rules() -> GameRules:
    """无传牌、零延时、开启不变量检查的规则"""
    return GameRules(pass_delay=0.0, settle_delay=0.0, enable_invariant_checks=True)


@pytest.fixture
def make_engine(scheduler, quick_rules) -> Callable[..., GameStateMachine]:
    """
    引擎工厂fixture

    返回的函数创建并启动一个四人引擎，默认使用quick_rules和固定种子.
    """
    def _make(rules: Optional[GameRules] = None,
              players: Optional[Dict[str, str]] = None,
              seed: int = 7,
              start: bool = True) -> GameStateMachine:
        engine = StateMachineFactory.create(
            game_id="test_game",
            players=players or FOUR_PLAYERS,
            rules=rules or quick_rules,
            scheduler=scheduler,
            rng=random.Random(seed),
        )
        if start:
            engine.start()
        return engine
    return _make


@pytest.fixture
def engine(make_engine) -> GameStateMachine:
    """已启动的四人引擎"""
    return make_engine()


# 测试标记定义
def pytest_configure(config):
    """pytest配置"""
    config.addinivalue_line(
        "markers", "property_test: 标记基于属性的测试"
    )
    config.addinivalue_line(
        "markers", "integration: 标记集成测试"
    )
