"""
不变量检查器基础类
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
import time
import uuid

from ..snapshot.types import GameInfoSnapshot
from .types import InvariantType, InvariantViolation, InvariantCheckResult

__all__ = ['BaseInvariantChecker']


class BaseInvariantChecker(ABC):
    """不变量检查器基础抽象类"""

    def __init__(self, invariant_type: InvariantType):
        self.invariant_type = invariant_type
        self._violations: List[InvariantViolation] = []

    @abstractmethod
    def _perform_check(self, snapshot: GameInfoSnapshot) -> bool:
        """执行具体的检查逻辑，发现问题时调用_add_violation"""
        pass

    def check(self, snapshot: GameInfoSnapshot) -> InvariantCheckResult:
        """
        执行不变量检查

        Args:
            snapshot: 引擎快照

        Returns:
            InvariantCheckResult: 检查结果
        """
        start_time = time.perf_counter()
        self._violations.clear()

        is_valid = self._perform_check(snapshot) and not self._violations
        check_duration = time.perf_counter() - start_time

        if is_valid:
            return InvariantCheckResult.create_success(self.invariant_type, check_duration)
        return InvariantCheckResult.create_failure(
            invariant_type=self.invariant_type,
            violations=self._violations.copy(),
            check_duration=check_duration
        )

    def _add_violation(self, description: str, severity: str = 'CRITICAL',
                       context: Optional[Dict[str, Any]] = None) -> None:
        """记录一次违反"""
        self._violations.append(InvariantViolation(
            invariant_type=self.invariant_type,
            violation_id=f"{self.invariant_type.name.lower()}_{uuid.uuid4().hex[:8]}",
            description=description,
            severity=severity,
            timestamp=time.time(),
            context=context or {}
        ))
