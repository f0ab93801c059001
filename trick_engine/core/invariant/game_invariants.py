"""
游戏不变量检查器

整合所有不变量检查器，提供统一的检查接口.
"""

from typing import Dict, Optional

from ..snapshot.types import GameInfoSnapshot
from .types import InvariantType, InvariantCheckResult, InvariantError
from .card_conservation_checker import CardConservationChecker
from .turn_structure_checker import TurnStructureChecker

__all__ = ['GameInvariants']


class GameInvariants:
    """游戏不变量检查器"""

    def __init__(self, max_rounds: Optional[int] = None):
        self.card_checker = CardConservationChecker()
        self.turn_checker = TurnStructureChecker(max_rounds)

        self._checkers = {
            InvariantType.CARD_CONSERVATION: self.card_checker,
            InvariantType.TURN_STRUCTURE: self.turn_checker,
        }

    def check_all(self, snapshot: GameInfoSnapshot,
                  raise_on_violation: bool = False) -> Dict[InvariantType, InvariantCheckResult]:
        """
        检查所有不变量

        Args:
            snapshot: 引擎快照
            raise_on_violation: 是否在违反时抛出异常

        Returns:
            Dict[InvariantType, InvariantCheckResult]: 检查结果字典

        Raises:
            InvariantError: 当raise_on_violation=True且有严重违反时
        """
        results = {}
        all_violations = []

        for invariant_type, checker in self._checkers.items():
            result = checker.check(snapshot)
            results[invariant_type] = result
            if not result.is_valid:
                all_violations.extend(result.violations)

        if raise_on_violation:
            critical = [v for v in all_violations if v.severity == 'CRITICAL']
            if critical:
                raise InvariantError(
                    f"发现{len(critical)}个严重不变量违反: {critical[0].description}",
                    all_violations
                )

        return results

    def validate_and_raise(self, snapshot: GameInfoSnapshot) -> None:
        self.check_all(snapshot, raise_on_violation=True)
