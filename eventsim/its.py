"""
Interpersonal-theory convergence summary.

Thwarted belongingness and perceived burdensomeness together form desire;
acquired capability is the third factor. This module reports which factors
are elevated for a computed state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from eventsim.dimensions import Dimension
from eventsim.state import ComputedState

TB_PRESENT_THRESHOLD = 0.5
PB_PRESENT_THRESHOLD = 0.5
AC_ELEVATED_THRESHOLD = 0.3


class ItsProximalFactor(str, Enum):
    THWARTED_BELONGINGNESS = "thwarted_belongingness"
    PERCEIVED_BURDENSOMENESS = "perceived_burdensomeness"
    ACQUIRED_CAPABILITY = "acquired_capability"

    @property
    def code(self) -> str:
        return {"thwarted_belongingness": "TB",
                "perceived_burdensomeness": "PB",
                "acquired_capability": "AC"}[self.value]


def thwarted_belongingness(computed: ComputedState) -> float:
    return (computed.effective(Dimension.LONELINESS) + (1.0 - computed.effective(Dimension.PRC))) / 2.0


def perceived_burdensomeness(computed: ComputedState) -> float:
    return (computed.effective(Dimension.PERCEIVED_LIABILITY) + computed.effective(Dimension.SELF_HATE)) / 2.0


@dataclass(frozen=True)
class ConvergenceStatus:
    tb_elevated: bool = False
    pb_elevated: bool = False
    ac_elevated: bool = False
    highest_factor: Optional[ItsProximalFactor] = None

    @classmethod
    def from_factors(cls, tb: float, pb: float, ac: float) -> "ConvergenceStatus":
        # Excess over threshold; non-elevated factors never win
        excess = {
            ItsProximalFactor.THWARTED_BELONGINGNESS: tb - TB_PRESENT_THRESHOLD,
            ItsProximalFactor.PERCEIVED_BURDENSOMENESS: pb - PB_PRESENT_THRESHOLD,
            ItsProximalFactor.ACQUIRED_CAPABILITY: ac - AC_ELEVATED_THRESHOLD,
        }
        elevated = {factor: value for factor, value in excess.items() if value >= 0.0}
        highest = max(elevated, key=elevated.get) if elevated else None
        return cls(
            tb_elevated=ItsProximalFactor.THWARTED_BELONGINGNESS in elevated,
            pb_elevated=ItsProximalFactor.PERCEIVED_BURDENSOMENESS in elevated,
            ac_elevated=ItsProximalFactor.ACQUIRED_CAPABILITY in elevated,
            highest_factor=highest,
        )

    @classmethod
    def from_state(cls, computed: ComputedState) -> "ConvergenceStatus":
        return cls.from_factors(
            thwarted_belongingness(computed),
            perceived_burdensomeness(computed),
            computed.effective(Dimension.ACQUIRED_CAPABILITY),
        )

    @property
    def elevated_factor_count(self) -> int:
        return int(self.tb_elevated) + int(self.pb_elevated) + int(self.ac_elevated)

    @property
    def is_three_factor_convergent(self) -> bool:
        return self.elevated_factor_count == 3

    def has_desire(self) -> bool:
        return self.tb_elevated and self.pb_elevated

    def is_dormant_capability(self) -> bool:
        return self.ac_elevated and not self.has_desire()

    def elevated_factors(self) -> List[ItsProximalFactor]:
        flags = (
            (ItsProximalFactor.THWARTED_BELONGINGNESS, self.tb_elevated),
            (ItsProximalFactor.PERCEIVED_BURDENSOMENESS, self.pb_elevated),
            (ItsProximalFactor.ACQUIRED_CAPABILITY, self.ac_elevated),
        )
        return [factor for factor, on in flags if on]
