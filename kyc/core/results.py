from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional
from kyc.enums import LimitUpdateOutcomeEnums
from kyc.models import TradingLimits


@dataclass
class LimitUpdateResult:
    outcome: str
    limits: Optional[TradingLimits] = None
    error: str = ""

    def __bool__(self):
        return self.outcome == LimitUpdateOutcomeEnums.SUCCESS

    @classmethod
    def success(cls, limits: TradingLimits) -> "LimitUpdateResult":
        return cls(LimitUpdateOutcomeEnums.SUCCESS, limits=limits)

    @classmethod
    def store_error(cls, error: str) -> "LimitUpdateResult":
        return cls(LimitUpdateOutcomeEnums.STORE_ERROR, error=error)

    @classmethod
    def validation_error(cls, error: str) -> "LimitUpdateResult":
        return cls(LimitUpdateOutcomeEnums.VALIDATION_ERROR, error=error)


@dataclass(frozen=True)
class TradeLimitCheck:
    allowed: bool
    remaining_daily: Decimal
    remaining_monthly: Decimal
    reason: str = ""


@dataclass
class KycStatusSummary:
    user_id: str
    level: int
    status: str
    verifications: dict
    documents: list = field(default_factory=list)
    limitations: dict = field(default_factory=dict)
    next_steps: list = field(default_factory=list)
