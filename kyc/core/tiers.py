from dataclasses import dataclass
from decimal import Decimal
from kyc.enums import KycLevelEnums


@dataclass(frozen=True)
class TradingLimitTier:
    level: int
    daily_limit: Decimal
    monthly_limit: Decimal
    features: tuple


TRADING_LIMIT_TIERS = {
    KycLevelEnums.UNVERIFIED: TradingLimitTier(0, Decimal('1000.00'), Decimal('10000.00'), ('basic_wallet',)),
    KycLevelEnums.BASIC: TradingLimitTier(1, Decimal('5000.00'), Decimal('50000.00'), ('basic_wallet', 'p2p_trading')),
    KycLevelEnums.ENHANCED: TradingLimitTier(
        2, Decimal('25000.00'), Decimal('250000.00'), ('basic_wallet', 'p2p_trading', 'marketplace', 'freelancing')
    ),
    KycLevelEnums.PREMIUM: TradingLimitTier(3, Decimal('100000.00'), Decimal('1000000.00'), ('all_features',)),
}

DEFAULT_TIER = TRADING_LIMIT_TIERS[KycLevelEnums.UNVERIFIED]


def resolve_tier(kyc_level) -> TradingLimitTier:
    """Return the tier for ``kyc_level``; anything outside 0-3 gets the level 0 tier."""
    return TRADING_LIMIT_TIERS.get(kyc_level, DEFAULT_TIER)
