import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from django.db import DatabaseError, transaction
from django.utils import timezone
from kyc.core.exceptions.kyc_exceptions import (
    KycServiceException,
    KycStoreUnavailableException,
    TradingLimitExceededException,
)
from kyc.core.locks import trading_limits_lock
from kyc.core.results import LimitUpdateResult, TradeLimitCheck
from kyc.core.stores import TradingLimitStore
from kyc.core.tiers import DEFAULT_TIER, resolve_tier
from kyc.models import TradingLimits

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


class TradingLimitService:
    """Per-user trading limits keyed on KYC level, plus daily/monthly volume accounting.

    The read and write operations used by onboarding and trading flows never let a
    store error escape: they log it and return ``None`` or ``False``. Volume
    accounting raises domain exceptions instead, since a trade must not proceed
    on an unknown limit.
    """

    def __init__(self, store: Optional[TradingLimitStore] = None, lock=trading_limits_lock):
        self.store = store or TradingLimitStore()
        self.lock = lock

    @staticmethod
    def _default_values() -> dict:
        return {
            'kyc_level': DEFAULT_TIER.level,
            'daily_limit': DEFAULT_TIER.daily_limit,
            'monthly_limit': DEFAULT_TIER.monthly_limit,
        }

    def get_user_trading_limits(self, user_id: str) -> Optional[TradingLimits]:
        try:
            return self.store.get(user_id)
        except TradingLimits.DoesNotExist:
            return self._create_default_if_absent(user_id)
        except DatabaseError as e:
            logger.error(f"Trading limits lookup failed for user {user_id}: {str(e)}")
            return None

    def _create_default_if_absent(self, user_id: str) -> Optional[TradingLimits]:
        try:
            limits, created = self.store.get_or_insert(user_id, defaults=self._default_values())
        except DatabaseError as e:
            logger.error(f"Default trading limits creation failed for user {user_id}: {str(e)}")
            return None
        if created:
            logger.info(f"Default trading limits created for user {user_id}")
        return limits

    def create_default_trading_limits(self, user_id: str) -> Optional[TradingLimits]:
        # Plain insert: a second call for the same user hits the unique constraint.
        try:
            limits = self.store.insert(user_id, **self._default_values())
        except DatabaseError as e:
            logger.error(f"Default trading limits creation failed for user {user_id}: {str(e)}")
            return None
        logger.info(f"Default trading limits created for user {user_id}")
        return limits

    def apply_kyc_level(self, user_id: str, kyc_level: int) -> LimitUpdateResult:
        if not user_id:
            return LimitUpdateResult.validation_error("user_id is required")

        tier = resolve_tier(kyc_level)
        if tier.level != kyc_level:
            logger.warning(f"Unknown KYC level {kyc_level} for user {user_id}, applying level {tier.level} limits")

        try:
            limits, created = self.store.upsert(user_id, {
                'kyc_level': tier.level,
                'daily_limit': tier.daily_limit,
                'monthly_limit': tier.monthly_limit,
                'updated_at': timezone.now(),
            })
        except DatabaseError as e:
            logger.error(f"Trading limits update failed for user {user_id}: {str(e)}")
            return LimitUpdateResult.store_error(str(e))

        logger.info(f"Trading limits set to level {tier.level} for user {user_id}")
        return LimitUpdateResult.success(limits)

    def update_trading_limits(self, user_id: str, kyc_level: int) -> bool:
        return bool(self.apply_kyc_level(user_id, kyc_level))

    @staticmethod
    def _effective_volumes(limits: TradingLimits, today: date) -> tuple[Decimal, Decimal]:
        daily = limits.current_daily_volume if limits.daily_window_start == today else ZERO
        monthly = limits.current_monthly_volume if limits.monthly_window_start == today.replace(day=1) else ZERO
        return daily, monthly

    @staticmethod
    def _roll_windows(limits: TradingLimits, today: date) -> list[str]:
        changed = []
        if limits.daily_window_start != today:
            limits.current_daily_volume = ZERO
            limits.daily_window_start = today
            changed += ['current_daily_volume', 'daily_window_start']
        month_start = today.replace(day=1)
        if limits.monthly_window_start != month_start:
            limits.current_monthly_volume = ZERO
            limits.monthly_window_start = month_start
            changed += ['current_monthly_volume', 'monthly_window_start']
        return changed

    def check_trade_allowed(self, user_id: str, amount: Decimal, today: Optional[date] = None) -> TradeLimitCheck:
        limits = self.get_user_trading_limits(user_id)
        if limits is None:
            raise KycStoreUnavailableException("Trading limits are unavailable")

        amount = Decimal(amount)
        daily, monthly = self._effective_volumes(limits, today or timezone.localdate())
        remaining_daily = max(limits.daily_limit - daily, ZERO)
        remaining_monthly = max(limits.monthly_limit - monthly, ZERO)

        if amount <= 0:
            return TradeLimitCheck(False, remaining_daily, remaining_monthly, "Amount must be positive")
        if amount > remaining_daily:
            return TradeLimitCheck(False, remaining_daily, remaining_monthly, "Daily trading limit exceeded")
        if amount > remaining_monthly:
            return TradeLimitCheck(False, remaining_daily, remaining_monthly, "Monthly trading limit exceeded")
        return TradeLimitCheck(True, remaining_daily, remaining_monthly)

    def record_trade_volume(self, user_id: str, amount: Decimal, today: Optional[date] = None) -> TradingLimits:
        amount = Decimal(amount)
        if amount <= 0:
            raise KycServiceException("Amount must be positive")
        today = today or timezone.localdate()

        if self.get_user_trading_limits(user_id) is None:
            raise KycStoreUnavailableException("Trading limits are unavailable")

        with self.lock(user_id):
            with transaction.atomic():
                limits = self.store.get_for_update(user_id)
                changed = self._roll_windows(limits, today)

                if limits.current_daily_volume + amount > limits.daily_limit:
                    raise TradingLimitExceededException("Daily trading limit exceeded")
                if limits.current_monthly_volume + amount > limits.monthly_limit:
                    raise TradingLimitExceededException("Monthly trading limit exceeded")

                limits.current_daily_volume += amount
                limits.current_monthly_volume += amount
                changed = set(changed) | {'current_daily_volume', 'current_monthly_volume', 'updated_at'}
                self.store.save(limits, update_fields=sorted(changed))

        logger.info(f"Trade volume {amount} recorded for user {user_id}")
        return limits

    def reset_expired_windows(self, today: Optional[date] = None) -> int:
        today = today or timezone.localdate()
        reset_count = 0
        with transaction.atomic():
            for limits in self.store.with_expired_windows(today).select_for_update():
                changed = self._roll_windows(limits, today)
                if changed:
                    self.store.save(limits, update_fields=changed + ['updated_at'])
                    reset_count += 1
        logger.info(f"Trading volume windows reset for {reset_count} users")
        return reset_count
