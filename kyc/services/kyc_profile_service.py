import logging
from typing import Optional
from django.db import DatabaseError, transaction
from kyc.core.exceptions.kyc_exceptions import KycStoreUnavailableException
from kyc.core.results import KycStatusSummary
from kyc.core.stores import KycDocumentStore, KycProfileStore
from kyc.core.tiers import resolve_tier
from kyc.enums import KycLevelEnums, KycStatusEnums, VerificationCheckEnums
from kyc.models import KycProfile
from kyc.services.trading_limit_service import TradingLimitService

logger = logging.getLogger(__name__)

NEXT_STEPS = (
    (VerificationCheckEnums.EMAIL, "Verify email address"),
    (VerificationCheckEnums.PHONE, "Verify phone number"),
    (VerificationCheckEnums.IDENTITY, "Upload identity document"),
    (VerificationCheckEnums.BIOMETRIC, "Complete biometric verification"),
    (VerificationCheckEnums.ADDRESS, "Verify address"),
)

STATUS_BY_LEVEL = {
    KycLevelEnums.UNVERIFIED: KycStatusEnums.NOT_STARTED,
    KycLevelEnums.BASIC: KycStatusEnums.BASIC_COMPLETED,
    KycLevelEnums.ENHANCED: KycStatusEnums.ENHANCED_COMPLETED,
    KycLevelEnums.PREMIUM: KycStatusEnums.PREMIUM_COMPLETED,
}


def calculate_kyc_level(profile: Optional[KycProfile]) -> int:
    if profile is None:
        return KycLevelEnums.UNVERIFIED

    level = KycLevelEnums.UNVERIFIED
    if profile.email_verified and profile.phone_verified:
        level = KycLevelEnums.BASIC
    if profile.identity_verified:
        level = KycLevelEnums.ENHANCED
    if profile.address_verified and profile.biometric_verified:
        level = KycLevelEnums.PREMIUM
    return level


def determine_kyc_status(level: int) -> str:
    return STATUS_BY_LEVEL[level]


def next_verification_steps(profile: Optional[KycProfile]) -> list[str]:
    if profile is None:
        return [step for _, step in NEXT_STEPS[:2]]
    return [step for check, step in NEXT_STEPS if not getattr(profile, check.value)]


class KycProfileService:
    """Tracks which verifications a user has passed and keeps the trading tier in line with them."""

    def __init__(
        self,
        store: Optional[KycProfileStore] = None,
        document_store: Optional[KycDocumentStore] = None,
        trading_limit_service: Optional[TradingLimitService] = None,
    ):
        self.store = store or KycProfileStore()
        self.document_store = document_store or KycDocumentStore()
        self.trading_limit_service = trading_limit_service or TradingLimitService()

    def mark_verified(self, user_id: str, check: str) -> KycProfile:
        check = VerificationCheckEnums(check)
        with transaction.atomic():
            profile = self.store.get_or_insert(user_id)
            old_level = calculate_kyc_level(profile)
            setattr(profile, check.value, True)
            self.store.save(profile, update_fields=[check.value, 'updated_at'])
            new_level = calculate_kyc_level(profile)

        logger.info(f"KYC check {check.value} passed for user {user_id}")
        if new_level != old_level:
            if self.trading_limit_service.update_trading_limits(user_id, new_level):
                logger.info(f"KYC level changed from {old_level} to {new_level} for user {user_id}")
            else:
                logger.error(f"KYC level changed to {new_level} but trading limits were not updated for user {user_id}")
        return profile

    def get_kyc_status(self, user_id: str) -> KycStatusSummary:
        try:
            profile = self.store.find(user_id)
        except DatabaseError as e:
            logger.error(f"KYC profile lookup failed for user {user_id}: {str(e)}")
            raise KycStoreUnavailableException("KYC status is unavailable")
        level = calculate_kyc_level(profile)
        tier = resolve_tier(level)
        try:
            documents = self.document_store.list_for_user(user_id)
        except DatabaseError as e:
            logger.error(f"KYC documents lookup failed for user {user_id}: {str(e)}")
            documents = []

        return KycStatusSummary(
            user_id=user_id,
            level=level,
            status=determine_kyc_status(level),
            verifications={
                check.value.removesuffix('_verified'): bool(profile and getattr(profile, check.value))
                for check in VerificationCheckEnums
            },
            documents=documents,
            limitations={
                'daily_limit': tier.daily_limit,
                'monthly_limit': tier.monthly_limit,
                'features': list(tier.features),
            },
            next_steps=next_verification_steps(profile),
        )
