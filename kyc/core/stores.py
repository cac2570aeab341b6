"""ORM-backed stores for the trading-limit and KYC tables.

Services receive these through their constructors. Lookups raise the model's
``DoesNotExist`` when no row matches; every other failure surfaces as
``django.db.DatabaseError``.
"""
from datetime import date
from django.db import transaction
from django.db.models import Q
from kyc.models import KycDocument, KycProfile, TradingLimits


class TradingLimitStore:

    def get(self, user_id: str) -> TradingLimits:
        return TradingLimits.objects.get(user_id=user_id)

    def get_for_update(self, user_id: str) -> TradingLimits:
        return TradingLimits.objects.select_for_update().get(user_id=user_id)

    def insert(self, user_id: str, **fields) -> TradingLimits:
        with transaction.atomic():
            return TradingLimits.objects.create(user_id=user_id, **fields)

    def get_or_insert(self, user_id: str, defaults: dict) -> tuple[TradingLimits, bool]:
        return TradingLimits.objects.get_or_create(user_id=user_id, defaults=defaults)

    def upsert(self, user_id: str, values: dict) -> tuple[TradingLimits, bool]:
        with transaction.atomic():
            return TradingLimits.objects.update_or_create(user_id=user_id, defaults=values)

    def save(self, limits: TradingLimits, update_fields: list[str]) -> None:
        limits.save(update_fields=update_fields)

    def with_expired_windows(self, today: date):
        return TradingLimits.objects.filter(
            Q(daily_window_start__lt=today) | Q(monthly_window_start__lt=today.replace(day=1))
        )


class KycDocumentStore:

    def insert(self, **fields) -> KycDocument:
        with transaction.atomic():
            return KycDocument.objects.create(**fields)

    def list_for_user(self, user_id: str) -> list[KycDocument]:
        return list(KycDocument.objects.filter(user_id=user_id).order_by("-created_at"))

    def get_for_update(self, document_id) -> KycDocument:
        return KycDocument.objects.select_for_update().get(id=document_id)

    def save(self, document: KycDocument, update_fields: list[str]) -> None:
        document.save(update_fields=update_fields)


class KycProfileStore:

    def get_or_insert(self, user_id: str) -> KycProfile:
        profile, _ = KycProfile.objects.get_or_create(user_id=user_id)
        return profile

    def find(self, user_id: str):
        return KycProfile.objects.filter(user_id=user_id).first()

    def save(self, profile: KycProfile, update_fields: list[str]) -> None:
        profile.save(update_fields=update_fields)
