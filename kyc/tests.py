import gc
from datetime import date, timedelta
from decimal import Decimal
from io import StringIO
from uuid import uuid4
from django.core.management import call_command
from django.db import DatabaseError
from unittest import mock
from django.test import TestCase, override_settings
from django.utils import timezone
from redis.exceptions import ConnectionError as RedisConnectionError, LockNotOwnedError
from rest_framework.test import APIClient

from kyc.core.exceptions.kyc_exceptions import (
    DocumentAlreadyReviewedException,
    DocumentNotFoundException,
    KycServiceException,
    KycStoreUnavailableException,
    TradingLimitExceededException,
    TradingLimitLockException,
)
from kyc.core.locks import local_locks, trading_limits_lock
from kyc.apies.views import kyc_views
from kyc.core.stores import KycDocumentStore, KycProfileStore, TradingLimitStore
from kyc.core.tiers import TRADING_LIMIT_TIERS, resolve_tier
from kyc.enums import (
    DocumentTypeEnums,
    KycStatusEnums,
    LimitUpdateOutcomeEnums,
    VerificationCheckEnums,
    VerificationStatusEnums,
)
from kyc.models import KycDocument, TradingLimits
from kyc.services.kyc_document_service import KycDocumentService
from kyc.services.kyc_profile_service import KycProfileService
from kyc.services.trading_limit_service import TradingLimitService
from user.enums import UserTypeEnums
from user.services.user_service import UserService


class FailingTradingLimitStore(TradingLimitStore):
    def get(self, user_id):
        raise DatabaseError("connection timed out")

    def get_or_insert(self, user_id, defaults):
        raise DatabaseError("connection timed out")

    def insert(self, user_id, **fields):
        raise DatabaseError("connection timed out")

    def upsert(self, user_id, values):
        raise DatabaseError("connection timed out")


class RacingTradingLimitStore(TradingLimitStore):
    """Reports "not found" on the first read even though another caller already inserted the row."""

    def get(self, user_id):
        raise TradingLimits.DoesNotExist()


class FailingKycProfileStore(KycProfileStore):
    def find(self, user_id):
        raise DatabaseError("could not connect to server")


class FailingKycDocumentStore(KycDocumentStore):
    def insert(self, **fields):
        raise DatabaseError("permission denied for table kyc_documents")

    def list_for_user(self, user_id):
        raise DatabaseError("permission denied for table kyc_documents")


class TradingLimitTierTest(TestCase):

    def test_known_levels(self):
        expected = {
            0: (Decimal("1000"), Decimal("10000")),
            1: (Decimal("5000"), Decimal("50000")),
            2: (Decimal("25000"), Decimal("250000")),
            3: (Decimal("100000"), Decimal("1000000")),
        }
        for level, (daily, monthly) in expected.items():
            tier = resolve_tier(level)
            self.assertEqual(tier.level, level)
            self.assertEqual((tier.daily_limit, tier.monthly_limit), (daily, monthly))

    def test_unknown_levels_fall_back_to_level_zero(self):
        for level in (-1, 4, 99, None, "2"):
            self.assertEqual(resolve_tier(level), TRADING_LIMIT_TIERS[0])

    def test_limits_strictly_increase_with_level(self):
        tiers = [resolve_tier(level) for level in range(4)]
        for lower, higher in zip(tiers, tiers[1:]):
            self.assertLess(lower.daily_limit, higher.daily_limit)
            self.assertLess(lower.monthly_limit, higher.monthly_limit)


class TradingLimitServiceTest(TestCase):

    def setUp(self):
        self.service = TradingLimitService()

    def test_get_creates_default_for_new_user(self):
        limits = self.service.get_user_trading_limits("new-user")

        self.assertEqual(limits.kyc_level, 0)
        self.assertEqual(limits.daily_limit, Decimal("1000"))
        self.assertEqual(limits.monthly_limit, Decimal("10000"))
        self.assertEqual(limits.current_daily_volume, Decimal("0"))
        self.assertEqual(limits.current_monthly_volume, Decimal("0"))
        self.assertEqual(TradingLimits.objects.filter(user_id="new-user").count(), 1)

    def test_get_matches_create_default(self):
        lazily_created = self.service.get_user_trading_limits("lazy-user")
        explicitly_created = self.service.create_default_trading_limits("explicit-user")

        for field in ("kyc_level", "daily_limit", "monthly_limit", "current_daily_volume", "current_monthly_volume"):
            self.assertEqual(getattr(lazily_created, field), getattr(explicitly_created, field))

    def test_get_returns_existing_row_unmodified(self):
        existing = TradingLimits.objects.create(
            user_id="u-existing",
            kyc_level=2,
            daily_limit=Decimal("25000"),
            monthly_limit=Decimal("250000"),
            current_daily_volume=Decimal("120.50"),
            current_monthly_volume=Decimal("900.00"),
        )
        existing.refresh_from_db()

        limits = self.service.get_user_trading_limits("u-existing")

        self.assertEqual(limits.id, existing.id)
        self.assertEqual(limits.kyc_level, 2)
        self.assertEqual(limits.current_daily_volume, Decimal("120.50"))
        self.assertEqual(limits.current_monthly_volume, Decimal("900.00"))
        self.assertEqual(limits.updated_at, existing.updated_at)
        self.assertEqual(TradingLimits.objects.filter(user_id="u-existing").count(), 1)

    def test_get_does_not_create_default_on_store_failure(self):
        service = TradingLimitService(store=FailingTradingLimitStore())

        self.assertIsNone(service.get_user_trading_limits("u-outage"))
        self.assertFalse(TradingLimits.objects.filter(user_id="u-outage").exists())

    def test_get_after_concurrent_insert_keeps_single_row(self):
        winner = self.service.create_default_trading_limits("u-race")
        service = TradingLimitService(store=RacingTradingLimitStore())

        limits = service.get_user_trading_limits("u-race")

        self.assertEqual(limits.id, winner.id)
        self.assertEqual(TradingLimits.objects.filter(user_id="u-race").count(), 1)

    def test_create_default_twice_fails_on_second_insert(self):
        self.assertIsNotNone(self.service.create_default_trading_limits("u-dup"))
        self.assertIsNone(self.service.create_default_trading_limits("u-dup"))
        self.assertEqual(TradingLimits.objects.filter(user_id="u-dup").count(), 1)

    def test_create_default_store_failure_returns_none(self):
        service = TradingLimitService(store=FailingTradingLimitStore())
        self.assertIsNone(service.create_default_trading_limits("u-outage"))

    def test_update_persists_tier_for_each_level(self):
        for level in range(4):
            tier = resolve_tier(level)
            self.assertTrue(self.service.update_trading_limits(f"u-level-{level}", level))
            stored = TradingLimits.objects.get(user_id=f"u-level-{level}")
            self.assertEqual(stored.kyc_level, level)
            self.assertEqual(stored.daily_limit, tier.daily_limit)
            self.assertEqual(stored.monthly_limit, tier.monthly_limit)

    def test_update_unknown_level_persists_level_zero_limits(self):
        for level in (-1, 4, 99):
            user_id = f"u-unknown-{level}"
            self.assertTrue(self.service.update_trading_limits(user_id, level))
            stored = TradingLimits.objects.get(user_id=user_id)
            self.assertEqual(stored.daily_limit, Decimal("1000"))
            self.assertEqual(stored.monthly_limit, Decimal("10000"))
            self.assertEqual(stored.kyc_level, 0)

    def test_update_then_get(self):
        self.assertTrue(self.service.update_trading_limits("u1", 2))

        limits = self.service.get_user_trading_limits("u1")

        self.assertEqual(limits.kyc_level, 2)
        self.assertEqual(limits.daily_limit, Decimal("25000"))
        self.assertEqual(limits.monthly_limit, Decimal("250000"))

    def test_update_keeps_volume_accumulators(self):
        self.service.get_user_trading_limits("u-volume")
        TradingLimits.objects.filter(user_id="u-volume").update(
            current_daily_volume=Decimal("750.25"),
            current_monthly_volume=Decimal("4300.00"),
        )

        self.assertTrue(self.service.update_trading_limits("u-volume", 3))

        stored = TradingLimits.objects.get(user_id="u-volume")
        self.assertEqual(stored.kyc_level, 3)
        self.assertEqual(stored.current_daily_volume, Decimal("750.25"))
        self.assertEqual(stored.current_monthly_volume, Decimal("4300.00"))

    def test_update_refreshes_updated_at(self):
        limits = self.service.get_user_trading_limits("u-touch")
        stale = timezone.now() - timedelta(days=3)
        TradingLimits.objects.filter(id=limits.id).update(updated_at=stale)

        self.service.update_trading_limits("u-touch", 1)

        self.assertGreater(TradingLimits.objects.get(id=limits.id).updated_at, stale)

    def test_update_store_failure_returns_false(self):
        service = TradingLimitService(store=FailingTradingLimitStore())

        self.assertFalse(service.update_trading_limits("u-outage", 2))
        result = service.apply_kyc_level("u-outage", 2)
        self.assertEqual(result.outcome, LimitUpdateOutcomeEnums.STORE_ERROR)
        self.assertIn("connection timed out", result.error)

    def test_apply_kyc_level_rejects_empty_user(self):
        result = self.service.apply_kyc_level("", 1)

        self.assertFalse(result)
        self.assertEqual(result.outcome, LimitUpdateOutcomeEnums.VALIDATION_ERROR)
        self.assertFalse(TradingLimits.objects.exists())

    def test_apply_kyc_level_returns_written_row(self):
        result = self.service.apply_kyc_level("u-tagged", 1)

        self.assertTrue(result)
        self.assertEqual(result.outcome, LimitUpdateOutcomeEnums.SUCCESS)
        self.assertEqual(result.limits.daily_limit, Decimal("5000"))


class TradeVolumeTest(TestCase):

    def setUp(self):
        self.service = TradingLimitService()
        self.day = date(2026, 3, 10)

    def test_record_accumulates_within_limits(self):
        self.service.record_trade_volume("trader", Decimal("300"), today=self.day)
        limits = self.service.record_trade_volume("trader", Decimal("200"), today=self.day)

        self.assertEqual(limits.current_daily_volume, Decimal("500"))
        self.assertEqual(limits.current_monthly_volume, Decimal("500"))
        stored = TradingLimits.objects.get(user_id="trader")
        self.assertEqual(stored.daily_window_start, self.day)
        self.assertEqual(stored.monthly_window_start, date(2026, 3, 1))

    def test_record_rejects_daily_overflow(self):
        self.service.record_trade_volume("trader", Decimal("600"), today=self.day)

        with self.assertRaises(TradingLimitExceededException):
            self.service.record_trade_volume("trader", Decimal("500"), today=self.day)

        self.assertEqual(TradingLimits.objects.get(user_id="trader").current_daily_volume, Decimal("600"))

    def test_record_rejects_monthly_overflow(self):
        self.service.get_user_trading_limits("trader")
        TradingLimits.objects.filter(user_id="trader").update(
            current_daily_volume=Decimal("0"),
            current_monthly_volume=Decimal("9500"),
            daily_window_start=self.day,
            monthly_window_start=self.day.replace(day=1),
        )

        with self.assertRaises(TradingLimitExceededException):
            self.service.record_trade_volume("trader", Decimal("600"), today=self.day)

    def test_record_rejects_non_positive_amount(self):
        with self.assertRaises(KycServiceException):
            self.service.record_trade_volume("trader", Decimal("0"), today=self.day)

    def test_daily_window_rolls_over(self):
        self.service.record_trade_volume("trader", Decimal("600"), today=self.day)

        limits = self.service.record_trade_volume("trader", Decimal("500"), today=self.day + timedelta(days=1))

        self.assertEqual(limits.current_daily_volume, Decimal("500"))
        self.assertEqual(limits.current_monthly_volume, Decimal("1100"))

    def test_monthly_window_rolls_over(self):
        self.service.record_trade_volume("trader", Decimal("600"), today=self.day)

        limits = self.service.record_trade_volume("trader", Decimal("100"), today=date(2026, 4, 1))

        self.assertEqual(limits.current_daily_volume, Decimal("100"))
        self.assertEqual(limits.current_monthly_volume, Decimal("100"))

    def test_upgrade_raises_headroom_without_resetting_usage(self):
        self.service.record_trade_volume("trader", Decimal("900"), today=self.day)
        self.service.update_trading_limits("trader", 1)

        limits = self.service.record_trade_volume("trader", Decimal("2000"), today=self.day)

        self.assertEqual(limits.current_daily_volume, Decimal("2900"))

    def test_check_trade_allowed(self):
        allowed = self.service.check_trade_allowed("checker", Decimal("400"), today=self.day)
        self.assertTrue(allowed.allowed)
        self.assertEqual(allowed.remaining_daily, Decimal("1000"))
        self.assertEqual(allowed.remaining_monthly, Decimal("10000"))

        too_big = self.service.check_trade_allowed("checker", Decimal("1500"), today=self.day)
        self.assertFalse(too_big.allowed)
        self.assertEqual(too_big.reason, "Daily trading limit exceeded")

        self.assertFalse(self.service.check_trade_allowed("checker", Decimal("0"), today=self.day).allowed)

    def test_check_trade_does_not_record_volume(self):
        self.service.check_trade_allowed("checker", Decimal("400"), today=self.day)

        self.assertEqual(TradingLimits.objects.get(user_id="checker").current_daily_volume, Decimal("0"))

    def test_check_trade_raises_when_limits_unavailable(self):
        service = TradingLimitService(store=FailingTradingLimitStore())

        with self.assertRaises(KycStoreUnavailableException):
            service.check_trade_allowed("checker", Decimal("10"), today=self.day)

    def test_reset_expired_windows(self):
        self.service.record_trade_volume("stale", Decimal("700"), today=self.day)
        self.service.record_trade_volume("fresh", Decimal("300"), today=self.day + timedelta(days=1))

        reset_count = self.service.reset_expired_windows(today=self.day + timedelta(days=1))

        self.assertEqual(reset_count, 1)
        stale = TradingLimits.objects.get(user_id="stale")
        self.assertEqual(stale.current_daily_volume, Decimal("0"))
        self.assertEqual(stale.current_monthly_volume, Decimal("700"))
        self.assertEqual(TradingLimits.objects.get(user_id="fresh").current_daily_volume, Decimal("300"))

    def test_reset_command(self):
        self.service.record_trade_volume("stale", Decimal("700"), today=self.day)
        out = StringIO()

        call_command("reset_trading_volumes", "--date", "2026-04-02", stdout=out)

        stale = TradingLimits.objects.get(user_id="stale")
        self.assertEqual(stale.current_daily_volume, Decimal("0"))
        self.assertEqual(stale.current_monthly_volume, Decimal("0"))
        self.assertIn("1 users", out.getvalue())


class FakeRedisLock:
    def __init__(self, busy_attempts):
        self.busy_attempts = busy_attempts
        self.calls = 0
        self.released = False

    def acquire(self, blocking=False):
        self.calls += 1
        return self.calls > self.busy_attempts

    def release(self):
        self.released = True


class UnreachableRedisLock(FakeRedisLock):
    def acquire(self, blocking=False):
        self.calls += 1
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")


class ExpiredRedisLock(FakeRedisLock):
    def release(self):
        raise LockNotOwnedError("Cannot release a lock that's no longer owned")


class FakeRedis:
    def __init__(self, busy_attempts, lock_class=None):
        self.redis_lock = (lock_class or FakeRedisLock)(busy_attempts)
        self.lock_names = []

    def lock(self, name, timeout=None):
        self.lock_names.append(name)
        return self.redis_lock


@override_settings(KYC_TRADING={
    "APP_LOCK_TIMEOUT": 1.0,
    "LOCK_TIMEOUT": 5,
    "LOCK_RETRY_ATTEMPTS": 3,
    "LOCK_RETRY_DELAY": 0,
})
class TradingLimitsLockTest(TestCase):

    def test_acquires_redis_lock_after_retry(self):
        client = FakeRedis(busy_attempts=1)

        with trading_limits_lock("locked-user", client=client):
            pass

        self.assertEqual(client.lock_names, ["lock:trading_limits:locked-user"])
        self.assertEqual(client.redis_lock.calls, 2)
        self.assertTrue(client.redis_lock.released)

    def test_gives_up_and_releases_local_lock(self):
        client = FakeRedis(busy_attempts=10)

        with self.assertRaises(TradingLimitLockException):
            with trading_limits_lock("busy-user", client=client):
                pass

        self.assertFalse(client.redis_lock.released)
        self.assert_lock_free("busy-user")

    def test_redis_outage_on_acquire_releases_local_lock(self):
        client = FakeRedis(busy_attempts=0, lock_class=UnreachableRedisLock)

        with self.assertRaises(TradingLimitLockException):
            with trading_limits_lock("outage-user", client=client):
                pass

        self.assertFalse(client.redis_lock.released)
        self.assert_lock_free("outage-user")

    def test_expired_redis_lock_on_release_releases_local_lock(self):
        client = FakeRedis(busy_attempts=0, lock_class=ExpiredRedisLock)
        entered = []

        with trading_limits_lock("expired-user", client=client):
            entered.append(True)

        self.assertEqual(entered, [True])
        self.assert_lock_free("expired-user")

    def test_released_local_locks_are_dropped(self):
        with trading_limits_lock("short-lived-user", client=FakeRedis(busy_attempts=0)):
            self.assertIn("lock:trading_limits:short-lived-user", local_locks)

        gc.collect()
        self.assertNotIn("lock:trading_limits:short-lived-user", local_locks)

    def assert_lock_free(self, user_id):
        client = FakeRedis(busy_attempts=0)
        with trading_limits_lock(user_id, client=client):
            pass
        self.assertTrue(client.redis_lock.released, f"Lock for {user_id} must be acquirable again")


class KycDocumentServiceTest(TestCase):

    def setUp(self):
        self.service = KycDocumentService()

    def _upload(self, user_id, document_type=DocumentTypeEnums.PASSPORT):
        return self.service.upload_kyc_document({
            "user_id": user_id,
            "document_type": document_type,
            "document_url": f"https://storage.example.com/kyc/{user_id}/{uuid4()}.png",
            "verification_status": VerificationStatusEnums.PENDING,
        })

    def test_upload_assigns_id_and_created_at(self):
        document = self._upload("doc-user")

        self.assertIsNotNone(document.id)
        self.assertIsNotNone(document.created_at)
        self.assertEqual(document.verification_status, VerificationStatusEnums.PENDING)
        self.assertIsNone(document.verified_at)

    def test_upload_ignores_caller_supplied_id(self):
        supplied_id = uuid4()
        document = self.service.upload_kyc_document({
            "id": supplied_id,
            "user_id": "doc-user",
            "document_type": DocumentTypeEnums.UTILITY_BILL,
            "document_url": "https://storage.example.com/kyc/bill.pdf",
            "verification_status": VerificationStatusEnums.PENDING,
        })

        self.assertNotEqual(document.id, supplied_id)

    def test_documents_newest_first(self):
        documents = [self._upload("doc-user") for _ in range(3)]
        base = timezone.now() - timedelta(hours=1)
        for offset, document in zip((2, 0, 1), documents):
            KycDocument.objects.filter(id=document.id).update(created_at=base + timedelta(minutes=offset))
        self._upload("someone-else")

        listed = self.service.get_user_kyc_documents("doc-user")

        self.assertEqual([d.id for d in listed], [documents[0].id, documents[2].id, documents[1].id])
        for newer, older in zip(listed, listed[1:]):
            self.assertGreater(newer.created_at, older.created_at)

    def test_no_documents_returns_empty_list(self):
        self.assertEqual(self.service.get_user_kyc_documents("nobody"), [])

    def test_store_failures_degrade(self):
        service = KycDocumentService(store=FailingKycDocumentStore())

        self.assertIsNone(self._upload_with(service, "doc-user"))
        self.assertEqual(service.get_user_kyc_documents("doc-user"), [])

    @staticmethod
    def _upload_with(service, user_id):
        return service.upload_kyc_document({
            "user_id": user_id,
            "document_type": DocumentTypeEnums.NATIONAL_ID,
            "document_url": "https://storage.example.com/kyc/id.png",
            "verification_status": VerificationStatusEnums.PENDING,
        })


class KycReviewTest(TestCase):

    def setUp(self):
        self.admin = UserService.create_user("09120000001", UserTypeEnums.ADMIN, password="admin-pass-123")
        self.service = KycDocumentService()
        self.trading_limit_service = TradingLimitService()

    def _upload(self, user_id, document_type):
        return self.service.upload_kyc_document({
            "user_id": user_id,
            "document_type": document_type,
            "document_url": "https://storage.example.com/kyc/doc.png",
            "verification_status": VerificationStatusEnums.PENDING,
        })

    def test_approving_identity_document_raises_tier(self):
        document = self._upload("reviewed-user", DocumentTypeEnums.PASSPORT)

        reviewed = self.service.review_document(document.id, self.admin, approve=True)

        self.assertEqual(reviewed.verification_status, VerificationStatusEnums.VERIFIED)
        self.assertIsNotNone(reviewed.verified_at)
        self.assertEqual(reviewed.reviewed_by, self.admin)
        limits = self.trading_limit_service.get_user_trading_limits("reviewed-user")
        self.assertEqual(limits.kyc_level, 2)
        self.assertEqual(limits.daily_limit, Decimal("25000"))

    def test_rejecting_document_keeps_tier(self):
        document = self._upload("reviewed-user", DocumentTypeEnums.NATIONAL_ID)

        reviewed = self.service.review_document(document.id, self.admin, approve=False, reason="Image is blurry")

        self.assertEqual(reviewed.verification_status, VerificationStatusEnums.REJECTED)
        self.assertEqual(reviewed.rejection_reason, "Image is blurry")
        self.assertIsNone(reviewed.verified_at)
        self.assertEqual(self.trading_limit_service.get_user_trading_limits("reviewed-user").kyc_level, 0)

    def test_document_reviewed_only_once(self):
        document = self._upload("reviewed-user", DocumentTypeEnums.BANK_STATEMENT)
        self.service.review_document(document.id, self.admin, approve=True)

        with self.assertRaises(DocumentAlreadyReviewedException):
            self.service.review_document(document.id, self.admin, approve=False, reason="late")

    def test_missing_document(self):
        with self.assertRaises(DocumentNotFoundException):
            self.service.review_document(uuid4(), self.admin, approve=True)


class KycProfileServiceTest(TestCase):

    def setUp(self):
        self.service = KycProfileService()
        self.trading_limit_service = TradingLimitService()

    def test_status_for_unknown_user(self):
        summary = self.service.get_kyc_status("fresh-user")

        self.assertEqual(summary.level, 0)
        self.assertEqual(summary.status, KycStatusEnums.NOT_STARTED)
        self.assertFalse(any(summary.verifications.values()))
        self.assertEqual(summary.next_steps, ["Verify email address", "Verify phone number"])
        self.assertEqual(summary.limitations["features"], ["basic_wallet"])
        self.assertEqual(summary.documents, [])

    def test_email_and_phone_unlock_basic_level(self):
        self.service.mark_verified("profile-user", VerificationCheckEnums.EMAIL)
        self.assertFalse(TradingLimits.objects.filter(user_id="profile-user").exists())

        self.service.mark_verified("profile-user", VerificationCheckEnums.PHONE)

        limits = self.trading_limit_service.get_user_trading_limits("profile-user")
        self.assertEqual(limits.kyc_level, 1)
        self.assertEqual(limits.daily_limit, Decimal("5000"))
        summary = self.service.get_kyc_status("profile-user")
        self.assertEqual(summary.status, KycStatusEnums.BASIC_COMPLETED)
        self.assertTrue(summary.verifications["email"])
        self.assertNotIn("Verify phone number", summary.next_steps)

    def test_address_and_biometric_unlock_premium_level(self):
        for check in (
            VerificationCheckEnums.IDENTITY,
            VerificationCheckEnums.ADDRESS,
            VerificationCheckEnums.BIOMETRIC,
        ):
            self.service.mark_verified("premium-user", check)

        limits = self.trading_limit_service.get_user_trading_limits("premium-user")
        self.assertEqual(limits.kyc_level, 3)
        self.assertEqual(limits.monthly_limit, Decimal("1000000"))
        self.assertEqual(self.service.get_kyc_status("premium-user").status, KycStatusEnums.PREMIUM_COMPLETED)

    def test_status_profile_outage_is_unavailable(self):
        service = KycProfileService(store=FailingKycProfileStore())

        with self.assertRaises(KycStoreUnavailableException):
            service.get_kyc_status("fresh-user")


class KycApiTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = UserService.create_user("09121111111", UserTypeEnums.TRADER, password="trader-pass-123")
        self.admin = UserService.create_user("09122222222", UserTypeEnums.ADMIN, password="admin-pass-123")

    def test_requires_authentication(self):
        response = self.client.get("/api/kyc/trading_limits")
        self.assertIn(response.status_code, (401, 403))

    def test_trading_limits_created_on_first_read(self):
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/kyc/trading_limits")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["kyc_level"], 0)
        self.assertEqual(response.data["daily_limit"], "1000.00")
        self.assertEqual(response.data["user_id"], str(self.user.pk))

    def test_trade_check(self):
        self.client.force_authenticate(self.user)

        response = self.client.post("/api/kyc/trading_limits/check", {"amount": "2500.00"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["allowed"])

    def test_upload_and_list_documents(self):
        self.client.force_authenticate(self.user)

        created = self.client.post("/api/kyc/documents", {
            "document_type": "driver_license",
            "document_url": "https://storage.example.com/kyc/license.jpg",
        }, format="json")
        listed = self.client.get("/api/kyc/documents")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data["verification_status"], "pending")
        self.assertEqual(listed.status_code, 200)
        self.assertEqual(len(listed.data), 1)

    def test_upload_rejects_unknown_document_type(self):
        self.client.force_authenticate(self.user)

        response = self.client.post("/api/kyc/documents", {
            "document_type": "library_card",
            "document_url": "https://storage.example.com/kyc/card.jpg",
        }, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertFalse(KycDocument.objects.exists())

    def test_status(self):
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/kyc/status")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "not_started")
        self.assertEqual(response.data["level"], 0)

    def test_update_level_requires_admin(self):
        self.client.force_authenticate(self.user)

        response = self.client.post("/api/kyc/admin/update_level", {
            "phone_number": self.user.phone_number,
            "kyc_level": 3,
            "reason": "self upgrade",
        }, format="json")

        self.assertEqual(response.status_code, 403)
        self.assertFalse(TradingLimits.objects.exists())

    def test_admin_updates_level(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post("/api/kyc/admin/update_level", {
            "phone_number": self.user.phone_number,
            "kyc_level": 3,
            "reason": "Manual review completed",
        }, format="json")

        self.assertEqual(response.status_code, 202)
        limits = TradingLimits.objects.get(user_id=str(self.user.pk))
        self.assertEqual(limits.kyc_level, 3)
        self.assertEqual(limits.daily_limit, Decimal("100000"))

    def test_admin_reviews_document(self):
        document = KycDocument.objects.create(
            user_id=str(self.user.pk),
            document_type=DocumentTypeEnums.PASSPORT,
            document_url="https://storage.example.com/kyc/passport.jpg",
        )
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            f"/api/kyc/admin/documents/{document.id}/review", {"approve": True}, format="json"
        )

        self.assertEqual(response.status_code, 202)
        self.assertEqual(response.data["verification_status"], "verified")
        self.assertEqual(TradingLimits.objects.get(user_id=str(self.user.pk)).kyc_level, 2)

    def test_reject_requires_reason(self):
        document = KycDocument.objects.create(
            user_id=str(self.user.pk),
            document_type=DocumentTypeEnums.PASSPORT,
            document_url="https://storage.example.com/kyc/passport.jpg",
        )
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            f"/api/kyc/admin/documents/{document.id}/review", {"approve": False}, format="json"
        )

        self.assertEqual(response.status_code, 400)

    def test_trade_check_during_store_outage(self):
        self.client.force_authenticate(self.user)

        with mock.patch.object(kyc_views.trading_limit_service, "store", FailingTradingLimitStore()):
            response = self.client.post("/api/kyc/trading_limits/check", {"amount": "100.00"}, format="json")

        self.assertEqual(response.status_code, 503)
        self.assertFalse(TradingLimits.objects.exists())

    def test_trading_limits_during_store_outage(self):
        self.client.force_authenticate(self.user)

        with mock.patch.object(kyc_views.trading_limit_service, "store", FailingTradingLimitStore()):
            response = self.client.get("/api/kyc/trading_limits")

        self.assertEqual(response.status_code, 503)

    def test_status_during_store_outage(self):
        self.client.force_authenticate(self.user)

        with mock.patch.object(kyc_views.kyc_profile_service, "store", FailingKycProfileStore()):
            response = self.client.get("/api/kyc/status")

        self.assertEqual(response.status_code, 503)
