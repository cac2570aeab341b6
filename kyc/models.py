import uuid
from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator
from kyc.enums import DocumentTypeEnums, KycLevelEnums, VerificationStatusEnums
from utils.base_models import BaseTimeModel


def current_month_start():
    return timezone.localdate().replace(day=1)


class TradingLimits(BaseTimeModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, unique=True, db_index=True, verbose_name=_("user_id"))
    kyc_level = models.IntegerField(verbose_name=_("kyc_level"), choices=KycLevelEnums.choices, default=KycLevelEnums.UNVERIFIED)
    daily_limit = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('1000.00'))
    monthly_limit = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('10000.00'))
    current_daily_volume = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    current_monthly_volume = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    daily_window_start = models.DateField(default=timezone.localdate)
    monthly_window_start = models.DateField(default=current_month_start)

    def __str__(self):
        return f"{self.user_id} - Level {self.kyc_level}: {self.daily_limit}/{self.monthly_limit}"

    class Meta:
        db_table = "trading_limits"
        verbose_name = "trading_limits"
        verbose_name_plural = "trading_limits"


class KycDocument(BaseTimeModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, db_index=True, verbose_name=_("user_id"))
    document_type = models.CharField(max_length=32, verbose_name=_("document_type"), choices=DocumentTypeEnums.choices)
    document_url = models.CharField(max_length=500, verbose_name=_("document_url"))
    verification_status = models.CharField(
        max_length=16,
        verbose_name=_("verification_status"),
        choices=VerificationStatusEnums.choices,
        default=VerificationStatusEnums.PENDING,
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_kyc_documents'
    )

    def __str__(self):
        return f"{self.get_document_type_display()} - {self.user_id} ({self.verification_status})"

    class Meta:
        db_table = "kyc_documents"
        verbose_name = "kyc_document"
        verbose_name_plural = "kyc_documents"


class KycProfile(BaseTimeModel):
    user_id = models.CharField(max_length=64, unique=True, db_index=True, verbose_name=_("user_id"))
    email_verified = models.BooleanField(default=False)
    phone_verified = models.BooleanField(default=False)
    identity_verified = models.BooleanField(default=False)
    address_verified = models.BooleanField(default=False)
    biometric_verified = models.BooleanField(default=False)

    class Meta:
        verbose_name = "kyc"
        verbose_name_plural = "kyces"
