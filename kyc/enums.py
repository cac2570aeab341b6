from django.db import models
from django.utils.translation import gettext_lazy as _

class KycLevelEnums(models.IntegerChoices):
    UNVERIFIED = 0, _("Unverified")
    BASIC = 1, _("Basic")
    ENHANCED = 2, _("Enhanced")
    PREMIUM = 3, _("Premium")

class KycStatusEnums(models.TextChoices):
    NOT_STARTED = "not_started", _("NotStarted")
    BASIC_COMPLETED = "basic_completed", _("BasicCompleted")
    ENHANCED_COMPLETED = "enhanced_completed", _("EnhancedCompleted")
    PREMIUM_COMPLETED = "premium_completed", _("PremiumCompleted")

class DocumentTypeEnums(models.TextChoices):
    PASSPORT = "passport", _("Passport")
    DRIVER_LICENSE = "driver_license", _("DriverLicense")
    NATIONAL_ID = "national_id", _("NationalId")
    UTILITY_BILL = "utility_bill", _("UtilityBill")
    BANK_STATEMENT = "bank_statement", _("BankStatement")

class VerificationStatusEnums(models.TextChoices):
    PENDING = "pending", _("Pending")
    VERIFIED = "verified", _("Verified")
    REJECTED = "rejected", _("Rejected")

class VerificationCheckEnums(models.TextChoices):
    EMAIL = "email_verified", _("Email")
    PHONE = "phone_verified", _("Phone")
    IDENTITY = "identity_verified", _("Identity")
    ADDRESS = "address_verified", _("Address")
    BIOMETRIC = "biometric_verified", _("Biometric")

class LimitUpdateOutcomeEnums(models.TextChoices):
    SUCCESS = "success", _("Success")
    STORE_ERROR = "store_error", _("StoreError")
    VALIDATION_ERROR = "validation_error", _("ValidationError")


IDENTITY_DOCUMENT_TYPES = frozenset({
    DocumentTypeEnums.PASSPORT,
    DocumentTypeEnums.DRIVER_LICENSE,
    DocumentTypeEnums.NATIONAL_ID,
})
ADDRESS_DOCUMENT_TYPES = frozenset({
    DocumentTypeEnums.UTILITY_BILL,
    DocumentTypeEnums.BANK_STATEMENT,
})
