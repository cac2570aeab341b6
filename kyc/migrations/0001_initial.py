import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import kyc.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TradingLimits",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created_at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated_at")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.CharField(db_index=True, max_length=64, unique=True, verbose_name="user_id")),
                ("kyc_level", models.IntegerField(choices=[(0, "Unverified"), (1, "Basic"), (2, "Enhanced"), (3, "Premium")], default=0, verbose_name="kyc_level")),
                ("daily_limit", models.DecimalField(decimal_places=2, default=Decimal("1000.00"), max_digits=15)),
                ("monthly_limit", models.DecimalField(decimal_places=2, default=Decimal("10000.00"), max_digits=15)),
                ("current_daily_volume", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("current_monthly_volume", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("daily_window_start", models.DateField(default=django.utils.timezone.localdate)),
                ("monthly_window_start", models.DateField(default=kyc.models.current_month_start)),
            ],
            options={
                "verbose_name": "trading_limits",
                "verbose_name_plural": "trading_limits",
                "db_table": "trading_limits",
            },
        ),
        migrations.CreateModel(
            name="KycDocument",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created_at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated_at")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.CharField(db_index=True, max_length=64, verbose_name="user_id")),
                ("document_type", models.CharField(choices=[("passport", "Passport"), ("driver_license", "DriverLicense"), ("national_id", "NationalId"), ("utility_bill", "UtilityBill"), ("bank_statement", "BankStatement")], max_length=32, verbose_name="document_type")),
                ("document_url", models.CharField(max_length=500, verbose_name="document_url")),
                ("verification_status", models.CharField(choices=[("pending", "Pending"), ("verified", "Verified"), ("rejected", "Rejected")], default="pending", max_length=16, verbose_name="verification_status")),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True)),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviewed_kyc_documents", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "kyc_document",
                "verbose_name_plural": "kyc_documents",
                "db_table": "kyc_documents",
            },
        ),
        migrations.CreateModel(
            name="KycProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created_at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated_at")),
                ("user_id", models.CharField(db_index=True, max_length=64, unique=True, verbose_name="user_id")),
                ("email_verified", models.BooleanField(default=False)),
                ("phone_verified", models.BooleanField(default=False)),
                ("identity_verified", models.BooleanField(default=False)),
                ("address_verified", models.BooleanField(default=False)),
                ("biometric_verified", models.BooleanField(default=False)),
            ],
            options={
                "verbose_name": "kyc",
                "verbose_name_plural": "kyces",
            },
        ),
    ]
