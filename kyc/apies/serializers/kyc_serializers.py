from decimal import Decimal
from rest_framework import serializers
from kyc.enums import DocumentTypeEnums, KycLevelEnums
from kyc.models import KycDocument, TradingLimits


class TradingLimitsSerializer(serializers.ModelSerializer):
    class Meta:
        model = TradingLimits
        fields = (
            "id",
            "user_id",
            "kyc_level",
            "daily_limit",
            "monthly_limit",
            "current_daily_volume",
            "current_monthly_volume",
            "updated_at",
        )


class KycDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = KycDocument
        fields = (
            "id",
            "user_id",
            "document_type",
            "document_url",
            "verification_status",
            "verified_at",
            "rejection_reason",
            "created_at",
        )


class UploadKycDocumentSerializer(serializers.Serializer):
    document_type = serializers.ChoiceField(choices=DocumentTypeEnums.choices)
    document_url = serializers.CharField(max_length=500)


class TradeCheckSerializer(serializers.Serializer):
    amount = serializers.DecimalField(min_value=Decimal("0.01"), max_digits=15, decimal_places=2)


class TradeLimitCheckSerializer(serializers.Serializer):
    allowed = serializers.BooleanField()
    remaining_daily = serializers.DecimalField(max_digits=15, decimal_places=2)
    remaining_monthly = serializers.DecimalField(max_digits=15, decimal_places=2)
    reason = serializers.CharField(allow_blank=True)


class KycStatusSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    level = serializers.IntegerField()
    status = serializers.CharField()
    verifications = serializers.DictField(child=serializers.BooleanField())
    documents = KycDocumentSerializer(many=True)
    limitations = serializers.DictField()
    next_steps = serializers.ListField(child=serializers.CharField())


class UpdateKycLevelSerializer(serializers.Serializer):
    phone_number = serializers.CharField(max_length=11, min_length=11)
    kyc_level = serializers.ChoiceField(choices=KycLevelEnums.choices)
    reason = serializers.CharField(max_length=500)


class ReviewKycDocumentSerializer(serializers.Serializer):
    approve = serializers.BooleanField()
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs["approve"] and not attrs["reason"]:
            raise serializers.ValidationError({"reason": "A reason is required when rejecting a document"})
        return attrs
