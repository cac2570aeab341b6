import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from drf_spectacular.utils import extend_schema
from user.services.user_service import UserService
from kyc.apies.serializers.kyc_serializers import (
    KycDocumentSerializer,
    KycStatusSerializer,
    ReviewKycDocumentSerializer,
    TradeCheckSerializer,
    TradeLimitCheckSerializer,
    TradingLimitsSerializer,
    UpdateKycLevelSerializer,
    UploadKycDocumentSerializer,
)
from kyc.enums import VerificationStatusEnums
from kyc.services.kyc_document_service import KycDocumentService
from kyc.services.kyc_profile_service import KycProfileService
from kyc.services.trading_limit_service import TradingLimitService

logger = logging.getLogger(__name__)

user_service = UserService()
trading_limit_service = TradingLimitService()
kyc_profile_service = KycProfileService(trading_limit_service=trading_limit_service)
kyc_document_service = KycDocumentService(profile_service=kyc_profile_service)

UNAVAILABLE = {"msg": "Service temporarily unavailable, try again later"}


def ensure_admin(user):
    if not user.is_kyc_admin:
        raise PermissionDenied()


class KycStatusView(APIView):
    @extend_schema(responses=KycStatusSerializer)
    def get(self, request, *args, **kwargs):
        summary = kyc_profile_service.get_kyc_status(request.user.kyc_user_id)
        return Response(status=status.HTTP_200_OK, data=KycStatusSerializer(summary).data)


class TradingLimitsView(APIView):
    @extend_schema(responses=TradingLimitsSerializer)
    def get(self, request, *args, **kwargs):
        limits = trading_limit_service.get_user_trading_limits(request.user.kyc_user_id)
        if limits is None:
            return Response(status=status.HTTP_503_SERVICE_UNAVAILABLE, data=UNAVAILABLE)
        return Response(status=status.HTTP_200_OK, data=TradingLimitsSerializer(limits).data)


class TradeCheckView(APIView):
    @extend_schema(
        request=TradeCheckSerializer,
        responses=TradeLimitCheckSerializer
    )
    def post(self, request, *args, **kwargs):
        serializer = TradeCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = trading_limit_service.check_trade_allowed(
            request.user.kyc_user_id,
            serializer.validated_data['amount']
        )
        return Response(status=status.HTTP_200_OK, data=TradeLimitCheckSerializer(result).data)


class KycDocumentsView(APIView):
    @extend_schema(responses=KycDocumentSerializer(many=True))
    def get(self, request, *args, **kwargs):
        documents = kyc_document_service.get_user_kyc_documents(request.user.kyc_user_id)
        return Response(status=status.HTTP_200_OK, data=KycDocumentSerializer(documents, many=True).data)

    @extend_schema(
        request=UploadKycDocumentSerializer,
        responses=KycDocumentSerializer
    )
    def post(self, request, *args, **kwargs):
        serializer = UploadKycDocumentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        document = kyc_document_service.upload_kyc_document({
            'user_id': request.user.kyc_user_id,
            'verification_status': VerificationStatusEnums.PENDING,
            **serializer.validated_data,
        })
        if document is None:
            return Response(status=status.HTTP_503_SERVICE_UNAVAILABLE, data=UNAVAILABLE)
        return Response(status=status.HTTP_201_CREATED, data=KycDocumentSerializer(document).data)


class UpdateKycLevel(APIView):
    @extend_schema(
        request=UpdateKycLevelSerializer,
        responses=None
    )
    def post(self, request, *args, **kwargs):
        ensure_admin(request.user)
        serializer = UpdateKycLevelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        target_user = user_service.get_user_by_phone(data['phone_number'])
        if not trading_limit_service.update_trading_limits(target_user.kyc_user_id, data['kyc_level']):
            return Response(status=status.HTTP_503_SERVICE_UNAVAILABLE, data=UNAVAILABLE)
        logger.info(
            f"KYC level set to {data['kyc_level']} for user {target_user.id} "
            f"by admin {request.user.id}: {data['reason']}"
        )
        return Response(status=status.HTTP_202_ACCEPTED, data={"msg": "done", "kyc_level": data['kyc_level']})


class ReviewKycDocument(APIView):
    @extend_schema(
        request=ReviewKycDocumentSerializer,
        responses=KycDocumentSerializer
    )
    def post(self, request, document_id, *args, **kwargs):
        ensure_admin(request.user)
        serializer = ReviewKycDocumentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        document = kyc_document_service.review_document(
            document_id=document_id,
            reviewer=request.user,
            approve=serializer.validated_data['approve'],
            reason=serializer.validated_data['reason'],
        )
        return Response(status=status.HTTP_202_ACCEPTED, data=KycDocumentSerializer(document).data)
