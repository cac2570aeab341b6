from django.urls import path
from kyc.apies.views.kyc_views import (
    KycDocumentsView,
    KycStatusView,
    ReviewKycDocument,
    TradeCheckView,
    TradingLimitsView,
    UpdateKycLevel,
)

urlpatterns = [
    path("status", KycStatusView.as_view(), name="kyc status"),
    path("trading_limits", TradingLimitsView.as_view(), name="trading limits"),
    path("trading_limits/check", TradeCheckView.as_view(), name="trading limits check"),
    path("documents", KycDocumentsView.as_view(), name="kyc documents"),
    path("admin/update_level", UpdateKycLevel.as_view(), name="update kyc level"),
    path("admin/documents/<uuid:document_id>/review", ReviewKycDocument.as_view(), name="review kyc document"),
]
