from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError

class KycServiceException(ValidationError):
    """Raised when a KYC operation cannot be completed"""
    pass

class KycStoreUnavailableException(APIException):
    """Raised when the KYC or trading-limit tables cannot be read"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable, try again later"
    default_code = "service_unavailable"

class TradingLimitExceededException(ValidationError):
    """Raised when a trade would push the user past a daily or monthly limit"""
    pass

class TradingLimitLockException(ValidationError):
    """Raised when the per-user trading limit lock cannot be acquired"""
    pass

class DocumentNotFoundException(ValidationError):
    """Raised when a KYC document does not exist"""
    pass

class DocumentAlreadyReviewedException(ValidationError):
    """Raised when a KYC document has already been verified or rejected"""
    pass
