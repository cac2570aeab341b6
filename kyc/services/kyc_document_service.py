import logging
from typing import Optional
from django.db import DatabaseError, transaction
from django.utils import timezone
from kyc.core.exceptions.kyc_exceptions import DocumentAlreadyReviewedException, DocumentNotFoundException
from kyc.core.stores import KycDocumentStore
from kyc.enums import ADDRESS_DOCUMENT_TYPES, IDENTITY_DOCUMENT_TYPES, VerificationCheckEnums, VerificationStatusEnums
from kyc.models import KycDocument
from kyc.services.kyc_profile_service import KycProfileService

logger = logging.getLogger(__name__)


class KycDocumentService:

    def __init__(self, store: Optional[KycDocumentStore] = None, profile_service: Optional[KycProfileService] = None):
        self.store = store or KycDocumentStore()
        self.profile_service = profile_service or KycProfileService(document_store=self.store)

    def upload_kyc_document(self, document: dict) -> Optional[KycDocument]:
        """Persist an uploaded document; ``id`` and ``created_at`` are assigned by the store."""
        fields = {key: value for key, value in document.items() if key not in ('id', 'created_at')}
        try:
            created = self.store.insert(**fields)
        except DatabaseError as e:
            logger.error(f"KYC document upload failed for user {fields.get('user_id')}: {str(e)}")
            return None
        logger.info(f"KYC document {created.id} ({created.document_type}) uploaded for user {created.user_id}")
        return created

    def get_user_kyc_documents(self, user_id: str) -> list[KycDocument]:
        try:
            return self.store.list_for_user(user_id)
        except DatabaseError as e:
            logger.error(f"KYC documents lookup failed for user {user_id}: {str(e)}")
            return []

    def review_document(self, document_id, reviewer, approve: bool, reason: str = "") -> KycDocument:
        with transaction.atomic():
            try:
                document = self.store.get_for_update(document_id)
            except KycDocument.DoesNotExist:
                raise DocumentNotFoundException("KYC document not found")
            if document.verification_status != VerificationStatusEnums.PENDING:
                raise DocumentAlreadyReviewedException("KYC document has already been reviewed")

            document.reviewed_by = reviewer
            if approve:
                document.verification_status = VerificationStatusEnums.VERIFIED
                document.verified_at = timezone.now()
            else:
                document.verification_status = VerificationStatusEnums.REJECTED
                document.rejection_reason = reason
            self.store.save(
                document,
                update_fields=['verification_status', 'verified_at', 'rejection_reason', 'reviewed_by', 'updated_at'],
            )

        logger.info(f"KYC document {document.id} {document.verification_status} by reviewer {reviewer.id}")
        if approve:
            if document.document_type in IDENTITY_DOCUMENT_TYPES:
                self.profile_service.mark_verified(document.user_id, VerificationCheckEnums.IDENTITY)
            elif document.document_type in ADDRESS_DOCUMENT_TYPES:
                self.profile_service.mark_verified(document.user_id, VerificationCheckEnums.ADDRESS)
        return document
