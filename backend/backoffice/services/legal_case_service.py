"""
Legal cases, their hearings and hearing documents.

Documents are removed from the document store before the records pointing
at them, so a failed removal never leaves a blob without an owner.
"""
from __future__ import annotations

import os
from datetime import date, datetime
from typing import Callable, List, Optional

from backoffice.core.config import settings
from backoffice.core.logger import logger
from backoffice.db.schemas import (
    DocumentUploadResponse,
    HearingDetailResponse,
    HearingResponse,
    LegalCaseCreate,
    LegalCaseDetailResponse,
    LegalCaseResponse,
    LegalCaseUpdate,
)
from backoffice.services.document_store import DocumentBackendError, DocumentStore
from backoffice.store.base import Store, StoreError
from backoffice.utils.exceptions import (
    DocumentStoreError,
    PartialOperationError,
    UploadFailedError,
)
from backoffice.utils.helpers import epoch_millis, sanitize_filename, utcnow


class LegalCaseService:
    def __init__(
        self,
        store: Store,
        documents: DocumentStore,
        today: Callable[[], date] = date.today,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.documents = documents
        self.today = today
        self.clock = clock

    # ------------------------------------------------------------------
    # Cases
    # ------------------------------------------------------------------

    def list_cases(self) -> List[LegalCaseDetailResponse]:
        try:
            cases = self.store.legal_cases.list()
            hearings = self.store.hearings.list()
        except StoreError as e:
            logger.error(f"Failed to list legal cases: {e.message}")
            return []

        by_case = {}
        for hearing in hearings:
            by_case.setdefault(hearing.legal_case_id, []).append(hearing)

        cases.sort(key=lambda c: c.created_at, reverse=True)
        return [self._detail(case, by_case.get(case.id, [])) for case in cases]

    def get_case(self, case_id: str) -> Optional[LegalCaseDetailResponse]:
        case = self.store.legal_cases.get(case_id)
        if case is None:
            return None
        return self._detail(case, self.store.hearings.list({"legal_case_id": case_id}))

    def create_case(self, data: LegalCaseCreate) -> LegalCaseDetailResponse:
        case = self.store.legal_cases.create(data.model_dump())
        logger.info(f"Legal case created: {case.case_number}")
        return self._detail(case, [])

    def update_case(self, case_id: str, data: LegalCaseUpdate) -> Optional[LegalCaseDetailResponse]:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("case_number", "") is None:
            changes.pop("case_number")
        case = self.store.legal_cases.update(case_id, changes)
        if case is None:
            return None
        return self._detail(case, self.store.hearings.list({"legal_case_id": case_id}))

    def delete_case(self, case_id: str) -> bool:
        if self.store.legal_cases.get(case_id) is None:
            return False

        for hearing in self.store.hearings.list({"legal_case_id": case_id}):
            if hearing.pdf_path:
                self._remove_document(hearing.pdf_path)
                self.store.hearings.update(hearing.id, {"pdf_path": None})

        deleted = self.store.legal_cases.delete(case_id)
        if deleted:
            logger.info(f"Legal case deleted: {case_id}")
        return deleted

    # ------------------------------------------------------------------
    # Hearings
    # ------------------------------------------------------------------

    def add_hearing(self, case_id: str, hearing_date: date) -> Optional[HearingDetailResponse]:
        if self.store.legal_cases.get(case_id) is None:
            return None
        hearing = self.store.hearings.create({
            "legal_case_id": case_id,
            "hearing_date": hearing_date,
            "pdf_path": None,
        })
        logger.info(f"Hearing {hearing.id} added to case {case_id} on {hearing_date}")
        return self._hearing_detail(hearing)

    def delete_hearing(self, hearing_id: str) -> bool:
        hearing = self.store.hearings.get(hearing_id)
        if hearing is None:
            return False
        if hearing.pdf_path:
            self._remove_document(hearing.pdf_path)
        deleted = self.store.hearings.delete(hearing_id)
        if deleted:
            logger.info(f"Hearing deleted: {hearing_id}")
        return deleted

    def attach_document(
        self,
        hearing_id: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> Optional[DocumentUploadResponse]:
        hearing = self.store.hearings.get(hearing_id)
        if hearing is None:
            return None

        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in settings.ALLOWED_EXTENSIONS:
            raise UploadFailedError(
                f"File type {ext or '(none)'} not allowed. Allowed: {', '.join(settings.ALLOWED_EXTENSIONS)}"
            )
        if not content:
            raise UploadFailedError("File is empty")
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise UploadFailedError(
                f"File too large. Maximum size: {settings.MAX_UPLOAD_SIZE / 1024 / 1024:.0f}MB",
                status_code=413,
            )

        path = f"hearings/{epoch_millis(self.clock())}_{sanitize_filename(filename)}"
        try:
            self.documents.upload(path, content, content_type or "application/pdf")
        except DocumentBackendError as e:
            raise DocumentStoreError(str(e)) from e

        try:
            updated = self.store.hearings.update(hearing_id, {"pdf_path": path})
        except StoreError as e:
            self._undo_upload(path, e.message)
            raise

        if updated is None:
            self._undo_upload(path, "hearing no longer exists")
            return None

        orphaned = None
        if hearing.pdf_path and hearing.pdf_path != path:
            try:
                self.documents.remove(hearing.pdf_path)
            except DocumentBackendError as e:
                orphaned = hearing.pdf_path
                logger.error(f"Superseded document {orphaned} could not be removed: {str(e)}")

        logger.info(f"Document attached to hearing {hearing_id}: {path}")
        return DocumentUploadResponse(
            success=True,
            hearing_id=hearing_id,
            pdf_path=path,
            pdf_url=self._public_url(path) or "",
            orphaned_document=orphaned,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _remove_document(self, path: str) -> None:
        try:
            self.documents.remove(path)
        except DocumentBackendError as e:
            raise DocumentStoreError(f"could not remove {path}: {str(e)}") from e

    def _undo_upload(self, path: str, reason: str) -> None:
        logger.warning(f"Saving document path {path} failed ({reason}); removing upload")
        try:
            self.documents.remove(path)
        except DocumentBackendError as e:
            raise PartialOperationError(
                "Attach document",
                ["upload document"],
                "save document path",
                f"{reason}; document {path} is orphaned: {str(e)}",
            ) from e

    def _public_url(self, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        try:
            return self.documents.get_public_url(path)
        except DocumentBackendError as e:
            logger.warning(f"No public URL for {path}: {str(e)}")
            return None

    def _hearing_detail(self, hearing: HearingResponse) -> HearingDetailResponse:
        return HearingDetailResponse(**hearing.model_dump(), pdf_url=self._public_url(hearing.pdf_path))

    def _detail(self, case: LegalCaseResponse, hearings: List[HearingResponse]) -> LegalCaseDetailResponse:
        today = self.today()
        ordered = [self._hearing_detail(h) for h in sorted(hearings, key=lambda h: h.hearing_date)]
        return LegalCaseDetailResponse(
            **case.model_dump(),
            hearings=ordered,
            upcoming_hearings=[h for h in ordered if h.hearing_date >= today],
            past_hearings=[h for h in ordered if h.hearing_date < today],
        )
