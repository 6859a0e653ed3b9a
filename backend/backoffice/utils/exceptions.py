"""
Custom exception classes
"""
from typing import Any, Dict, List, Optional

from fastapi import HTTPException


class StoreError(Exception):
    """Raised when the backing store rejects or fails an operation"""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EntityNotFoundError(HTTPException):
    """Raised when a record doesn't exist"""
    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            status_code=404,
            detail=f"{entity} {entity_id} not found"
        )


class ValidationFailedError(HTTPException):
    """Raised when input passes schema validation but breaks a domain rule"""
    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        detail: Any = message
        if errors:
            detail = {"message": message, "errors": errors}
        super().__init__(status_code=422, detail=detail)


class OverpaymentError(ValidationFailedError):
    """Raised when a payment would exceed the billed amount"""
    def __init__(self, billed: float, paid: float):
        super().__init__(
            f"Paid amount {paid:.2f} exceeds billed amount {billed:.2f}"
        )


class ConflictError(HTTPException):
    """Raised when a write clashes with existing data"""
    def __init__(self, message: str):
        super().__init__(status_code=409, detail=message)


class ReferentialConflictError(HTTPException):
    """Raised when deleting a record that other records still reference"""
    def __init__(self, entity: str, entity_id: str, referenced_by: str, ids: List[str]):
        super().__init__(
            status_code=409,
            detail={
                "message": (
                    f"{entity} {entity_id} is referenced by {len(ids)} {referenced_by}. "
                    f"Confirm unassignment to delete it."
                ),
                "referenced_by": referenced_by,
                "ids": ids,
            }
        )
        self.ids = ids


class PartialOperationError(HTTPException):
    """Raised when a multi-step write stops half way"""
    def __init__(self, operation: str, completed: List[str], failed: str, reason: str):
        super().__init__(
            status_code=500,
            detail={
                "message": f"{operation}: step '{failed}' failed after {', '.join(completed) or 'no steps'} succeeded",
                "completed_steps": completed,
                "failed_step": failed,
                "reason": reason,
            }
        )
        self.completed = completed
        self.failed = failed


class UploadFailedError(HTTPException):
    """Raised when a document upload is rejected or fails"""
    def __init__(self, reason: str = "Unknown error", status_code: int = 400):
        super().__init__(
            status_code=status_code,
            detail=f"Upload failed: {reason}"
        )


class DocumentStoreError(HTTPException):
    """Raised when the document store cannot complete an operation"""
    def __init__(self, reason: str = "Document store unavailable"):
        super().__init__(
            status_code=502,
            detail=f"Document store error: {reason}"
        )


class NotificationError(HTTPException):
    """Raised when the email provider fails"""
    def __init__(self, reason: str = "Email provider unavailable"):
        super().__init__(
            status_code=502,
            detail=f"Email delivery failed: {reason}"
        )
