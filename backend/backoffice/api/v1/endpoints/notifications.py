"""
Notification endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status

from backoffice.api.v1.deps import get_email_service
from backoffice.core.logger import logger
from backoffice.db.schemas import SendEmailRequest
from backoffice.services.email_service import EmailDeliveryError, EmailService
from backoffice.utils.exceptions import NotificationError

router = APIRouter()


@router.post("/send-email")
def send_completion_email(
    data: SendEmailRequest,
    emails: EmailService = Depends(get_email_service),
):
    """
    Send the "work completed" email to a customer.

    Body: {"customerEmail": "...", "natureOfWork": "..."}
    """
    if not isinstance(data.customerEmail, str) or not data.customerEmail.strip():
        logger.warning("send-email called without a valid customerEmail")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing or invalid 'customerEmail'"
        )

    nature_of_work = data.natureOfWork if isinstance(data.natureOfWork, str) else None
    try:
        emails.send_completion_notice(data.customerEmail, nature_of_work)
    except EmailDeliveryError as e:
        logger.error(f"Completion email to {data.customerEmail} failed: {str(e)}")
        raise NotificationError(str(e)) from e

    return {"status": "success", "message": "Email sent successfully."}
