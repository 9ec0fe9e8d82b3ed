"""Public contact form endpoint."""

import logging

from fastapi import APIRouter

from src.contact import repository
from src.contact.schemas import ContactRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("", summary="Send a message", description="Store a contact form submission. No session required.")
async def contact(body: ContactRequest):
    row = repository.create(body.name, body.email, body.message)
    logger.info("Contact message %s received", row["id"])
    return {"status": "success", "data": {"message": "Thank you for your message. We'll get back to you soon."}}
