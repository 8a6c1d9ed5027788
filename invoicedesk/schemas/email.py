"""Mail relay payloads."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EmailAttachment(BaseModel):
    filename: str
    # Base64-encoded body
    content: str
    content_type: str = Field(default="application/octet-stream", alias="contentType")

    model_config = ConfigDict(populate_by_name=True)


class EmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_address: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    cc: Optional[str] = None
    bcc: Optional[str] = None
    subject: Optional[str] = None
    text: Optional[str] = None
    attachments: List[EmailAttachment] = []
    business_name: Optional[str] = Field(default=None, alias="businessName")


class EmailResponse(BaseModel):
    success: bool
    message: str
