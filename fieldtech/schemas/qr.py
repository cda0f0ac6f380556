from __future__ import annotations
from pydantic import BaseModel


class ReviewQRCode(BaseModel):
    qr_code: str  # data:image/png;base64,...
    review_url: str
    message: str
