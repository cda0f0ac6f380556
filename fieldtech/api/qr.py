"""Customer review QR code. Public, no session required."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter

from fieldtech.dependencies import SettingsDep
from fieldtech.schemas import ApiResponse, ReviewQRCode
from fieldtech.services.qr import qr_data_url

router = APIRouter(prefix="/api/qr", tags=["qr"])


@router.get("/google-review", response_model=ApiResponse[ReviewQRCode])
async def google_review_qr(settings: SettingsDep):
    url = settings.review.google_review_url
    qr_code = await asyncio.to_thread(qr_data_url, url)
    return ApiResponse[ReviewQRCode](
        data=ReviewQRCode(qr_code=qr_code, review_url=url, message=settings.review.message),
    )
