"""FastAPI routes for inbound webhooks and their security log.

The raw request body is verified before it is parsed; a rejected request
gets a 401 and its payload is never handed on.
"""

import structlog
from fastapi import APIRouter, HTTPException, Request
from webhooks.api.schemas import SecurityLogListResponse, SecurityLogResponse, WebhookAcceptedResponse
from webhooks.security.platforms import WebhookPlatform, parse_platform, signature_header_name
from webhooks.security.queries import failed_verifications, recent_security_logs, security_logs_for_merchant
from webhooks.security.verifier import verify_webhook

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def _header_for(platform: str) -> str:
    try:
        return signature_header_name(parse_platform(platform))
    except ValueError:
        return signature_header_name(WebhookPlatform.GENERIC)


@router.get("/security-logs", response_model=SecurityLogListResponse)
async def get_security_logs(
    merchant_id: str | None = None,
    failed_only: bool = False,
    hours: int = 24,
    limit: int = 100,
) -> SecurityLogListResponse:
    if failed_only:
        entries = failed_verifications(hours=hours)[:limit]
    elif merchant_id:
        entries = security_logs_for_merchant(merchant_id, limit=limit)
    else:
        entries = recent_security_logs(limit=limit)

    return SecurityLogListResponse(
        logs=[
            SecurityLogResponse(
                security_log_id=str(entry.id),
                merchant_id=str(entry.merchant_id) if entry.merchant_id else None,
                platform=entry.platform,
                ip_address=entry.ip_address,
                signature_valid=entry.signature_valid,
                request_path=entry.request_path,
                request_method=entry.request_method,
                error_message=entry.error_message,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
    )


@router.post("/{platform}", response_model=WebhookAcceptedResponse)
async def receive_webhook(platform: str, request: Request) -> WebhookAcceptedResponse:
    payload = await request.body()
    merchant_id = request.headers.get("x-merchant-id") or request.query_params.get("merchant_id")

    result = verify_webhook(
        merchant_id=merchant_id,
        platform=platform,
        payload=payload,
        signature=request.headers.get(_header_for(platform)),
        ip_address=request.client.host if request.client else None,
        request_path=request.url.path,
        request_method=request.method,
    )
    if not result.valid:
        raise HTTPException(status_code=401, detail=result.error)

    logger.info("Webhook accepted", platform=platform, merchant_id=merchant_id, size=len(payload))
    return WebhookAcceptedResponse(verification_skipped=result.skipped)
