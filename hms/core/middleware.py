"""
HTTP middleware for request-scoped tenant context.
"""

import logging
import time
from typing import Any, Awaitable, Callable

from fastapi import Request

from hms.config import settings
from hms.core.tenancy import current_tenant_id, is_admin_tenant, is_valid_tenant_id

logger = logging.getLogger(__name__)


async def tenant_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
):
    """
    Bind the tenant header to the request context (non-enforcing).

    - Reads the tenant header and, when it is a usable identifier, stores it
      on ``request.state.tenant_id`` and in ``current_tenant_id`` for logging
    - Never rejects the request; enforcement lives in the dependencies
      (``RequiredTenant`` and ``TenantDBSession``)
    """
    raw = request.headers.get(settings.tenant_header)
    tenant_id = raw.strip().lower() if raw else None

    if tenant_id and not (is_valid_tenant_id(tenant_id) or is_admin_tenant(tenant_id)):
        tenant_id = None

    request.state.tenant_id = tenant_id
    token = current_tenant_id.set(tenant_id)
    started = time.perf_counter()

    try:
        response = await call_next(request)
    finally:
        current_tenant_id.reset(token)

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s tenant=%s status=%s %.1fms",
        request.method,
        request.url.path,
        tenant_id or "-",
        response.status_code,
        elapsed_ms,
    )
    return response


def get_request_tenant_id(request: Request) -> str | None:
    """Tenant identifier bound by the middleware, if any."""
    return getattr(request.state, "tenant_id", None)
