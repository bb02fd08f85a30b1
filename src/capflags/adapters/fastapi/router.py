"""Capability discovery routes for FastAPI."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse

from capflags.core.exceptions import InvalidKeyError
from capflags.runtime import Runtime, get_runtime

logger = logging.getLogger(__name__)


def create_capabilities_router(
    runtime: Runtime | Callable[[], Runtime] | None = None,
    prefix: str = "/capabilities",
) -> APIRouter:
    """Create a router exposing the capability registry and flag health.

    Routes:
        ``GET {prefix}``: the capability registry for the caller's tenant
        (``X-Tenant-Id``). Unexpected failures return 500 with
        ``degraded: true`` instead of propagating.
        ``GET {prefix}/health``: flag store and remote store health;
        503 with ``degraded: true`` when either is degraded.

    Args:
        runtime: Runtime to serve from, or a callable returning one.
            Defaults to the process-wide runtime.
        prefix: Mount path of the routes.

    Returns:
        The configured APIRouter.
    """
    router = APIRouter(prefix=prefix, tags=["capabilities"])

    def current() -> Runtime:
        if runtime is None:
            return get_runtime()
        if isinstance(runtime, Runtime):
            return runtime
        return runtime()

    @router.get("")
    async def get_capabilities(
        request: Request,
        x_tenant_id: str | None = Header(default=None),
        x_request_id: str | None = Header(default=None),
    ) -> JSONResponse:
        started = time.perf_counter()
        request_id = x_request_id or f"req_{uuid.uuid4().hex[:12]}"

        try:
            registry = await current().registry.build(
                tenant_id=x_tenant_id,
                request_id=request_id,
                contract_base=str(request.base_url),
            )
        except InvalidKeyError as e:
            return JSONResponse(
                status_code=400,
                content={
                    "error": str(e),
                    "code": "INVALID_REQUEST",
                    "requestId": request_id,
                },
            )
        except Exception as e:
            logger.error(
                "Capabilities retrieval failed (request=%s, tenant=%s, latency_ms=%d): %s",
                request_id,
                x_tenant_id,
                (time.perf_counter() - started) * 1000,
                e,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "code": "INTERNAL_ERROR",
                    "degraded": True,
                    "requestId": request_id,
                },
            )

        logger.info(
            "Capabilities retrieved (request=%s, tenant=%s, latency_ms=%d, degraded=%s)",
            request_id,
            x_tenant_id,
            (time.perf_counter() - started) * 1000,
            registry.degraded,
        )
        return JSONResponse(content=registry.to_dict())

    @router.get("/health")
    async def get_health() -> JSONResponse:
        rt = current()
        flags = await rt.flag_health.check()
        remote = rt.health.status()
        degraded = flags.degraded or remote.degraded
        return JSONResponse(
            status_code=503 if degraded else 200,
            content={
                "degraded": degraded,
                "flags": flags.to_dict(),
                "remote": remote.to_dict(),
            },
        )

    return router
