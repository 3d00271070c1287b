"""
Routes for the ledger gateway.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import PlainTextResponse

from ledgergate.common.exceptions import GatewayError, LedgerError
from ledgergate.common.models import Credentials, TransactionRequest
from ledgergate.server.session_resolver import RequestContext

from .services import GatewayService


def resolve_context(
    request: Request, x_user: str | None = Header(default=None)
) -> RequestContext:
    """Dependency attaching the caller's contract handle to the request."""
    return request.app.state.resolver.resolve(x_user)


async def gateway_error_handler(request: Request, exc: GatewayError) -> PlainTextResponse:
    text = exc.detail_text() if isinstance(exc, LedgerError) else str(exc)
    return PlainTextResponse(text, status_code=exc.status_code)


def _text(payload: bytes) -> PlainTextResponse:
    return PlainTextResponse(payload.decode(errors="replace"))


class GatewayRoutes:
    """Handles FastAPI routes for the gateway."""

    def __init__(self, service: GatewayService):
        self.service = service

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""
        app.add_exception_handler(GatewayError, gateway_error_handler)

        app.get("/health")(self.health)
        app.post("/init", response_class=PlainTextResponse)(self.init)
        app.post("/signup", response_class=PlainTextResponse)(self.signup)
        app.post("/login", response_class=PlainTextResponse)(self.login)
        app.get("/ping", response_class=PlainTextResponse)(self.ping)
        app.post("/evaluate", response_class=PlainTextResponse)(self.evaluate)
        app.post("/submit", response_class=PlainTextResponse)(self.submit)

    async def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return self.service.health()

    def init(self) -> PlainTextResponse:
        """Handle /init endpoint; succeeds whatever Initialize reports."""
        self.service.initialize()
        return PlainTextResponse("Initialized")

    def signup(self, req: Credentials) -> PlainTextResponse:
        """Handle /signup endpoint."""
        self.service.signup(req)
        return PlainTextResponse("OK")

    def login(self, req: Credentials) -> PlainTextResponse:
        """Handle /login endpoint."""
        self.service.login(req)
        return PlainTextResponse("OK")

    def ping(self, ctx: RequestContext = Depends(resolve_context)) -> PlainTextResponse:
        """Handle /ping endpoint."""
        return _text(self.service.ping(ctx))

    def evaluate(
        self,
        req: TransactionRequest,
        ctx: RequestContext = Depends(resolve_context),
    ) -> PlainTextResponse:
        """Handle /evaluate endpoint."""
        return _text(self.service.evaluate(ctx, req))

    def submit(
        self,
        req: TransactionRequest,
        ctx: RequestContext = Depends(resolve_context),
    ) -> PlainTextResponse:
        """Handle /submit endpoint."""
        return _text(self.service.submit(ctx, req))
