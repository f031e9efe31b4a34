"""HTTP mapping for marketplace business errors.

Protean's own exceptions (``ValidationError``, ``ObjectNotFoundError``, ...)
are mapped by ``protean.integrations.fastapi.register_exception_handlers``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError

from marketplace.errors import ConflictError, MarketplaceError


def register_marketplace_errors(app: FastAPI) -> None:
    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):  # noqa: ARG001
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict_handler(request: Request, exc: ExpectedVersionError):  # noqa: ARG001
        conflict = ConflictError(str(exc))
        return JSONResponse(status_code=conflict.status_code, content=conflict.to_dict())
