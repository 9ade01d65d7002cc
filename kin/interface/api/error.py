"""Map domain failures to HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from kin.domain.error import DomainError, ErrorKind
from kin.util.jwt import JWTError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def render_domain_error(error: DomainError) -> JSONResponse:
    """Render a domain error as ``{"kind", "message", **details}``."""
    return JSONResponse(
        status_code=STATUS_BY_KIND[error.kind],
        content={
            "kind": error.kind.value,
            "message": error.message,
            **error.details(),
        },
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logfire.info(
        "Domain error",
        kind=exc.kind.value,
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return render_domain_error(exc)


async def jwt_error_handler(request: Request, exc: JWTError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"kind": ErrorKind.UNAUTHORIZED.value, "message": str(exc)},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain and token error handlers on an app."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(JWTError, jwt_error_handler)
