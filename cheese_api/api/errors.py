"""Exception handlers producing a single validation error shape."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cheese_api.exceptions import ValidationFailed, Violation, violation_from_error


def violations_response(violations: list[Violation]) -> JSONResponse:
    """Render violations as a 422 response listing every failing field."""
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder(
            {
                "title": "An error occurred",
                "detail": "\n".join(f"{v.property_path}: {v.message}" for v in violations),
                "violations": [
                    {"propertyPath": v.property_path, "message": v.message} for v in violations
                ],
            }
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return violations_response([violation_from_error(error) for error in exc.errors()])

    @app.exception_handler(ValidationFailed)
    async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
        return violations_response(exc.violations)
