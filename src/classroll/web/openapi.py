from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

PUBLIC_ENDPOINTS = {
    ("POST", "/auth/login"),
    ("POST", "/auth/send-otp"),
    ("POST", "/auth/verify-otp"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Classroll Auth API",
            version="0.1.0",
            summary="Teacher and student sign-in with passwords or one-time passcodes",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Session token returned by login (preferred)",
            },
            "TokenCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "token",
                "description": "Session token stored in cookie",
            },
        }

        # Apply security globally, public endpoints opt out below
        openapi_schema["security"] = [
            {"BearerAuth": []},
            {"TokenCookie": []},
        ]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "authentication_error"},
                {"message": "User not found", "type": "not_found"},
                {"message": "OTP has expired", "type": "invalid_otp"},
                {"message": "Email and password are required", "type": "validation_error"},
            ]
        }
    }
