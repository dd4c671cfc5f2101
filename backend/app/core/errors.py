from __future__ import annotations

from enum import Enum

from fastapi import status

# Starlette deprecates its names for these two codes; the new names are not in every
# supported release.
HTTP_413_CONTENT_TOO_LARGE = 413
HTTP_422_UNPROCESSABLE = 422


class ErrorCode(str, Enum):
    """Application error catalogue.

    Each member carries the public code, the owning domain, the HTTP status
    used when it is raised from a route and a short English message.
    """

    def __new__(cls, code: str, domain: str, http_status: int, message: str) -> "ErrorCode":
        obj = str.__new__(cls, code)
        obj._value_ = code
        obj.domain = domain
        obj.http_status = http_status
        obj.message = message
        return obj

    @property
    def label(self) -> str:
        return self.name

    # Common
    COMMON_VALIDATION_ERROR = ("E00001", "COMMON", HTTP_422_UNPROCESSABLE, "Request validation failed")
    COMMON_UNAUTHENTICATED = ("E00002", "COMMON", status.HTTP_401_UNAUTHORIZED, "Authentication required")
    COMMON_PERMISSION_DENIED = ("E00003", "COMMON", status.HTTP_403_FORBIDDEN, "Permission denied")
    COMMON_RESOURCE_NOT_FOUND = ("E00004", "COMMON", status.HTTP_404_NOT_FOUND, "Resource not found")
    COMMON_UNEXPECTED_ERROR = ("E00999", "COMMON", status.HTTP_500_INTERNAL_SERVER_ERROR, "Unexpected error")

    # Admin auth
    ADMIN_AUTH_ADMIN_TOKEN_INVALID = ("E02001", "ADMIN_AUTH", status.HTTP_401_UNAUTHORIZED, "Admin token is invalid")
    ADMIN_AUTH_ADMIN_TOKEN_SCOPE_INVALID = (
        "E02002",
        "ADMIN_AUTH",
        status.HTTP_403_FORBIDDEN,
        "Admin token does not grant access",
    )
    ADMIN_AUTH_ADMIN_NOT_FOUND_OR_INACTIVE = (
        "E02003",
        "ADMIN_AUTH",
        status.HTTP_401_UNAUTHORIZED,
        "Admin user not found or inactive",
    )

    # Questionnaire import
    QUESTIONNAIRES_IMPORT_FILE_MISSING = ("E03001", "QUESTIONNAIRES", status.HTTP_400_BAD_REQUEST, "No file provided")
    QUESTIONNAIRES_IMPORT_UNSUPPORTED_TYPE = (
        "E03002",
        "QUESTIONNAIRES",
        status.HTTP_400_BAD_REQUEST,
        "Unsupported file type",
    )
    QUESTIONNAIRES_IMPORT_FILE_TOO_LARGE = (
        "E03003",
        "QUESTIONNAIRES",
        HTTP_413_CONTENT_TOO_LARGE,
        "File too large",
    )
    QUESTIONNAIRES_IMPORT_NAME_INVALID = (
        "E03004",
        "QUESTIONNAIRES",
        status.HTTP_400_BAD_REQUEST,
        "Questionnaire name is invalid",
    )
    QUESTIONNAIRES_IMPORT_PARSE_FAILED = ("E03005", "QUESTIONNAIRES", status.HTTP_400_BAD_REQUEST, "Failed to parse CSV")
    QUESTIONNAIRES_IMPORT_HEADERS_MISSING = (
        "E03006",
        "QUESTIONNAIRES",
        status.HTTP_400_BAD_REQUEST,
        "Missing required headers",
    )
    QUESTIONNAIRES_IMPORT_VALIDATION = (
        "E03007",
        "QUESTIONNAIRES",
        HTTP_422_UNPROCESSABLE,
        "CSV validation failed",
    )
    QUESTIONNAIRES_IMPORT_PERSIST_FAILED = (
        "E03008",
        "QUESTIONNAIRES",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Failed to save the imported questionnaire",
    )


__all__ = ["ErrorCode"]
