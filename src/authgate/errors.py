# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error kinds shared by the store, the auth services and the routes.

`authenticate` and `signup` return these as values; only the session
manager lets `StorageUnavailable` propagate, and the app maps it to 503.
"""

from __future__ import annotations


class AuthGatewayError(Exception):
    message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(AuthGatewayError):
    message = "Invalid input."


class DuplicateAccountError(AuthGatewayError):
    message = "An account with that email already exists."


class AuthenticationFailure(AuthGatewayError):
    message = "Invalid email or password."


class StorageUnavailable(AuthGatewayError):
    message = "Service temporarily unavailable."
