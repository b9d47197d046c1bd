# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2)
- The email/password authentication strategy and its outcome types
- Server-side sessions referenced by signed cookies (itsdangerous)
"""
