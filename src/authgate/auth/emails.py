# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import email_validator

from authgate.errors import ValidationError


def normalize_email(value: str) -> str:
    """Return the normalised address or raise ValidationError.

    Signup stores this form and login looks it up by the same form.
    Display-name input ("Eve <a@b.com>") is not an address and is rejected.
    """
    v = (value or "").strip()
    if not v:
        raise ValidationError("Email is required.")
    try:
        return email_validator.validate_email(v, check_deliverability=False).normalized
    except email_validator.EmailNotValidError as exc:
        raise ValidationError("Email is not a valid address.") from exc
