# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from pydantic import BaseModel


class Credentials(BaseModel):
    # Plain str: address validation is part of signup and yields a 400, not a 422.
    email: str = ""
    password: str = ""


class UserRead(BaseModel):
    id: int
    email: str

    model_config = {"from_attributes": True}
