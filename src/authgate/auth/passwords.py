# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from argon2 import DEFAULT_MEMORY_COST, DEFAULT_PARALLELISM, DEFAULT_TIME_COST, PasswordHasher
from argon2.exceptions import VerifyMismatchError


def make_hasher(
    time_cost: int = DEFAULT_TIME_COST,
    memory_cost: int = DEFAULT_MEMORY_COST,
    parallelism: int = DEFAULT_PARALLELISM,
) -> PasswordHasher:
    return PasswordHasher(time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism)


_PH = make_hasher()


def hash_password(plain: str, hasher: PasswordHasher = _PH) -> str:
    if not plain:
        raise ValueError("Empty password")
    return hasher.hash(plain)


def verify_password(hash_value: str, plain: str, hasher: PasswordHasher = _PH) -> bool:
    # A malformed hash_value raises InvalidHashError; only a mismatch is False.
    if not hash_value or not plain:
        return False
    try:
        return hasher.verify(hash_value, plain)
    except VerifyMismatchError:
        return False
