# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""authgate: session-based authentication gateway.

Signup, login and logout over a SQLAlchemy user table, with a signed
session cookie resolving to a server-side session record.
"""

__version__ = "0.1.0"
