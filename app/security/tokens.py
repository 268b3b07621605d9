"""
Quai Antique API — API Token Issuance
=======================================

What:  Generates the long-lived bearer token attached to each user account.
How:   `secrets.token_hex` (OS CSPRNG). With the default 20 random bytes the
       token is a 40-character lowercase hex string, e.g.
       31a023e212f116124a36af14ea0c1c3806eb9378.
When:  Exactly once per user, from the User constructor, before the first
       INSERT. Tokens are never reissued; the users.api_token column is UNIQUE.
"""

import secrets
from typing import Optional

from app.config import settings


def issue_api_token(nbytes: Optional[int] = None) -> str:
    """Return a new random hex token of `2 * nbytes` characters."""
    return secrets.token_hex(nbytes or settings.api_token_bytes)
