"""
Notas API — Credential Guard
=============================

What:  Hashes new passwords, verifies login attempts, strips hashes from rows.
Why:   Keeps the hashing algorithm and work factor in one place; route and
       resource logic never touch a raw password or a stored hash directly.
How:   passlib CryptContext configured from settings (default: bcrypt with
       10 rounds). Hashing and verification run in the threadpool because
       bcrypt is deliberately slow and would otherwise stall the event loop.
Who:   The users resource (create/update) and the login service.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from notas_api.config import Settings, settings

logger = logging.getLogger(__name__)

# Column holding the password hash in the usuarios table
CREDENTIAL_FIELD = "clave"


class CredentialGuard:
    """
    Issue / Verify / Redact for user passwords.

    Swapping the algorithm only needs a different `scheme`; hashes created
    with earlier schemes keep verifying as long as the scheme stays listed
    in the context.
    """

    def __init__(self, scheme: str = "bcrypt", rounds: Optional[int] = 10):
        options: Dict[str, Any] = {"schemes": [scheme], "deprecated": "auto"}
        if rounds is not None:
            options[f"{scheme}__rounds"] = rounds
        self.context = CryptContext(**options)
        self.scheme = scheme

    @classmethod
    def from_settings(cls, cfg: Settings) -> "CredentialGuard":
        return cls(scheme=cfg.credential_scheme, rounds=cfg.credential_rounds)

    async def issue(self, raw_credential: str) -> str:
        """Returns a salted one-way hash of `raw_credential`."""
        return await run_in_threadpool(self.context.hash, raw_credential)

    async def verify(self, raw_credential: str, stored_hash: Optional[str]) -> bool:
        """
        Checks `raw_credential` against `stored_hash`.

        A missing or unrecognizable stored hash is a failed verification,
        not an error: the caller answers it exactly like a wrong password.
        A missing hash still costs one hash computation, so an unknown
        cedula takes as long to reject as a wrong password.
        """
        if not stored_hash:
            await self.dummy_verify()
            return False
        try:
            return await run_in_threadpool(self.context.verify, raw_credential, stored_hash)
        except (ValueError, TypeError):
            logger.warning("Stored credential hash could not be identified")
            return False

    async def dummy_verify(self) -> None:
        await run_in_threadpool(self.context.dummy_verify)

    @staticmethod
    def redact(row: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy of a usuarios row without the password hash."""
        return {key: value for key, value in row.items() if key != CREDENTIAL_FIELD}


credential_guard = CredentialGuard.from_settings(settings)
