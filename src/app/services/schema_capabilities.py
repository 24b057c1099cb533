"""
Schema capability flags.

Older installations predate the invite usage/revocation columns and the
normalized guest contact columns. The flags are resolved once at startup
and injected into the services that depend on them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SchemaCapabilities:
    max_uses: bool = True
    uses_count: bool = True
    revoked_at: bool = True
    revoked_reason: bool = True
    normalized_contacts: bool = True

    @classmethod
    def full(cls) -> "SchemaCapabilities":
        return cls()
