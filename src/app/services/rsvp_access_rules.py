"""
RSVP access rules.

An event may carry ``rules["access"]`` overriding the wedding-wide policy::

    {
        "mode": "inherit" | "open" | "restricted" | "token_only",
        "require_invite_token": bool,
        "allow_response_update": bool,   # default True
        "collect_name": bool,            # default True
        "require_email": bool,
        "require_phone": bool,
    }
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.domain.entities import Event, RsvpAccessMode


@dataclass(frozen=True)
class RsvpAccessRules:
    effective_mode: RsvpAccessMode = RsvpAccessMode.open
    require_invite_token: bool = False
    allow_response_update: bool = True
    collect_name: bool = True
    require_email: bool = False
    require_phone: bool = False

    @classmethod
    def for_event(cls, event: Event, fallback_access: Optional[str]) -> "RsvpAccessRules":
        fallback = (
            RsvpAccessMode.restricted
            if str(fallback_access or "").strip().lower() == RsvpAccessMode.restricted.value
            else RsvpAccessMode.open
        )

        rules = event.rules if isinstance(event.rules, dict) else {}
        access: Dict[str, Any] = rules.get("access") if isinstance(rules.get("access"), dict) else {}

        try:
            configured = RsvpAccessMode(access.get("mode") or RsvpAccessMode.inherit.value)
        except ValueError:
            configured = RsvpAccessMode.inherit

        effective = fallback if configured == RsvpAccessMode.inherit else configured

        return cls(
            effective_mode=effective,
            require_invite_token=(
                effective == RsvpAccessMode.token_only
                or bool(access.get("require_invite_token", False))
            ),
            allow_response_update=bool(access.get("allow_response_update", True)),
            collect_name=bool(access.get("collect_name", True)),
            require_email=bool(access.get("require_email", False)),
            require_phone=bool(access.get("require_phone", False)),
        )
