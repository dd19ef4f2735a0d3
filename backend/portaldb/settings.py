"""
Runtime toggles for the policy engines.

The gate toggles are read from the environment on every call rather than
cached at import, so operators can flip them without a restart. Engines take
an optional `settings=` argument; when omitted they call
`GateSettings.from_env()` themselves.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

NATIVE_INSTRUCTOR_GATE_ENV = "ENABLE_NATIVE_INSTRUCTOR_GATE"
INTERVIEW_GATE_ENV = "ENFORCE_PRE_OFFERING_INTERVIEW"

_FALSY = {"0", "false", "no", "off"}


# Single table of "unknown input -> permissive default" decisions. Anything
# not listed here is a hard failure.
FAIL_OPEN_POLICY: Dict[str, str] = {
    "env_toggle_unset_or_unrecognised": "enabled",
    "unknown_feature_key": "enabled",
    "no_matching_gate_rule": "enabled",
    "gate_rule_table_missing_on_read": "enabled / empty rule list",
    "unknown_role_string": "dropped",
}


def env_flag(raw: Optional[str]) -> bool:
    """
    Interpret a toggle value.

    Only an explicit 0/false/no/off disables. Unset, empty and unrecognised
    values all count as enabled.
    """
    if not raw:
        return True
    return raw.strip().lower() not in _FALSY


@dataclass(frozen=True)
class GateSettings:
    native_instructor_gate_enabled: bool = True
    interview_gate_enforced: bool = True

    @classmethod
    def from_env(cls) -> "GateSettings":
        return cls(
            native_instructor_gate_enabled=env_flag(os.getenv(NATIVE_INSTRUCTOR_GATE_ENV)),
            interview_gate_enforced=env_flag(os.getenv(INTERVIEW_GATE_ENV)),
        )


def resolve_settings(settings: Optional[GateSettings]) -> GateSettings:
    return settings if settings is not None else GateSettings.from_env()
