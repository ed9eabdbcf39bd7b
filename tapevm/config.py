"""
tapevm: Machine Profiles

A profile fixes the behaviors that reasonable implementations disagree
on. ``reference`` keeps every quirk of the reference machine;
``symmetric`` corrects the decrement-on-absent-cell asymmetry.
"""

from dataclasses import dataclass, replace


PROFILES = {
    "reference": {
        "description": "Reference behavior: '-' on a new cell stores 1",
        "absent_decrement": 1,
    },
    "symmetric": {
        "description": "Corrected: '-' on a new cell stores 255 (0 - 1 mod 256)",
        "absent_decrement": 255,
    },
}

DEFAULT_PROFILE = "reference"


@dataclass(frozen=True)
class MachineConfig:
    profile: str = DEFAULT_PROFILE
    absent_decrement: int = 1

    @classmethod
    def from_profile(cls, name: str = DEFAULT_PROFILE, **overrides) -> "MachineConfig":
        """Build a config from a named profile, with optional field overrides."""
        if name not in PROFILES:
            raise ValueError(
                f"Unknown profile {name!r} (choose from: {', '.join(PROFILES)})")
        profile = PROFILES[name]
        config = cls(
            profile=name,
            absent_decrement=profile["absent_decrement"],
        )
        return replace(config, **overrides) if overrides else config
