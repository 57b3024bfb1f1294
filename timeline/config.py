"""
Store configuration.

Environment Variables:
    TIMELINE_REPLAY_POLICY: strict, clamp - default: strict
    TIMELINE_CHECKPOINT_INTERVAL: cache a checkpoint every N events, 0 disables - default: 0
    TIMELINE_COPY_ARGS: 1, 0 deep-copy action arguments on capture - default: 1
"""

import os
from dataclasses import dataclass
from typing import Optional

REPLAY_STRICT = "strict"
REPLAY_CLAMP = "clamp"
REPLAY_POLICIES = (REPLAY_STRICT, REPLAY_CLAMP)


@dataclass(frozen=True)
class StoreConfig:
    """
    Tunables for EventSourcedStore.

    Fields:
        replay_policy: What replay does with a target past the last event.
            "strict" raises InvalidIndex; "clamp" lands on the last event.
        checkpoint_interval: Keep an in-memory checkpoint every N events (0 = off)
        copy_args: Deep-copy action arguments when capturing them into an event
    """
    replay_policy: str = REPLAY_STRICT
    checkpoint_interval: int = 0
    copy_args: bool = True

    def __post_init__(self) -> None:
        if self.replay_policy not in REPLAY_POLICIES:
            raise ValueError(
                f"replay_policy must be one of {REPLAY_POLICIES}, got {self.replay_policy!r}"
            )
        if self.checkpoint_interval < 0:
            raise ValueError(f"checkpoint_interval must be >= 0, got {self.checkpoint_interval}")

    @staticmethod
    def from_env() -> "StoreConfig":
        """
        Build config from environment variables.

        Unset or unparseable values fall back to the defaults.
        """
        policy = (os.getenv("TIMELINE_REPLAY_POLICY") or REPLAY_STRICT).strip().lower()
        if policy not in REPLAY_POLICIES:
            policy = REPLAY_STRICT

        interval = _env_int("TIMELINE_CHECKPOINT_INTERVAL")

        copy_args = os.getenv("TIMELINE_COPY_ARGS", "1").strip().lower()

        return StoreConfig(
            replay_policy=policy,
            checkpoint_interval=interval or 0,
            copy_args=copy_args not in ("0", "false", "no", "off"),
        )


def _env_int(key: str) -> Optional[int]:
    val = os.getenv(key)
    if not val:
        return None
    try:
        parsed = int(val)
    except ValueError:
        return None
    return parsed if parsed > 0 else None
