"""Bridge configuration: serialization policy and option strictness."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("dombridge.json")


class CallbackPolicy(str, Enum):
    """What the wire record says about callbacks bound to an element."""

    OMIT = "omit"      # no "events" field
    NAMES = "names"    # "events": sorted list of bound event names
    REJECT = "reject"  # refuse to serialize an element with callbacks


@dataclass
class BridgeConfig:
    """Settings shared by a registry and everything it serializes."""
    callback_policy: CallbackPolicy = CallbackPolicy.OMIT
    compact_json: bool = True
    # Raise on fewer values than keys instead of defaulting the rest
    strict_options: bool = False

    @property
    def json_separators(self) -> tuple[str, str] | None:
        return (",", ":") if self.compact_json else None

    def to_dict(self) -> dict:
        return {
            "callback_policy": self.callback_policy.value,
            "compact_json": self.compact_json,
            "strict_options": self.strict_options,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BridgeConfig":
        if not isinstance(d, dict):
            return cls()

        try:
            policy = CallbackPolicy(d.get("callback_policy", CallbackPolicy.OMIT.value))
        except ValueError:
            logger.warning("Unknown callback_policy %r, using omit", d.get("callback_policy"))
            policy = CallbackPolicy.OMIT

        return cls(
            callback_policy=policy,
            compact_json=bool(d.get("compact_json", True)),
            strict_options=bool(d.get("strict_options", False)),
        )

    def save(self, path: Path = CONFIG_PATH):
        temp = path.with_suffix(".tmp")
        temp.write_text(json.dumps(self.to_dict(), indent=2))
        temp.replace(path)

    @classmethod
    def load(cls, path: Path = CONFIG_PATH) -> "BridgeConfig":
        try:
            if path.exists():
                return cls.from_dict(json.loads(path.read_text()))
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Failed to load config %s: %s", path, e)
        return cls()


def setup_logging(level: int = logging.INFO) -> None:
    """Route library logs to stderr for hosts that have no logging setup."""
    logging.basicConfig(level=level, stream=sys.stderr, format="%(name)s %(levelname)s: %(message)s")
