"""
Interloc configuration.

Settings stored in .interloc/config.json under a project directory.

Bottom policy (what a Bottom node on the new side accepts):
- strict: only Bottom fits within Bottom (default)
- permissive: anything fits within Bottom
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

logger = logging.getLogger(__name__)

# Type aliases
BottomPolicy = Literal["strict", "permissive"]

BOTTOM_POLICIES = ("strict", "permissive")


@dataclass
class CheckConfig:
    """Settings that change how interfaces are checked and reported."""
    bottom_policy: BottomPolicy = "strict"
    color: bool = True

    def to_dict(self) -> dict:
        return {
            "bottom_policy": self.bottom_policy,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CheckConfig":
        policy = data.get("bottom_policy", "strict")
        if policy not in BOTTOM_POLICIES:
            logger.warning("Unknown bottom_policy %r, using 'strict'", policy)
            policy = "strict"
        return cls(
            bottom_policy=policy,
            color=bool(data.get("color", True)),
        )

    def is_strict(self) -> bool:
        """Check if a Bottom node on the new side rejects inhabited types."""
        return self.bottom_policy == "strict"


DEFAULT_CONFIG = CheckConfig()


def get_config_path(project_path: str) -> Path:
    """Get the config file path for a project directory."""
    return Path(project_path) / ".interloc" / "config.json"


def load_config(project_path: Optional[str] = None) -> CheckConfig:
    """Load configuration. Returns defaults if not found or unreadable."""
    config_file = get_config_path(project_path or ".")

    if not config_file.exists():
        return CheckConfig()

    try:
        with open(config_file) as f:
            data = json.load(f)
        return CheckConfig.from_dict(data)
    except (json.JSONDecodeError, AttributeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_file, e)
        return CheckConfig()


def save_config(project_path: str, config: CheckConfig) -> None:
    """Save configuration."""
    config_file = get_config_path(project_path)

    # Ensure .interloc directory exists
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
