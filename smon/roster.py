from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


DEFAULT_ROSTER_TOML = """# Service Monitor Configuration

# Services that are currently up
up_services = [
  "api-gateway",
  "auth-service",
  "user-service",
  "payment-service"
]

# Services that are currently down
down_services = [
  "notification-service",
  "recommendation-engine"
]
"""


class RosterError(Exception):
    """Base class for roster load failures."""


class RosterIOError(RosterError):
    """The roster file is missing or unreadable."""


class RosterParseError(RosterError):
    """The roster file is not valid TOML or has the wrong shape."""


class RosterFile(BaseModel):
    up_services: list[str] = []
    down_services: list[str] = []


@dataclass(frozen=True)
class ServiceRoster:
    up: tuple[str, ...] = ()
    down: tuple[str, ...] = ()

    def overlap(self) -> list[str]:
        """Names listed as both up and down, in ``up`` order."""
        down = set(self.down)
        return [name for name in self.up if name in down]


FALLBACK_ROSTER = ServiceRoster(up=("default-service",), down=())


def load_roster(path: str) -> ServiceRoster:
    """Read and validate the roster file at ``path``.

    Raises RosterIOError if the file cannot be read and RosterParseError if
    the content is not TOML with two lists of strings. Missing keys are empty.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise RosterIOError(f"error reading config file: {e}") from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise RosterParseError(f"error parsing config file: {e}") from e

    try:
        parsed = RosterFile.model_validate(data)
    except ValidationError as e:
        raise RosterParseError(f"error parsing config file: {e.error_count()} invalid field(s)") from e

    return ServiceRoster(up=tuple(parsed.up_services), down=tuple(parsed.down_services))


def ensure_roster_file(path: str) -> None:
    """Create the roster directory and a default roster if they are missing."""
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        logger.info("Config directory %s does not exist, creating it", parent)
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            logger.error("Error creating config directory: %s", e)
            return

    if os.path.exists(path):
        return
    logger.info("Config file %s does not exist, creating default", path)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(DEFAULT_ROSTER_TOML)
    except OSError as e:
        logger.error("Error creating default config file: %s", e)


def render_roster(roster: ServiceRoster) -> str:
    lines = [f"UP SERVICES ({len(roster.up)}):"]
    lines.extend(f"- {name}" for name in roster.up)
    lines.append("")
    lines.append(f"DOWN SERVICES ({len(roster.down)}):")
    lines.extend(f"- {name}" for name in roster.down)
    return "\n".join(lines) + "\n"
