import os
from collections.abc import Collection, Sequence
from logging import Logger
from pathlib import Path
from typing import Any, ClassVar

import yaml
from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from git_conventions.errors import ConfigurationError
from git_conventions.validators.conventions import ConventionValidator
from git_conventions.validators.rules import DEFAULT_TICKET_TYPES

logger: Logger = get_logger(name=__name__)

DEFAULT_POLICY_FILE = Path(".git-conventions.yaml")

TRUTHY_VALUES: set[str] = {"1", "true", "yes", "on"}


class PolicyFile(BaseModel):
    """The contents of a `.git-conventions.yaml` policy file."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    ticket_types: list[str] | None = Field(default=None, description="The ticket types expected as the prefix of a branch name.")
    strict: bool | None = Field(default=None, description="Whether unrecognized ticket types block instead of warn.")


def get_ticket_types() -> list[str] | None:
    if not (ticket_types := os.getenv("GIT_CONVENTIONS_TICKET_TYPES")):
        return None

    return [ticket_type.strip() for ticket_type in ticket_types.split(",") if ticket_type.strip()]


def get_strict_mode() -> bool | None:
    if not (strict := os.getenv("GIT_CONVENTIONS_STRICT")):
        return None

    return strict.strip().lower() in TRUTHY_VALUES


def load_policy_file(path: Path | None = None) -> PolicyFile:
    """Load a policy file. A missing default policy file is an empty policy, a missing explicit one is an error."""

    if path is None:
        if not DEFAULT_POLICY_FILE.is_file():
            return PolicyFile()
        path = DEFAULT_POLICY_FILE

    logger.info(f"Loading conventions policy from {path}")

    try:
        raw_policy: Any = yaml.safe_load(path.read_text(encoding="utf-8"))  # pyright: ignore[reportAny]
    except OSError as e:
        raise ConfigurationError(source=str(path), message=str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(source=str(path), message=f"Invalid YAML: {e}") from e

    if raw_policy is None:
        return PolicyFile()

    try:
        return PolicyFile.model_validate(raw_policy)
    except ValidationError as e:
        raise ConfigurationError(source=str(path), message=str(e)) from e


def build_validator(
    ticket_types: Sequence[str] | None = None,
    strict: bool | None = None,
    policy_file: Path | None = None,
) -> ConventionValidator:
    """Build a validator from, in increasing precedence, the defaults, the policy file, the environment and the arguments."""

    policy: PolicyFile = load_policy_file(path=policy_file)

    resolved_ticket_types: Collection[str] = DEFAULT_TICKET_TYPES
    resolved_strict: bool = False

    for candidate_ticket_types in (policy.ticket_types, get_ticket_types(), ticket_types):
        if candidate_ticket_types:
            resolved_ticket_types = candidate_ticket_types

    for candidate_strict in (policy.strict, get_strict_mode(), strict):
        if candidate_strict is not None:
            resolved_strict = candidate_strict

    logger.debug(f"Using ticket types {sorted(resolved_ticket_types)} (strict={resolved_strict})")

    return ConventionValidator(ticket_types=frozenset(resolved_ticket_types), strict=resolved_strict)
