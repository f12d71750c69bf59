from collections.abc import Iterable
from logging import Logger
from typing import ClassVar

from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from git_conventions.errors import PreconditionFailedError
from git_conventions.models.conventions import (
    BranchSegments,
    CommitSegments,
    Conforms,
    Fails,
    Severity,
    ValidationResult,
    Violation,
    reported_violations,
)
from git_conventions.validators.rules import (
    BRANCH_NAME_RULE,
    COMMIT_MESSAGE_RULE,
    COMMIT_TICKET_PREFIX,
    DEFAULT_TICKET_TYPES,
    SLUG_SUFFIX,
    TICKET_NUMBER_PREFIX,
    TICKET_TYPE,
)

logger: Logger = get_logger(name=__name__)

MISSING_TICKET_TYPE = "missing ticket-type prefix"
MALFORMED_TICKET_TYPE = "malformed ticket type"
UNRECOGNIZED_TICKET_TYPE = "unrecognized ticket type"
MISSING_TICKET_NUMBER = "missing or malformed ticket number"
MALFORMED_SLUG = "malformed description slug"
EMPTY_COMMIT_MESSAGE = "empty commit message"
EMPTY_COMMIT_SUMMARY = "empty commit message after ticket prefix"
MISSING_COMMIT_TICKET = "missing ticket number prefix"


def require_candidate(operation: str, candidate: object) -> str:
    if candidate is None:
        logger.error(f"{operation} was called without a candidate")
        raise PreconditionFailedError(operation=operation, message="The candidate must not be None.")

    if not isinstance(candidate, str):
        logger.error(f"{operation} was called with a {type(candidate).__name__} candidate")
        raise PreconditionFailedError(
            operation=operation, message="The candidate must be a string.", extra_info={"type": type(candidate).__name__}
        )

    return candidate


def first_line(text: str) -> str:
    return text.split("\n", 1)[0].rstrip()


class ConventionValidator(BaseModel):
    """Checks candidate branch names and commit messages against the collaboration conventions.

    The validator only holds policy and never changes after construction, so a single instance can be
    shared between threads."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    ticket_types: frozenset[str] = Field(
        default=DEFAULT_TICKET_TYPES,
        description="The ticket types expected as the prefix of a branch name. Other types are reported as advisories.",
    )
    strict: bool = Field(default=False, description="Whether unrecognized ticket types block instead of warn.")

    @field_validator("ticket_types", mode="before")
    @classmethod
    def validate_ticket_types(cls, v: str | Iterable[str]) -> frozenset[str]:
        if isinstance(v, str):
            v = [v]

        return frozenset(ticket_type.strip() for ticket_type in v if ticket_type.strip())

    def validate_branch_name(self, candidate: str) -> ValidationResult:
        """Check a branch name against `<ticket_type>/<TICKET-123>[-<slug>]`."""

        candidate = require_candidate(operation="validate_branch_name", candidate=candidate)

        logger.debug(f"Validating branch name {candidate!r}")

        if "/" not in candidate:
            return Fails(
                rule=BRANCH_NAME_RULE.name,
                violations=(Violation.structural(code="missing-ticket-type", message=MISSING_TICKET_TYPE),),
            )

        ticket_type, remainder = candidate.split("/", 1)

        violations: list[Violation] = []

        if violation := self._check_ticket_type(ticket_type):
            violations.append(violation)

        slug: str | None = None

        if ticket_number := TICKET_NUMBER_PREFIX.match(remainder):
            suffix: str = remainder[ticket_number.end() :]

            if slug_match := SLUG_SUFFIX.fullmatch(suffix):
                slug = slug_match.group("slug")
            elif suffix:
                violations.append(
                    Violation.structural(
                        code="malformed-slug",
                        message=f"{MALFORMED_SLUG}: expected '-' followed by lowercase letters, digits and hyphens, got {suffix!r}",
                    )
                )
        else:
            violations.append(
                Violation.structural(
                    code="missing-ticket-number",
                    message=f"{MISSING_TICKET_NUMBER}: expected a ticket like 'PROJ-123' after '{ticket_type}/'",
                )
            )

        if ticket_number is None or any(violation.is_blocking for violation in violations):
            return Fails(rule=BRANCH_NAME_RULE.name, violations=tuple(violations))

        segments = BranchSegments(ticket_type=ticket_type, ticket_number=ticket_number.group(0), slug=slug)

        return Conforms(rule=BRANCH_NAME_RULE.name, segments=segments, advisories=tuple(violations))

    def _check_ticket_type(self, ticket_type: str) -> Violation | None:
        if not ticket_type:
            return Violation.structural(code="missing-ticket-type", message=f"{MISSING_TICKET_TYPE}: the branch name starts with '/'")

        if not TICKET_TYPE.fullmatch(ticket_type):
            return Violation.structural(
                code="malformed-ticket-type",
                message=f"{MALFORMED_TICKET_TYPE} {ticket_type!r}: expected a lowercase token like 'feature'",
            )

        if ticket_type in self.ticket_types:
            return None

        message: str = f"{UNRECOGNIZED_TICKET_TYPE} {ticket_type!r}: expected one of {', '.join(sorted(self.ticket_types))}"

        if self.strict:
            return Violation.structural(code="unrecognized-ticket-type", message=message)

        return Violation.advisory(code="unrecognized-ticket-type", message=message)

    def validate_commit_message(self, candidate: str) -> ValidationResult:
        """Check the first line of a commit message against `<TICKET-123>: <message>`.

        Commits without a ticket conform, with an informational advisory."""

        candidate = require_candidate(operation="validate_commit_message", candidate=candidate)

        summary: str = first_line(candidate)

        logger.debug(f"Validating commit message summary {summary!r}")

        if not summary.strip():
            return Fails(
                rule=COMMIT_MESSAGE_RULE.name,
                violations=(Violation.structural(code="empty-message", message=f"{EMPTY_COMMIT_MESSAGE}: the first line is blank"),),
            )

        if segments := COMMIT_MESSAGE_RULE.match_segments(summary):
            return Conforms(rule=COMMIT_MESSAGE_RULE.name, segments=CommitSegments.model_validate(segments))

        if prefix := COMMIT_TICKET_PREFIX.fullmatch(summary):
            return Fails(
                rule=COMMIT_MESSAGE_RULE.name,
                violations=(
                    Violation.structural(
                        code="empty-message",
                        message=f"{EMPTY_COMMIT_SUMMARY}: nothing follows '{prefix.group('ticket_number')}:'",
                    ),
                ),
            )

        return Conforms(
            rule=COMMIT_MESSAGE_RULE.name,
            segments=CommitSegments(message=summary.strip()),
            advisories=(
                Violation.advisory(
                    code="missing-ticket-number",
                    message=f"{MISSING_COMMIT_TICKET}: consider starting the message with the ticket, i.e. '{COMMIT_MESSAGE_RULE.example}'",
                    severity=Severity.INFO,
                ),
            ),
        )


def explain(result: ValidationResult) -> str:
    """Render the violations of a result, one per line, each prefixed by its severity."""

    return "\n".join(f"{violation.severity}: {violation.message}" for violation in reported_violations(result))


default_validator: ConventionValidator = ConventionValidator()


def validate_branch_name(candidate: str) -> ValidationResult:
    return default_validator.validate_branch_name(candidate)


def validate_commit_message(candidate: str) -> ValidationResult:
    return default_validator.validate_commit_message(candidate)
