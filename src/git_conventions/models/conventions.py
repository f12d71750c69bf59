import re
from enum import StrEnum
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

TICKET_NUMBER_PATTERN = r"[A-Z][A-Z0-9]*-[0-9]+"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Violation(BaseModel):
    """A single reason a candidate deviates from a convention."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    severity: Severity = Field(description="How serious the violation is. Only `error` violations block.")
    code: str = Field(description="A stable identifier for the violation, i.e. 'missing-ticket-type'.")
    message: str = Field(description="A human-readable explanation of the violation.")

    @property
    def is_blocking(self) -> bool:
        return self.severity == Severity.ERROR

    @classmethod
    def structural(cls, code: str, message: str) -> "Violation":
        return cls(severity=Severity.ERROR, code=code, message=message)

    @classmethod
    def advisory(cls, code: str, message: str, severity: Literal[Severity.WARNING, Severity.INFO] = Severity.WARNING) -> "Violation":
        return cls(severity=severity, code=code, message=message)


class Rule(BaseModel):
    """A named conformance check. The named groups of the pattern are the segments of the convention."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    name: str = Field(description="The name of the convention, i.e. 'branch-name'.")
    pattern: re.Pattern[str] = Field(description="The anchored pattern a conforming candidate matches in full.")
    description: str = Field(description="A human-readable explanation of the convention, used for diagnostics only.")
    example: str | None = Field(default=None, description="A conforming example of the convention.")

    @property
    def segment_names(self) -> list[str]:
        return list(self.pattern.groupindex)

    def match_segments(self, candidate: str) -> dict[str, str | None] | None:
        if match := self.pattern.fullmatch(candidate):
            return match.groupdict()

        return None


class BranchSegments(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    ticket_type: str = Field(description="The category prefix of the branch, i.e. 'feature'.")
    ticket_number: str = Field(description="The ticket the branch belongs to, i.e. 'OVODEV-1234'.")
    slug: str | None = Field(default=None, description="The lowercase, hyphenated description of the branch.")


class CommitSegments(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    ticket_number: str | None = Field(default=None, description="The ticket the commit references, if any.")
    message: str = Field(description="The first line of the commit message with the ticket prefix removed.")


Segments = BranchSegments | CommitSegments


class Conforms(BaseModel):
    """The candidate satisfies the convention. Advisories never block."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    conforms: Literal[True] = True
    rule: str = Field(description="The name of the rule the candidate was checked against.")
    segments: Segments = Field(description="The parsed segments of the candidate.")
    advisories: tuple[Violation, ...] = Field(default=(), description="Non-blocking deviations from soft conventions.")


class Fails(BaseModel):
    """The candidate does not satisfy the convention."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    conforms: Literal[False] = False
    rule: str = Field(description="The name of the rule the candidate was checked against.")
    violations: tuple[Violation, ...] = Field(description="The reasons the candidate does not conform, in the order found.", min_length=1)

    @property
    def blocking(self) -> list[Violation]:
        return [violation for violation in self.violations if violation.is_blocking]


ValidationResult = Conforms | Fails


def reported_violations(result: Conforms | Fails) -> tuple[Violation, ...]:
    """The violations to show a user, regardless of whether the candidate conforms."""

    if isinstance(result, Fails):
        return result.violations

    return result.advisories


class ConventionDescription(BaseModel):
    """A serializable description of a rule."""

    name: str = Field(description="The name of the convention.")
    description: str = Field(description="What the convention requires.")
    pattern: str = Field(description="The regular expression a conforming candidate matches in full.")
    example: str | None = Field(default=None, description="A conforming example of the convention.")

    @classmethod
    def from_rule(cls, rule: Rule) -> "ConventionDescription":
        return cls(name=rule.name, description=rule.description, pattern=rule.pattern.pattern, example=rule.example)
