from logging import Logger
from typing import Annotated, Any

from fastmcp.server import FastMCP
from fastmcp.tools import Tool
from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, Field

from git_conventions.models.conventions import ConventionDescription, ValidationResult
from git_conventions.validators.conventions import ConventionValidator, explain
from git_conventions.validators.rules import RULES

BRANCH_NAME = Annotated[str, Field(description="The branch name to check, i.e. 'feature/OVODEV-1234-new-feature-thing'.")]
COMMIT_MESSAGE = Annotated[str, Field(description="The commit message to check. Only the first line is checked.")]
STRICT = Annotated[bool, Field(description="Whether an unrecognized ticket type should fail the check instead of warn.")]


class ConventionCheck(BaseModel):
    """The outcome of checking a candidate against a convention."""

    rule: str = Field(description="The name of the convention that was checked.")
    conforms: bool = Field(description="Whether the candidate conforms to the convention.")
    result: ValidationResult = Field(description="The parsed segments or the violations of the candidate.")
    explanation: str = Field(description="The violations and advisories of the candidate, one per line.")

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ConventionCheck":
        return cls(rule=result.rule, conforms=result.conforms, result=result, explanation=explain(result))


class ConventionsServer:
    validator: ConventionValidator
    logger: Logger

    def __init__(self, validator: ConventionValidator | None = None, logger: Logger | None = None):
        self.logger = logger or get_logger(name=__name__)
        self.validator = validator or ConventionValidator()

    def register_tools(self, fastmcp: FastMCP[Any]) -> FastMCP[Any]:
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.validate_branch_name))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.validate_commit_message))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.list_conventions))

        return fastmcp

    def validate_branch_name(self, branch_name: BRANCH_NAME, strict: STRICT = False) -> ConventionCheck:
        """Check a branch name against the `<ticket_type>/<TICKET-123>[-<description>]` convention."""

        validator: ConventionValidator = self.validator.model_copy(update={"strict": True}) if strict else self.validator

        result: ValidationResult = validator.validate_branch_name(branch_name)

        self.logger.info(f"Branch name {branch_name!r} conforms: {result.conforms}")

        return ConventionCheck.from_result(result)

    def validate_commit_message(self, message: COMMIT_MESSAGE) -> ConventionCheck:
        """Check a commit message against the `<TICKET-123>: <message>` convention."""

        result: ValidationResult = self.validator.validate_commit_message(message)

        self.logger.info(f"Commit message conforms: {result.conforms}")

        return ConventionCheck.from_result(result)

    def list_conventions(self) -> list[ConventionDescription]:
        """List the conventions that can be checked."""

        return [ConventionDescription.from_rule(rule) for rule in RULES.values()]
