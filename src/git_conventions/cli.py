"""The `git-conventions` command line, for use from git hooks and CI."""

import json
from logging import Logger
from pathlib import Path
from typing import IO, Any, Literal

import click
import yaml
from fastmcp.utilities.logging import configure_logging, get_logger
from pydantic import BaseModel

from git_conventions.clients.errors.git import ClientError
from git_conventions.clients.git import CommitMessage, GitRepositoryClient
from git_conventions.errors import ConfigurationError
from git_conventions.models.conventions import ConventionDescription, Fails, ValidationResult
from git_conventions.utilities.messages import clean_commit_message
from git_conventions.utilities.policy import build_validator
from git_conventions.validators.conventions import ConventionValidator, explain, first_line
from git_conventions.validators.rules import RULES

logger: Logger = get_logger(name=__name__)

OutputFormat = Literal["text", "json", "yaml"]

EXIT_CONFORMS = 0
EXIT_FAILS = 1


class CheckError(click.ClickException):
    """The check could not be performed, i.e. the repository or the policy could not be read."""

    exit_code = 2


class CommitCheck(BaseModel):
    sha: str
    result: ValidationResult


class CliOptions(BaseModel):
    ticket_types: list[str] | None = None
    strict: bool | None = None
    config: Path | None = None
    output_format: OutputFormat = "text"

    def validator(self) -> ConventionValidator:
        try:
            return build_validator(ticket_types=self.ticket_types, strict=self.strict, policy_file=self.config)
        except ConfigurationError as e:
            raise CheckError(str(e)) from e


def dump(data: Any, output_format: OutputFormat) -> str:  # pyright: ignore[reportAny]
    if output_format == "yaml":
        return yaml.safe_dump(data, sort_keys=False, indent=1, width=400).rstrip()

    return json.dumps(data, indent=2)


def report(result: ValidationResult, output_format: OutputFormat) -> int:
    """Print the diagnostics for a result and return the exit code for it."""

    if output_format != "text":
        click.echo(dump(result.model_dump(mode="json"), output_format))
    elif explanation := explain(result):
        click.echo(explanation, err=True)

    if not isinstance(result, Fails):
        return EXIT_CONFORMS

    if output_format == "text":
        rule = RULES[result.rule]
        click.echo(f"hint: {rule.description}", err=True)
        if rule.example:
            click.echo(f"hint: for example '{rule.example}'", err=True)

    return EXIT_FAILS


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="The level of the log messages written to standard error.",
)
@click.option(
    "--config",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="A YAML policy file. Defaults to .git-conventions.yaml when present.",
)
@click.option(
    "--ticket-type",
    "ticket_types",
    multiple=True,
    help="A ticket type allowed as a branch prefix. May be repeated. Overrides the policy file and GIT_CONVENTIONS_TICKET_TYPES.",
)
@click.option("--strict/--no-strict", default=None, help="Whether unrecognized ticket types fail instead of warn.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"]),
    default="text",
    help="Print the results as text diagnostics on standard error, or as JSON or YAML on standard output.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str,
    config: Path | None,
    ticket_types: tuple[str, ...],
    strict: bool | None,
    output_format: OutputFormat,
):
    """Check branch names and commit messages against the team's git conventions."""

    configure_logging(level=log_level.upper())  # pyright: ignore[reportArgumentType]

    ctx.obj = CliOptions(ticket_types=list(ticket_types) or None, strict=strict, config=config, output_format=output_format)


@cli.command("check-branch")
@click.argument("name", required=False)
@click.pass_context
def check_branch(ctx: click.Context, name: str | None):
    """Check a branch name. Checks the current branch when NAME is omitted."""

    options: CliOptions = ctx.obj
    validator: ConventionValidator = options.validator()

    if name is None:
        try:
            name = GitRepositoryClient().get_current_branch()
        except ClientError as e:
            raise CheckError(str(e)) from e

    logger.info(f"Checking branch name {name}")

    ctx.exit(report(validator.validate_branch_name(name), options.output_format))


@cli.command("check-commit")
@click.argument("message_file", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def check_commit(ctx: click.Context, message_file: IO[str]):
    """Check a commit message read from MESSAGE_FILE, or from standard input when omitted or '-'.

    Git comment lines are ignored, so this can be used directly as a commit-msg hook."""

    options: CliOptions = ctx.obj
    validator: ConventionValidator = options.validator()

    try:
        message: str = clean_commit_message(message_file.read())
    except UnicodeDecodeError as e:
        raise CheckError(f"The commit message is not valid UTF-8: {e}") from e

    ctx.exit(report(validator.validate_commit_message(message), options.output_format))


@cli.command("check-log")
@click.argument("revision_range", default="HEAD")
@click.option("--include-merges", is_flag=True, default=False, help="Also check merge commits.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Check at most this many commits.")
@click.pass_context
def check_log(ctx: click.Context, revision_range: str, include_merges: bool, limit: int | None):
    """Check the message of every commit in REVISION_RANGE, i.e. 'origin/main..HEAD'."""

    options: CliOptions = ctx.obj
    validator: ConventionValidator = options.validator()

    try:
        commits: list[CommitMessage] = GitRepositoryClient().get_commit_messages(
            revision_range=revision_range, include_merges=include_merges, limit=limit
        )
    except ClientError as e:
        raise CheckError(str(e)) from e

    checks: list[CommitCheck] = [CommitCheck(sha=commit.sha, result=validator.validate_commit_message(commit.message)) for commit in commits]

    failed: list[CommitCheck] = [check for check in checks if isinstance(check.result, Fails)]

    if options.output_format != "text":
        click.echo(dump([check.model_dump(mode="json") for check in checks], options.output_format))
    else:
        for commit, check in zip(commits, checks, strict=True):
            if explanation := explain(check.result):
                click.echo(f"{commit.short_sha} {first_line(commit.message)}", err=True)
                click.echo("\n".join(f"  {line}" for line in explanation.splitlines()), err=True)

        click.echo(f"Checked {len(checks)} commits, {len(failed)} failed.", err=True)

    ctx.exit(EXIT_FAILS if failed else EXIT_CONFORMS)


@cli.command("list-conventions")
@click.pass_context
def list_conventions(ctx: click.Context):
    """Print the conventions that are checked."""

    options: CliOptions = ctx.obj

    conventions: list[ConventionDescription] = [ConventionDescription.from_rule(rule) for rule in RULES.values()]

    if options.output_format != "text":
        click.echo(dump([convention.model_dump(mode="json") for convention in conventions], options.output_format))
        return

    for convention in conventions:
        click.echo(f"{convention.name}: {convention.description}")
        click.echo(f"  pattern: {convention.pattern}")
        click.echo(f"  example: {convention.example}")


if __name__ == "__main__":
    cli()
