import re

from git_conventions.models.conventions import TICKET_NUMBER_PATTERN, Rule

BRANCH_NAME = "branch-name"
COMMIT_MESSAGE = "commit-message"

DEFAULT_TICKET_TYPES: frozenset[str] = frozenset({"feature", "bugfix", "epic", "hotfix", "chore"})

TICKET_TYPE_PATTERN = r"[a-z][a-z0-9-]*"
SLUG_PATTERN = r"[a-z0-9-]+"

TICKET_NUMBER_PREFIX: re.Pattern[str] = re.compile(TICKET_NUMBER_PATTERN)
TICKET_TYPE: re.Pattern[str] = re.compile(TICKET_TYPE_PATTERN)
SLUG_SUFFIX: re.Pattern[str] = re.compile(rf"-(?P<slug>{SLUG_PATTERN})")
COMMIT_TICKET_PREFIX: re.Pattern[str] = re.compile(rf"(?P<ticket_number>{TICKET_NUMBER_PATTERN}):(?P<message>.*)")

BRANCH_NAME_RULE: Rule = Rule(
    name=BRANCH_NAME,
    pattern=re.compile(
        rf"(?P<ticket_type>{TICKET_TYPE_PATTERN})/(?P<ticket_number>{TICKET_NUMBER_PATTERN})(?:-(?P<slug>{SLUG_PATTERN}))?"
    ),
    description=(
        "Branch names are a lowercase ticket type, a slash, the ticket number and an optional "
        "lowercase hyphenated description: <ticket_type>/<TICKET-123>[-<description>]."
    ),
    example="feature/OVODEV-1234-new-feature-thing",
)

COMMIT_MESSAGE_RULE: Rule = Rule(
    name=COMMIT_MESSAGE,
    pattern=re.compile(rf"(?P<ticket_number>{TICKET_NUMBER_PATTERN}):\s*(?P<message>\S.*)"),
    description=(
        "The first line of a commit message should start with the ticket number followed by a colon: "
        "<TICKET-123>: <message>. Commits without a ticket are allowed."
    ),
    example="PROJ-123: I made a thing do another thing",
)

RULES: dict[str, Rule] = {rule.name: rule for rule in [BRANCH_NAME_RULE, COMMIT_MESSAGE_RULE]}
