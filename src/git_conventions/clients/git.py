from logging import Logger
from pathlib import Path
from typing import ClassVar

from fastmcp.utilities.logging import get_logger
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects.commit import Commit
from git.repo import Repo
from pydantic import BaseModel, ConfigDict, Field

from git_conventions.clients.errors.git import DetachedHeadError, RepositoryNotFoundError, RevisionRangeError


class CommitMessage(BaseModel):
    """A commit and its full message."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    sha: str = Field(description="The full SHA of the commit.")
    message: str = Field(description="The full commit message.")

    @property
    def short_sha(self) -> str:
        return self.sha[:8]

    @classmethod
    def from_commit(cls, commit: Commit) -> "CommitMessage":
        message: str | bytes = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")

        return cls(sha=commit.hexsha, message=message)


class GitRepositoryClient:
    """Reads branch names and commit messages from a local git repository."""

    path: Path
    logger: Logger

    def __init__(self, path: Path | None = None, logger: Logger | None = None):
        self.path = (path or Path.cwd()).resolve()
        self.logger = logger or get_logger(name=__name__)

    def _open_repository(self) -> Repo:
        try:
            return Repo(self.path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryNotFoundError(path=str(self.path), message=str(e) or None) from e

    def get_current_branch(self) -> str:
        repository: Repo = self._open_repository()

        if repository.head.is_detached:
            raise DetachedHeadError(path=str(self.path), commit=repository.head.commit.hexsha)

        branch: str = repository.active_branch.name

        self.logger.info(f"Current branch of {self.path} is {branch}")

        return branch

    def get_commit_messages(self, revision_range: str = "HEAD", include_merges: bool = False, limit: int | None = None) -> list[CommitMessage]:
        """Return the messages of the commits in the revision range, newest first."""

        repository: Repo = self._open_repository()

        self.logger.info(f"Reading commit messages for {revision_range} from {self.path}")

        rev_list_options: dict[str, bool | int] = {}
        if not include_merges:
            rev_list_options["no_merges"] = True
        if limit is not None:
            rev_list_options["max_count"] = limit

        try:
            commits: list[CommitMessage] = [
                CommitMessage.from_commit(commit=commit) for commit in repository.iter_commits(rev=revision_range, **rev_list_options)
            ]
        except (GitCommandError, ValueError) as e:
            raise RevisionRangeError(revision_range=revision_range, message=str(e)) from e

        self.logger.info(f"Read {len(commits)} commit messages for {revision_range}")

        return commits
