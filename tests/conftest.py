from collections.abc import Sequence
from pathlib import Path
from typing import Any, overload

import pytest
from fastmcp import FastMCP
from fastmcp.server.middleware.logging import StructuredLoggingMiddleware
from git import Actor
from git.repo import Repo
from pydantic import BaseModel

from git_conventions.validators.conventions import ConventionValidator

E2E_ACTOR = Actor(name="Conventions Tester", email="tester@example.com")

E2E_GIT_ENV: dict[str, str] = {
    "GIT_AUTHOR_NAME": "Conventions Tester",
    "GIT_AUTHOR_EMAIL": "tester@example.com",
    "GIT_COMMITTER_NAME": "Conventions Tester",
    "GIT_COMMITTER_EMAIL": "tester@example.com",
}


@pytest.fixture
def validator() -> ConventionValidator:
    return ConventionValidator()


@pytest.fixture
def strict_validator() -> ConventionValidator:
    return ConventionValidator(strict=True)


@pytest.fixture
def logging_middleware() -> StructuredLoggingMiddleware:
    return StructuredLoggingMiddleware(include_payloads=True)


@pytest.fixture
def fastmcp(logging_middleware: StructuredLoggingMiddleware):
    return FastMCP(name="Git Conventions MCP", middleware=[logging_middleware])


# E2E Test Data


def commit_file(repository: Repo, name: str, message: str) -> str:
    """Write a file to the working tree of the repository and commit it, returning the SHA of the commit."""

    file_path: Path = Path(repository.working_dir) / name
    _ = file_path.write_text(f"{message}\n", encoding="utf-8")

    _ = repository.index.add([name])

    return repository.index.commit(message, author=E2E_ACTOR, committer=E2E_ACTOR).hexsha


@pytest.fixture
def e2e_repository(tmp_path: Path) -> Repo:
    """A repository on the `feature/OVODEV-1234-new-feature-thing` branch with three commits, oldest first:
    a conforming commit, a ticket-free commit and a commit with an empty message after its ticket prefix."""

    repository: Repo = Repo.init(tmp_path / "repository")

    _ = commit_file(repository, name="README.md", message="OVODEV-1234: Add the readme")

    _ = repository.git.checkout("-b", "feature/OVODEV-1234-new-feature-thing")

    _ = commit_file(repository, name="CHANGELOG.md", message="made a fix")
    _ = commit_file(repository, name="LICENSE", message="OVODEV-1234:")

    return repository


def handle_exclude_keys(dictionary: dict[str, Any], exclude_keys: list[str] | None = None) -> dict[str, Any]:
    if exclude_keys is None:
        return dictionary
    return {key: value for key, value in dictionary.items() if key not in exclude_keys}


@overload
def dump_for_snapshot(
    basemodel: None,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> None: ...


@overload
def dump_for_snapshot(
    basemodel: BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any]: ...


def dump_for_snapshot(
    basemodel: None | BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any] | None:
    if basemodel is None:
        return None

    return handle_exclude_keys(basemodel.model_dump(mode="json", exclude_none=exclude_none, **dump_kwargs), exclude_keys)


def dump_list_for_snapshot(
    basemodel: None | Sequence[BaseModel],
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> list[dict[str, Any]] | None:
    if basemodel is None:
        return []

    return [dump_for_snapshot(item, exclude_keys, exclude_none, **dump_kwargs) for item in basemodel]
