from pathlib import Path

import pytest

from git_conventions.errors import ConfigurationError
from git_conventions.utilities.policy import PolicyFile, build_validator, get_strict_mode, get_ticket_types, load_policy_file
from git_conventions.validators.rules import DEFAULT_TICKET_TYPES


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.delenv("GIT_CONVENTIONS_TICKET_TYPES", raising=False)
    monkeypatch.delenv("GIT_CONVENTIONS_STRICT", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def policy_file(tmp_path: Path) -> Path:
    path = tmp_path / "policy.yaml"
    _ = path.write_text("ticket_types:\n  - feature\n  - spike\nstrict: true\n", encoding="utf-8")
    return path


def test_defaults():
    validator = build_validator()

    assert validator.ticket_types == DEFAULT_TICKET_TYPES
    assert validator.strict is False


def test_get_ticket_types(monkeypatch: pytest.MonkeyPatch):
    assert get_ticket_types() is None

    monkeypatch.setenv("GIT_CONVENTIONS_TICKET_TYPES", "feature, spike,,")

    assert get_ticket_types() == ["feature", "spike"]


@pytest.mark.parametrize(("value", "expected"), [("1", True), ("true", True), ("Yes", True), (" on ", True), ("0", False), ("off", False)])
def test_get_strict_mode(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool):
    assert get_strict_mode() is None

    monkeypatch.setenv("GIT_CONVENTIONS_STRICT", value)

    assert get_strict_mode() is expected


def test_load_policy_file(policy_file: Path):
    assert load_policy_file(path=policy_file) == PolicyFile(ticket_types=["feature", "spike"], strict=True)


def test_load_default_policy_file(tmp_path: Path):
    assert load_policy_file() == PolicyFile()

    _ = (tmp_path / ".git-conventions.yaml").write_text("strict: true\n", encoding="utf-8")

    assert load_policy_file() == PolicyFile(strict=True)


def test_load_empty_policy_file(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    _ = path.write_text("", encoding="utf-8")

    assert load_policy_file(path=path) == PolicyFile()


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("ticket_types: [feature\n", "Invalid YAML"),
        ("ticket-types:\n  - feature\n", "Extra inputs are not permitted"),
        ("strict: maybe\n", "strict"),
        ("- feature\n", "PolicyFile"),
    ],
)
def test_invalid_policy_file(tmp_path: Path, contents: str, message: str):
    path = tmp_path / "invalid.yaml"
    _ = path.write_text(contents, encoding="utf-8")

    with pytest.raises(ConfigurationError, match=message):
        _ = load_policy_file(path=path)


def test_missing_explicit_policy_file(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="missing.yaml"):
        _ = load_policy_file(path=tmp_path / "missing.yaml")


def test_precedence(monkeypatch: pytest.MonkeyPatch, policy_file: Path):
    validator = build_validator(policy_file=policy_file)
    assert validator.ticket_types == frozenset({"feature", "spike"})
    assert validator.strict is True

    monkeypatch.setenv("GIT_CONVENTIONS_TICKET_TYPES", "epic")
    monkeypatch.setenv("GIT_CONVENTIONS_STRICT", "false")

    validator = build_validator(policy_file=policy_file)
    assert validator.ticket_types == frozenset({"epic"})
    assert validator.strict is False

    validator = build_validator(ticket_types=["hotfix"], strict=True, policy_file=policy_file)
    assert validator.ticket_types == frozenset({"hotfix"})
    assert validator.strict is True


def test_empty_strict_mode_is_unset(monkeypatch: pytest.MonkeyPatch, policy_file: Path):
    monkeypatch.setenv("GIT_CONVENTIONS_STRICT", "")

    assert get_strict_mode() is None
    assert build_validator(policy_file=policy_file).strict is True
