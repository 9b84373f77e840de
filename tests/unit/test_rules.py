from pathlib import Path

import pytest

from identity_bootstrap.app_shell.config import validate_bootstrap_rules
from identity_bootstrap.rules.loader import load_rules
from identity_bootstrap.rules.models import BootstrapRules, Rules


def write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(content)
    return path


def test_project_rules_file_loads(rules):
    assert rules.bootstrap.admin_role == "admin"
    assert rules.bootstrap.admin_display_name == "Administrator"
    assert rules.password.min_length == 8


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_empty_file_gives_defaults(tmp_path):
    rules = load_rules(write(tmp_path, ""))

    assert rules == Rules()
    assert rules.password.min_length == 6


def test_partial_file_keeps_other_defaults(tmp_path):
    rules = load_rules(write(tmp_path, "bootstrap:\n  admin_role: owners\n"))

    assert rules.bootstrap.admin_role == "owners"
    assert rules.bootstrap.admin_display_name == "Administrator"
    assert rules.password.require_digit is True


def test_fenced_yaml_block_in_markdown(tmp_path):
    content = (
        "# Identity rules\n\n"
        "Some prose.\n\n"
        "```yaml\n"
        "password:\n"
        "  min_length: 12\n"
        "```\n\n"
        "More prose: not yaml at all: [\n"
    )

    rules = load_rules(write(tmp_path, content))

    assert rules.password.min_length == 12


def test_invalid_yaml_raises_value_error(tmp_path):
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(write(tmp_path, "password: [unclosed\n"))


def test_schema_violation_raises_value_error(tmp_path):
    with pytest.raises(ValueError, match="Rules validation failed"):
        load_rules(write(tmp_path, "password:\n  min_length: 0\n"))


def test_validate_bootstrap_rules_rejects_blank_values():
    rules = Rules(bootstrap=BootstrapRules(admin_role=" ", admin_display_name=""))

    with pytest.raises(ValueError) as exc:
        validate_bootstrap_rules(rules)

    assert "bootstrap.admin_role" in str(exc.value)
    assert "bootstrap.admin_display_name" in str(exc.value)


def test_validate_bootstrap_rules_accepts_defaults():
    validate_bootstrap_rules(Rules())
