import json

import pytest

from identity_bootstrap.app_shell import cli


@pytest.fixture(autouse=True)
def fast_cli_hashing(monkeypatch, fast_hasher):
    monkeypatch.setattr(
        "identity_bootstrap.app_shell.context.Argon2PasswordHasher", lambda: fast_hasher
    )


def test_init_then_status(settings, capsys):
    cli.main(["init"])
    assert "Identity store provisioned." in capsys.readouterr().out

    cli.main(["status", "--json"])
    status = json.loads(capsys.readouterr().out)

    assert status["provisioned"] is True
    assert status["admin_user_roles"] == ["admin"]


def test_init_is_idempotent(settings, capsys):
    cli.main(["init"])
    cli.main(["init"])

    out = capsys.readouterr().out
    assert out.count("Identity store provisioned.") == 2


def test_init_with_weak_password_warns(settings, monkeypatch, capsys):
    monkeypatch.setenv("IDB_ADMIN_PASSWORD", "weak")

    cli.main(["init"])

    assert "initialized with warnings" in capsys.readouterr().out


def test_status_before_init(settings, capsys):
    cli.main(["status"])

    assert "does not exist" in capsys.readouterr().out


def test_missing_rules_file_exits(settings, tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--rules", str(tmp_path / "missing.yaml"), "init"])

    assert exc.value.code == 1


def test_unreachable_database_exits(settings, tmp_path):
    # A directory where the database file should be cannot be opened
    blocked = tmp_path / "blocked.db"
    blocked.mkdir()

    with pytest.raises(SystemExit) as exc:
        cli.main(["--db", str(blocked), "init"])

    assert exc.value.code == 1
