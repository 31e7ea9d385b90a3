import create_admin
from conftest import run_in_session
from models.account import Admin


def test_create_command_adds_admin(monkeypatch, capsys):
    monkeypatch.setattr(create_admin.getpass, "getpass", lambda prompt: "rootpassword")
    assert create_admin.main(["create", "--email", "Boss@Example.com", "--name", "Boss"]) == 0

    admins = run_in_session(lambda db: [(a.email, a.name) for a in db.query(Admin).all()])
    assert admins == [("boss@example.com", "Boss")]

    assert create_admin.main(["list"]) == 0
    assert "boss@example.com" in capsys.readouterr().out


def test_create_command_rejects_short_password_and_duplicates(monkeypatch, admin):
    monkeypatch.setattr(create_admin.getpass, "getpass", lambda prompt: "short")
    assert create_admin.main(["create", "--email", "new@example.com", "--name", "New"]) == 1

    monkeypatch.setattr(create_admin.getpass, "getpass", lambda prompt: "longenoughpassword")
    assert create_admin.main(["create", "--email", admin.email, "--name", "Again"]) == 1
    assert run_in_session(lambda db: db.query(Admin).count()) == 1
