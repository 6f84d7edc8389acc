from sqltx.scripts import example_users


def test_example_inserts_user_once(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("SQLTX_DB_PATH", raising=False)
    db_file = tmp_path / "example.db"

    assert example_users.main(["--db", str(db_file)]) == 0
    assert "successfully inserted user John inside transaction" in capsys.readouterr().out

    # Same email again violates UNIQUE and is rolled back
    assert example_users.main(["--db", str(db_file), "--name", "Jane"]) == 1
    assert "rolled back" in capsys.readouterr().out
