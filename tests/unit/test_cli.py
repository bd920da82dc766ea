"""
Tests for the jwt-signer command line.
"""
import json

import pytest
from jose import jwt

from jwt_signer.cli import main

DIRECTIVE = """
jwt_signer 15m test_secret_key {
    sub {header.X-User}
    admin {env.JWT_SIGNER_CLI_ADMIN}
}
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "signer.conf"
    path.write_text(DIRECTIVE)
    return path


class TestCli:
    def test_issue(self, config_file, capsys):
        exit_code = main(
            ["issue", "--config", str(config_file), "--var", "http.request.header.X-User=alice", "--now", "1000"]
        )

        token = capsys.readouterr().out.strip()
        payload = jwt.decode(token, "test_secret_key", algorithms=["HS256"], options={"verify_exp": False})
        assert exit_code == 0
        assert payload == {"sub": "alice", "iat": 1000, "exp": 1900}

    def test_print_claims(self, config_file, capsys, monkeypatch):
        monkeypatch.setenv("JWT_SIGNER_CLI_ADMIN", "yes")

        exit_code = main(["issue", "--config", str(config_file), "--var", "header.X-User=bob", "--claims"])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == {"admin": "yes", "sub": "bob"}

    def test_configuration_error(self, tmp_path, capsys):
        path = tmp_path / "bad.conf"
        path.write_text("jwt_signer 15m")

        exit_code = main(["issue", "--config", str(path)])

        assert exit_code == 1
        assert "wrong argument count" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        exit_code = main(["issue", "--config", str(tmp_path / "missing.conf")])

        assert exit_code == 1
        assert "directive file not found" in capsys.readouterr().err

    def test_bad_var(self, config_file):
        with pytest.raises(SystemExit):
            main(["issue", "--config", str(config_file), "--var", "novalue"])
