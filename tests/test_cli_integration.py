"""Integration tests for CLI commands that verify real workflows.

Uploads go to an fs:// store so no network is involved; the remote-file
commands mock the HTTP client.
"""

from unittest.mock import MagicMock

import pytest
import yaml
from typer.testing import CliRunner

from pd_uploader.cli import app
from pd_uploader.hashing import compute_file_digest
from pd_uploader.storage_models import ResponseDelete, ResponseFileInfo, ResponseGetUser


# ========== Fixtures ==========

@pytest.fixture
def runner():
    """Create a CliRunner for in-process testing."""
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Working directory with a config pointing at local state and an fs:// store."""
    monkeypatch.chdir(tmp_path)
    cfg = tmp_path / ".pd-uploader" / "config.yaml"
    cfg.parent.mkdir()
    cfg.write_text(yaml.safe_dump({
        "api_url": f"fs://{tmp_path / 'remote'}",
        "ledger_path": "state/hashes.csv",
        "test_ledger_path": "state/test_hashes.csv",
        "audit_log_path": "state/upload_logs.csv",
        "uploader_name": "cli-user",
    }))
    return tmp_path


@pytest.fixture
def sample(workspace):
    """Small tree of files to upload."""
    (workspace / "photos" / "2024").mkdir(parents=True)
    (workspace / "photos" / "cat.jpg").write_bytes(b"cat")
    (workspace / "photos" / "2024" / "dog.jpg").write_bytes(b"dog")
    return workspace / "photos"


def _ledger_rows(workspace, name="hashes.csv"):
    path = workspace / "state" / name
    return path.read_text().splitlines() if path.exists() else []


# ========== upload ==========

class TestUpload:

    def test_upload_file(self, runner, workspace, sample):
        result = runner.invoke(app, ["upload", "photos/cat.jpg"])

        assert result.exit_code == 0, result.output
        assert "1 uploaded, 0 skipped, 0 rejected" in result.output
        rows = _ledger_rows(workspace)
        assert rows == [f"photos/cat.jpg,{compute_file_digest(sample / 'cat.jpg')}"]
        audit = (workspace / "state" / "upload_logs.csv").read_text().splitlines()
        assert audit[0].startswith("File Name,")
        assert "cli-user" in audit[1]

    def test_second_upload_skipped(self, runner, workspace, sample):
        runner.invoke(app, ["upload", "photos/cat.jpg"])
        result = runner.invoke(app, ["upload", "photos/cat.jpg"])

        assert result.exit_code == 0, result.output
        assert "0 uploaded, 1 skipped, 0 rejected" in result.output
        assert len(_ledger_rows(workspace)) == 1

    def test_upload_directory(self, runner, workspace, sample):
        result = runner.invoke(app, ["upload", "photos"])

        assert result.exit_code == 0, result.output
        assert "2 uploaded, 0 skipped, 0 rejected" in result.output
        paths = [row.split(",")[0] for row in _ledger_rows(workspace)]
        assert paths == ["photos/2024/dog.jpg", "photos/cat.jpg"]

    def test_env_flag_uses_test_ledger(self, runner, workspace, sample):
        result = runner.invoke(app, ["upload", "photos/cat.jpg", "--env", "test"])

        assert result.exit_code == 0, result.output
        assert len(_ledger_rows(workspace, "test_hashes.csv")) == 1
        assert _ledger_rows(workspace) == []

    def test_env_mode_variable(self, runner, workspace, sample):
        result = runner.invoke(app, ["upload", "photos/cat.jpg"], env={"ENV_MODE": "test"})

        assert result.exit_code == 0, result.output
        assert len(_ledger_rows(workspace, "test_hashes.csv")) == 1

    def test_missing_path(self, runner, workspace):
        result = runner.invoke(app, ["upload", "nope.txt"])
        assert result.exit_code == 1
        assert _ledger_rows(workspace) == []

    def test_explicit_config_path(self, runner, workspace, sample, tmp_path):
        other = tmp_path / "other.yaml"
        other.write_text(yaml.safe_dump({
            "api_url": f"fs://{tmp_path / 'elsewhere'}",
            "ledger_path": "other/hashes.csv",
            "audit_log_path": "other/log.csv",
        }))

        result = runner.invoke(app, ["--config", str(other), "upload", "photos/cat.jpg"])

        assert result.exit_code == 0, result.output
        assert (workspace / "other" / "hashes.csv").exists()
        assert (tmp_path / "elsewhere").is_dir()

    def test_invalid_config(self, runner, workspace):
        (workspace / ".pd-uploader" / "config.yaml").write_text("api_url: [broken\n")
        result = runner.invoke(app, ["upload", "anything"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


# ========== check / hash / ledger ==========

class TestLedgerCommands:

    def test_check(self, runner, workspace, sample):
        runner.invoke(app, ["upload", "photos/cat.jpg"])
        (workspace / "copy.jpg").write_bytes(b"cat")
        (workspace / "new.jpg").write_bytes(b"new")

        result = runner.invoke(app, ["check", "copy.jpg", "new.jpg"])

        assert result.exit_code == 0, result.output
        assert "copy.jpg: already sent" in result.output
        assert "new.jpg: new" in result.output

    def test_check_missing_file(self, runner, workspace):
        result = runner.invoke(app, ["check", "missing.jpg"])
        assert result.exit_code == 1

    def test_hash(self, runner, workspace, sample):
        result = runner.invoke(app, ["hash", "photos/cat.jpg"])

        assert result.exit_code == 0, result.output
        assert compute_file_digest(sample / "cat.jpg") in result.output
        assert "SHA-256 Hash of photos/cat.jpg" in result.output

    def test_hash_does_not_touch_ledger(self, runner, workspace, sample):
        runner.invoke(app, ["hash", "photos/cat.jpg"])
        assert not (workspace / "state").exists()

    def test_ledger_empty(self, runner, workspace):
        result = runner.invoke(app, ["ledger"])
        assert result.exit_code == 0, result.output
        assert "No uploads recorded" in result.output

    def test_read_commands_do_not_create_ledger(self, runner, workspace, sample):
        assert runner.invoke(app, ["check", "photos/cat.jpg"]).exit_code == 0
        assert runner.invoke(app, ["ledger"]).exit_code == 0
        assert not (workspace / "state" / "hashes.csv").exists()

    def test_ledger_listing(self, runner, workspace, sample):
        runner.invoke(app, ["upload", "photos"])
        result = runner.invoke(app, ["ledger"])

        assert result.exit_code == 0, result.output
        assert "2 entries, 2 distinct digests" in result.output
        assert "prod" in result.output


# ========== remote file commands ==========

@pytest.mark.parametrize("args", [
    ["info", "abc"],
    ["delete", "abc"],
    ["download", "abc", "out.bin"],
])
def test_remote_commands_reject_fs_store(runner, workspace, args):
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "fs://" in result.output
    assert "PixelDrain" in result.output
    assert not (workspace / "out.bin").exists()


class TestRemoteCommands:

    @pytest.fixture
    def client(self, monkeypatch):
        client = MagicMock()
        monkeypatch.setattr("pd_uploader.cli._client", lambda config: client)
        return client

    def test_info(self, runner, workspace, client):
        client.get_file_info.return_value = ResponseFileInfo(
            status_code=200, success=True, id="abc", name="cat.jpg", size=1536,
            mime_type="image/jpeg",
        )

        result = runner.invoke(app, ["info", "abc"])

        assert result.exit_code == 0, result.output
        assert "cat.jpg" in result.output
        assert "1.5 KB" in result.output

    def test_info_not_found(self, runner, workspace, client):
        client.get_file_info.return_value = ResponseFileInfo(
            status_code=404, success=False, value="not_found"
        )
        result = runner.invoke(app, ["info", "abc"])
        assert result.exit_code == 1
        assert "404" in result.output

    def test_delete(self, runner, workspace, client):
        client.delete.return_value = ResponseDelete(status_code=200, success=True)
        result = runner.invoke(app, ["delete", "abc"])
        assert result.exit_code == 0, result.output
        client.delete.assert_called_once()

    def test_user_requires_key(self, runner, workspace, client):
        result = runner.invoke(app, ["user"])
        assert result.exit_code == 1
        assert "PIXELDRAIN_API_KEY" in result.output
        client.get_user.assert_not_called()

    def test_user(self, runner, workspace, client):
        client.get_user.return_value = ResponseGetUser(
            status_code=200, success=True, username="alice", email="a@example.com",
        )
        result = runner.invoke(app, ["user"], env={"PIXELDRAIN_API_KEY": "key"})

        assert result.exit_code == 0, result.output
        assert "alice" in result.output
        assert client.get_user.call_args.kwargs["auth"].api_key == "key"
