"""Tests for the ``blob`` command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from blobstore.cli import app

BASE = "https://blob.example.com/api/"

runner = CliRunner()


def invoke(*args: str):
    return runner.invoke(app, ["--url", BASE, *args])


class TestCp:
    def test_upload(self, store, tmp_path: Path):
        source = tmp_path / "a.txt"
        source.write_bytes(b"hello")
        result = invoke("cp", str(source), "blob:/docs/a.txt", "--type", "text/plain")
        assert result.exit_code == 0, result.output
        assert store.objects["docs/a.txt"] == (b"hello", "text/plain")

    def test_upload_existing_requires_force(self, store, tmp_path: Path):
        store.objects["a.txt"] = (b"old", "text/plain")
        source = tmp_path / "a.txt"
        source.write_bytes(b"new")

        result = invoke("cp", str(source), "blob:/a.txt")
        assert result.exit_code == 1
        assert "Destination file already exists on blobstore" in result.output
        assert store.objects["a.txt"][0] == b"old"

        result = invoke("cp", "-f", str(source), "blob:/a.txt")
        assert result.exit_code == 0, result.output
        assert store.objects["a.txt"][0] == b"new"

    def test_download(self, store, tmp_path: Path):
        store.objects["a.txt"] = (b"remote", "text/plain")
        dest = tmp_path / "out" / "a.txt"
        result = invoke("cp", "blob:/a.txt", str(dest))
        assert result.exit_code == 0, result.output
        assert dest.read_bytes() == b"remote"

    def test_download_existing_requires_force(self, store, tmp_path: Path):
        store.objects["a.txt"] = (b"remote", "text/plain")
        dest = tmp_path / "a.txt"
        dest.write_bytes(b"local")
        result = invoke("cp", "blob:/a.txt", str(dest))
        assert result.exit_code == 1
        assert "already exists on local machine; use --force to overwrite" in result.output
        assert dest.read_bytes() == b"local"

    def test_single_remote_argument_prints_object(self, store):
        store.objects["note.txt"] = (b"to stdout", "text/plain")
        result = invoke("cp", "blob:/note.txt")
        assert result.exit_code == 0, result.output
        assert result.stdout == "to stdout"

    def test_single_local_argument(self, store):
        result = invoke("cp", "note.txt")
        assert result.exit_code == 1
        assert "Must download files from blob:/" in result.output

    @pytest.mark.parametrize(
        "src,dst,message",
        [
            ("blob:/a", "blob:/b", "No support for copying files in the blobstore directly"),
            ("a", "b", "Must provide at least one blob:/ path"),
        ],
        ids=["remote_to_remote", "local_to_local"],
    )
    def test_invalid_directions(self, store, src: str, dst: str, message: str):
        result = invoke("cp", src, dst)
        assert result.exit_code == 1
        assert message in result.output
        assert store.posts == 0

    def test_missing_remote_source(self, store, tmp_path: Path):
        result = invoke("cp", "blob:/missing", str(tmp_path / "x"))
        assert result.exit_code == 1
        assert "Blobstore Download Failed (404): not found" in result.output

    @pytest.mark.parametrize(
        "args",
        [("blob://[bad/x",), ("local.txt", "blob://[bad/x"), ("blob://[bad/x", "local.txt")],
        ids=["single", "upload", "download"],
    )
    def test_malformed_blob_argument(self, store, args: tuple[str, ...]):
        result = invoke("cp", *args)
        assert result.exit_code == 1
        assert "Error: Invalid path 'blob://[bad/x'" in result.output
        assert "Usage:" in result.output
        assert store.posts == 0


class TestAppend:
    def test_append_string(self, store):
        store.objects["log"] = (b"line1\n", "text/plain")
        result = invoke("append", "blob:/log", "-s", "line2\n")
        assert result.exit_code == 0, result.output
        assert store.objects["log"] == (b"line1\nline2\n", "text/plain")

    def test_nothing_to_append(self, store):
        store.objects["log"] = (b"x", "text/plain")
        result = invoke("append", "blob:/log")
        assert result.exit_code == 1
        assert "Nothing to append" in result.output
        assert store.posts == 0

    def test_local_path_rejected(self, store):
        result = invoke("append", "log", "--string", "x")
        assert result.exit_code == 1
        assert "Cannot append to local file" in result.output

    def test_missing_object(self, store):
        result = invoke("append", "blob:/missing", "-s", "x")
        assert result.exit_code == 1
        assert "Blobstore Download Failed (404)" in result.output
        assert store.posts == 0


class TestLs:
    def test_lists_prefix(self, store):
        store.objects["logs/a"] = (b"", "text/plain")
        store.objects["logs/b"] = (b"", "text/plain")
        store.objects["other"] = (b"", "text/plain")
        result = invoke("ls", "blob:/logs")
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["logs/a", "logs/b"]

    def test_root(self, store):
        store.objects["x"] = (b"", "text/plain")
        result = invoke("ls", "-r")
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["x"]

    def test_local_path_rejected(self, store):
        result = invoke("ls", "logs")
        assert result.exit_code == 1
        assert "Must start remote ls path with blob:/" in result.output


class TestRm:
    def test_deletes(self, store):
        store.objects["a"] = (b"x", "text/plain")
        result = invoke("rm", "blob:/a")
        assert result.exit_code == 0, result.output
        assert "a" not in store.objects

    def test_missing(self, store):
        result = invoke("rm", "blob:/a")
        assert result.exit_code == 1
        assert "Blobstore Delete Failed (404): not found" in result.output

    def test_local_path_rejected(self, store):
        result = invoke("rm", "a")
        assert result.exit_code == 1
        assert "Cannot delete a local file" in result.output

    def test_malformed_path(self, store):
        result = invoke("rm", "blob://[bad/x")
        assert result.exit_code == 1
        assert "Error: Invalid path" in result.output
        assert "Usage:" in result.output


class TestConfiguration:
    def test_url_from_environment(self, store, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BLOBSTORE_URL", BASE)
        store.objects["a"] = (b"env", "text/plain")
        result = runner.invoke(app, ["cp", "blob:/a"])
        assert result.exit_code == 0, result.output
        assert result.stdout == "env"

    def test_invalid_url(self):
        result = runner.invoke(app, ["--url", "ftp://nowhere", "ls"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BLOBSTORE_TIMEOUT", "never")
        result = invoke("ls")
        assert result.exit_code == 1
        assert "BLOBSTORE_TIMEOUT" in result.output
