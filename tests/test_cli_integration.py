# ABOUTME: Integration tests for the secretguard CLI that run actual subprocess commands
# ABOUTME: Every run points --home and --data-dir at a temporary directory
import json
import subprocess
import sys
from pathlib import Path

import pytest

WRAPPER = "/usr/local/bin/secretguard-mcp"


def run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "secretguard", *args],
        capture_output=True,
        text=True,
        timeout=30,
    )


@pytest.fixture
def home(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    config = home / ".cursor" / "mcp.json"
    config.parent.mkdir(parents=True)
    config.write_text(json.dumps({
        "mcpServers": {
            "github": {
                "command": "npx",
                "args": ["-y", "@modelcontextprotocol/server-github"],
                "env": {"GITHUB_TOKEN": "ghp_clitest123", "GITHUB_ORG": "acme"},
            },
        },
    }, indent=2))
    return home


class TestCliIntegration:
    """Integration tests that run the CLI via subprocess."""

    def test_integration_cli_version_output(self):
        """Test that the CLI can be invoked and returns version information."""
        result = run_cli("--version")

        assert result.returncode == 0
        assert "secretguard" in result.stdout.lower()

    def test_integration_cli_help_output(self):
        """Test that --help lists the commands."""
        result = run_cli("--help")

        assert result.returncode == 0
        for command in ("protect", "status", "unprotect", "vault-list"):
            assert command in result.stdout

    def test_integration_cli_no_command_shows_help(self):
        result = run_cli()

        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_integration_cli_protect(self, home: Path, tmp_path: Path):
        """Test protect reports the server and keeps the secret out of the output."""
        data_dir = tmp_path / "data"

        result = run_cli("protect", "--home", str(home), "--data-dir", str(data_dir), "--wrapper", WRAPPER)

        assert result.returncode == 0, result.stdout
        assert "cursor/github" in result.stdout
        assert "GITHUB_TOKEN" in result.stdout
        assert "ghp_clitest123" not in result.stdout
        config = json.loads((home / ".cursor" / "mcp.json").read_text())
        assert config["mcpServers"]["github"]["command"] == WRAPPER

    def test_integration_cli_protect_relative_home(self):
        result = run_cli("protect", "--home", "relative/dir", "--wrapper", WRAPPER)

        assert result.returncode == 2
        assert "absolute" in result.stdout

    def test_integration_cli_protect_nothing_found(self, tmp_path: Path):
        result = run_cli("protect", "--home", str(tmp_path), "--wrapper", WRAPPER)

        assert result.returncode == 0
        assert "No MCP configurations found" in result.stdout

    def test_integration_cli_status(self, home: Path):
        result = run_cli("status", "--home", str(home))

        assert result.returncode == 0
        assert "EXPOSED" in result.stdout
        assert "secretguard protect" in result.stdout

    def test_integration_cli_vault_list(self, home: Path, tmp_path: Path):
        """Test vault-list shows counts, never values."""
        data_dir = tmp_path / "data"
        run_cli("protect", "--home", str(home), "--data-dir", str(data_dir), "--wrapper", WRAPPER)

        result = run_cli("vault-list", "--home", str(home), "--data-dir", str(data_dir))

        assert result.returncode == 0
        assert "cursor/github: 1 secret(s)" in result.stdout
        assert "ghp_clitest123" not in result.stdout

    def test_integration_cli_vault_list_empty(self, tmp_path: Path):
        result = run_cli("vault-list", "--home", str(tmp_path))

        assert result.returncode == 0
        assert "Vault is empty" in result.stdout

    def test_integration_cli_unprotect(self, home: Path, tmp_path: Path):
        """Test unprotect puts the original file back."""
        data_dir = tmp_path / "data"
        config = home / ".cursor" / "mcp.json"
        original = config.read_bytes()
        run_cli("protect", "--home", str(home), "--data-dir", str(data_dir), "--wrapper", WRAPPER)

        result = run_cli("unprotect", "--home", str(home), "--data-dir", str(data_dir), "--purge")

        assert result.returncode == 0
        assert "Restored" in result.stdout
        assert config.read_bytes() == original

    def test_integration_wrapper_usage(self):
        """Test the wrapper module reports usage errors with status 2."""
        result = subprocess.run(
            [sys.executable, "-m", "secretguard.wrapper"],
            capture_output=True,
            text=True,
            timeout=10,
        )

        assert result.returncode == 2
        assert "Usage" in result.stderr
