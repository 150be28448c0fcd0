"""Unit tests for the command line."""

from unittest.mock import patch

from typer.testing import CliRunner

from feedpage.cli.app import app
from feedpage.config import load_config

runner = CliRunner()


class TestInitCommand:
    """Tests for feedpage init."""

    def test_init_creates_config_and_template(self, tmp_path):
        """Test init writes default options and a default template."""
        config_path = tmp_path / "config.yaml"

        result = runner.invoke(app, ["init", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert load_config(config_path).title == "Feedpage feed page"
        index = tmp_path / "templates" / "default" / "index.html"
        assert "$context" in index.read_text()

    def test_init_keeps_existing_config(self, tmp_path):
        """Test init does not overwrite an existing config."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("title: Mine\n")

        result = runner.invoke(app, ["init", "--config", str(config_path)])

        assert result.exit_code == 0
        assert load_config(config_path).title == "Mine"


class TestBuildCommand:
    """Tests for feedpage build."""

    def test_build_failure_exit_code(self, tmp_path):
        """Test a failed build exits with status 1."""
        with patch("feedpage.cli.build.BuildOrchestrator") as orchestrator:
            orchestrator.return_value.run.return_value = False
            result = runner.invoke(app, ["build", "--config", str(tmp_path / "config.yaml")])

        assert result.exit_code == 1

    def test_build_passes_paths(self, tmp_path):
        """Test path options reach the config."""
        with patch("feedpage.cli.build.BuildOrchestrator") as orchestrator:
            orchestrator.return_value.run.return_value = True
            result = runner.invoke(
                app,
                [
                    "build",
                    "--config", str(tmp_path / "config.yaml"),
                    "--urls-file", str(tmp_path / "urls"),
                    "--build-dir", str(tmp_path / "out"),
                    "--debug",
                ],
            )

        assert result.exit_code == 0, result.output
        config = orchestrator.call_args.args[0]
        assert config.urls_file == tmp_path / "urls"
        assert config.build_dir == tmp_path / "out"
        assert orchestrator.call_args.kwargs == {"debug": True}

    def test_invalid_config(self, tmp_path):
        """Test configuration errors are reported before building."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("site_url: nope\n")

        with patch("feedpage.cli.build.BuildOrchestrator") as orchestrator:
            result = runner.invoke(app, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        orchestrator.assert_not_called()


class TestOpenCommand:
    """Tests for feedpage open."""

    def test_nothing_built(self, tmp_path):
        """Test open without a built page."""
        result = runner.invoke(app, ["open", "--build-dir", str(tmp_path / "build"), "--config",
                                     str(tmp_path / "config.yaml")])

        assert result.exit_code == 1

    def test_open(self, tmp_path):
        """Test open launches the built index page."""
        (tmp_path / "index.html").write_text("<html></html>")

        with patch("feedpage.cli.open.typer.launch") as launch:
            result = runner.invoke(app, ["open", "--build-dir", str(tmp_path), "--config",
                                         str(tmp_path / "config.yaml")])

        assert result.exit_code == 0
        launch.assert_called_once_with(str(tmp_path / "index.html"))
