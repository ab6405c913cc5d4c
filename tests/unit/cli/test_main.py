"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from src.cli.main import __version__, _configure_logging, app
from src.cli.models import ExitCode

runner = CliRunner()


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    def test_verbosity_levels(self):
        for verbosity, level in ((0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG)):
            with patch('logging.getLogger') as mock_get_logger:
                app_logger = MagicMock()
                mock_get_logger.return_value = app_logger

                _configure_logging(verbosity)

                mock_get_logger.assert_called_with("src")
                app_logger.setLevel.assert_called_with(level)

    def test_logdir_creates_log_file(self, tmp_path):
        app_logger = logging.getLogger("src")
        handlers = list(app_logger.handlers)
        level = app_logger.level
        try:
            _configure_logging(1, str(tmp_path / "logs"))
            assert len(list((tmp_path / "logs").glob("confluence-publish_*.log"))) == 1
        finally:
            for added in app_logger.handlers[len(handlers):]:
                added.close()
            app_logger.handlers = handlers
            app_logger.setLevel(level)


@patch('src.cli.main._configure_logging')
class TestMainCommand:
    """Test cases for the publish command line."""

    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main.PublishCommand')
    def test_publish_passes_options(self, mock_command, mock_output, mock_logging):
        mock_command.return_value.run.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, [
            "Tech/Roadmap.md", "--vault", "/notes", "--config", "/notes/c.yaml", "-v", "1", "--no-color",
        ])

        assert result.exit_code == 0
        mock_output.assert_called_once_with(verbosity=1, no_color=True)
        mock_command.return_value.run.assert_called_once_with(
            file="Tech/Roadmap.md",
            vault_root="/notes",
            config_path="/notes/c.yaml",
            dry_run=False,
        )

    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main.PublishCommand')
    def test_dryrun_alias(self, mock_command, mock_output, mock_logging):
        mock_command.return_value.run.return_value = ExitCode.SUCCESS

        runner.invoke(app, ["note.md", "--dryrun"])

        assert mock_command.return_value.run.call_args.kwargs["dry_run"] is True

    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main.PublishCommand')
    def test_exit_code_is_propagated(self, mock_command, mock_output, mock_logging):
        mock_command.return_value.run.return_value = ExitCode.CONFLICTS

        result = runner.invoke(app, ["note.md"])

        assert result.exit_code == ExitCode.CONFLICTS

    def test_version(self, mock_logging):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_arguments_shows_help(self, mock_logging):
        result = runner.invoke(app, [])

        assert "Usage" in result.output
