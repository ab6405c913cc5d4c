"""Unit tests for cli.output module."""

from src.cli.output import OutputHandler
from src.content_converter.storage_transcoder import StorageTranscoder
from src.models.confluence_page import ConfluencePage
from src.models.document import Document
from src.models.sync_result import SyncResult


def handler(verbosity=0):
    return OutputHandler(verbosity=verbosity, no_color=True)


class TestMessages:
    """Test cases for message levels."""

    def test_no_color(self):
        assert handler().console.no_color is True

    def test_levels_at_verbosity_0(self, capsys):
        out = handler()
        out.success("done")
        out.notice("moving")
        out.info("hidden info")
        out.debug("hidden debug")

        captured = capsys.readouterr().out
        assert "done" in captured
        assert "moving" in captured
        assert "hidden" not in captured

    def test_debug_at_verbosity_2(self, capsys):
        handler(verbosity=2).debug("details")
        assert "details" in capsys.readouterr().out

    def test_markup_in_messages_is_literal(self, capsys):
        handler().error("bad [bold]title[/bold]")
        assert "[bold]title[/bold]" in capsys.readouterr().out


class TestSummaries:
    """Test cases for summary output."""

    def test_publish_summary(self, capsys):
        result = SyncResult(
            page=ConfluencePage("7", "Roadmap", 3),
            created=False,
            created_folders=["Tech"],
            moved_folders=["RnD"],
            resolved_placeholders=["IMAGE-ATTACHMENT-0"],
            warnings=["Warning: x"],
        )

        handler().print_publish_summary(result, "https://x/wiki/spaces/D/pages/7")

        captured = capsys.readouterr().out
        assert "Updated: Roadmap (version 3)" in captured
        assert "Folder page created: Tech" in captured
        assert "Folder page moved: RnD" in captured
        assert "Attachments embedded: 1" in captured
        assert "https://x/wiki/spaces/D/pages/7" in captured
        assert "Published with warnings" in captured

    def test_dryrun_summary(self, capsys):
        document = Document("Roadmap", "```mermaid\ngraph TD\n```\n\n![[a.png]]", ("Tech",))

        handler().print_dryrun_summary(document, StorageTranscoder().transcode(document.body))

        captured = capsys.readouterr().out
        assert "Tech / Roadmap" in captured
        assert "MERMAID-PLACEHOLDER-0.svg" in captured
        assert "a.png" in captured
        assert "<p>IMAGE-ATTACHMENT-0</p>" in captured
