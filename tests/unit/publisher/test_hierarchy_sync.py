"""Unit tests for publisher.hierarchy_sync module."""

import pytest

from src.confluence_client.errors import RemoteWriteConflictError
from src.models.document import Document
from src.publisher.errors import ArchivedTitleConflictError
from src.publisher.hierarchy_sync import (
    DIAGRAM_CONTENT_TYPE,
    EMPTY_DOCUMENT_BODY,
    FOLDER_PAGE_BODY,
    HierarchySynchronizer,
)
from tests.helpers.assertion_helpers import assert_contains, assert_not_contains


@pytest.fixture
def notices():
    return []


@pytest.fixture
def warnings():
    return []


@pytest.fixture
def synchronizer(fake_transport, notices, warnings):
    return HierarchySynchronizer(
        fake_transport,
        on_notice=notices.append,
        on_warning=warnings.append,
    )


class TestFolderChain:
    """Test cases for folder page resolution."""

    def test_first_publish_creates_folders_and_leaf(self, synchronizer, fake_transport):
        result = synchronizer.sync(Document("Roadmap", "# Plan\n\nText", ("Tech", "RnD")))

        assert fake_transport.calls_named("create") == [
            ("create", "Tech", None),
            ("create", "RnD", "1001"),
            ("create", "Roadmap", "1002"),
        ]
        assert result.created is True
        assert result.created_folders == ["Tech", "RnD"]
        assert result.page.parent_id == "1002"
        assert fake_transport.pages["1001"].body == FOLDER_PAGE_BODY
        assert fake_transport.pages["1003"].body == "<h1>Plan</h1>\n<p>Text</p>"

    def test_folder_creation_is_announced(self, synchronizer, notices):
        synchronizer.sync(Document("Roadmap", "text", ("Tech",)))
        assert 'Created folder page "Tech"' in notices

    def test_republish_updates_leaf_once(self, synchronizer, fake_transport):
        document = Document("Roadmap", "text", ("Tech", "RnD"))
        synchronizer.sync(document)
        fake_transport.calls.clear()

        result = synchronizer.sync(document)

        assert fake_transport.calls_named("create") == []
        assert fake_transport.calls_named("update") == [("update", "1003", 2, "1002")]
        assert result.created is False
        assert result.page.version == 2

    def test_root_note_has_no_folders(self, synchronizer, fake_transport):
        result = synchronizer.sync(Document("Home", "hi"))

        assert fake_transport.calls_named("create") == [("create", "Home", None)]
        assert result.page.parent_id is None

    def test_existing_folders_are_reused(self, synchronizer, fake_transport):
        tech = fake_transport.add_page("Tech")
        rnd = fake_transport.add_page("RnD", parent_id=tech.page_id)

        result = synchronizer.sync(Document("Roadmap", "text", ("Tech", "RnD")))

        assert fake_transport.calls_named("create") == [("create", "Roadmap", rnd.page_id)]
        assert result.created_folders == []

    def test_misplaced_folder_is_moved_under_its_parent(
        self, synchronizer, fake_transport, notices
    ):
        tech = fake_transport.add_page("Tech")
        rnd = fake_transport.add_page("RnD", body="<p>kept</p>")

        result = synchronizer.sync(Document("Roadmap", "text", ("Tech", "RnD")))

        assert fake_transport.calls_named("update")[0] == ("update", rnd.page_id, 2, tech.page_id)
        assert fake_transport.pages[rnd.page_id].parent_id == tech.page_id
        assert fake_transport.pages[rnd.page_id].body == "<p>kept</p>"
        assert 'Moving "RnD" to correct location...' in notices
        assert result.moved_folders == ["RnD"]
        assert result.page.parent_id == rnd.page_id

    def test_top_level_folder_found_elsewhere_is_reused(
        self, synchronizer, fake_transport, notices
    ):
        archive = fake_transport.add_page("Archive")
        tech = fake_transport.add_page("Tech", parent_id=archive.page_id)

        result = synchronizer.sync(Document("Roadmap", "text", ("Tech",)))

        assert fake_transport.calls_named("update") == []
        assert fake_transport.pages[tech.page_id].parent_id == archive.page_id
        assert fake_transport.calls_named("create") == [("create", "Roadmap", tech.page_id)]
        assert result.moved_folders == []
        assert not any(notice.startswith("Moving") for notice in notices)

    def test_moved_folder_without_body_gets_folder_body(self, synchronizer, fake_transport):
        fake_transport.add_page("Tech")
        rnd = fake_transport.add_page("RnD", body=None)

        synchronizer.sync(Document("Roadmap", "text", ("Tech", "RnD")))

        assert fake_transport.pages[rnd.page_id].body == FOLDER_PAGE_BODY

    def test_archived_title_blocks_folder_creation(self, synchronizer, fake_transport):
        archived = fake_transport.add_page("Tech", status="archived")

        with pytest.raises(ArchivedTitleConflictError) as exc_info:
            synchronizer.sync(Document("Roadmap", "text", ("Tech",)))

        assert exc_info.value.title == "Tech"
        assert exc_info.value.url.endswith(f"/pages/{archived.page_id}")
        assert "trash" in str(exc_info.value)
        assert fake_transport.calls_named("create") == []

    def test_failed_archive_search_does_not_block_creation(self, synchronizer, fake_transport):
        fake_transport.failing_archive_search = True

        result = synchronizer.sync(Document("Roadmap", "text", ("Tech",)))

        assert result.created_folders == ["Tech"]

    def test_leaf_title_taken_elsewhere_is_rejected(self, synchronizer, fake_transport):
        fake_transport.add_page("Roadmap")

        with pytest.raises(RemoteWriteConflictError):
            synchronizer.sync(Document("Roadmap", "text", ("Tech",)))


class TestBody:
    """Test cases for the leaf body."""

    def test_empty_document_gets_placeholder_body(self, synchronizer, fake_transport):
        result = synchronizer.sync(Document("Blank", "  \n"))
        assert fake_transport.pages[result.page.page_id].body == EMPTY_DOCUMENT_BODY

    def test_no_placeholders_means_no_second_update(self, synchronizer, fake_transport):
        synchronizer.sync(Document("Plain", "text"))
        assert fake_transport.calls_named("update") == []


class TestPlaceholders:
    """Test cases for diagram and image resolution."""

    BODY = (
        "```mermaid\ngraph A\n```\n\n"
        "```mermaid\ngraph B\n```\n\n"
        "![[shot.png]]"
    )

    def test_each_placeholder_resolves_independently(
        self, synchronizer, fake_transport, warnings
    ):
        fake_transport.failing_diagrams.add("graph A")
        fake_transport.vault_files["shot.png"] = b"png-bytes"

        result = synchronizer.sync(Document("Diagrams", self.BODY))

        page_id = result.page.page_id
        assert fake_transport.calls_named("upload") == [
            ("upload", page_id, "MERMAID-PLACEHOLDER-1.svg", DIAGRAM_CONTENT_TYPE),
            ("upload", page_id, "shot.png", "image/png"),
        ]
        assert result.resolved_placeholders == ["MERMAID-PLACEHOLDER-1", "IMAGE-ATTACHMENT-0"]
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("Warning: Failed to process Mermaid diagram")
        assert warnings == result.warnings

        body = fake_transport.pages[page_id].body
        assert_contains(body, "<p>MERMAID-PLACEHOLDER-0</p>", "failed diagram keeps its token")
        assert_contains(body, 'ri:filename="MERMAID-PLACEHOLDER-1.svg"')
        assert_contains(body, 'ri:filename="shot.png"')
        assert_not_contains(body, "IMAGE-ATTACHMENT-0")

    def test_resolution_ends_with_one_update(self, synchronizer, fake_transport):
        fake_transport.vault_files["shot.png"] = b"png-bytes"

        result = synchronizer.sync(Document("Diagrams", self.BODY))

        assert fake_transport.calls_named("update") == [("update", result.page.page_id, 2, None)]
        assert result.page.version == 2

    def test_nothing_resolved_means_no_update(self, synchronizer, fake_transport, warnings):
        result = synchronizer.sync(Document("Missing", "![[gone.png]]"))

        assert fake_transport.calls_named("update") == []
        assert result.resolved_placeholders == []
        assert warnings == [
            "Warning: Failed to process image gone.png: "
            "Filesystem operation 'read' failed for gone.png: Attachment not found in vault"
        ]
        assert "<p>IMAGE-ATTACHMENT-0</p>" in fake_transport.pages[result.page.page_id].body

    def test_progress_is_announced(self, synchronizer, fake_transport, notices):
        fake_transport.vault_files["shot.png"] = b"png-bytes"

        synchronizer.sync(Document("Diagrams", self.BODY))

        assert "Processing 2 Mermaid diagram(s)..." in notices
        assert "Processing 1 image attachment(s)..." in notices

    def test_jpeg_in_subfolder_uploads_under_its_basename(self, synchronizer, fake_transport):
        fake_transport.vault_files["shots/a.jpg"] = b"jpg"

        result = synchronizer.sync(Document("Photo", "![[shots/a.jpg]]"))

        assert fake_transport.calls_named("upload") == [
            ("upload", result.page.page_id, "a.jpg", "image/jpeg")
        ]
