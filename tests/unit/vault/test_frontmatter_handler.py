"""Unit tests for vault.frontmatter_handler module."""

import pytest

from src.vault.errors import FrontmatterError
from src.vault.frontmatter_handler import FrontmatterHandler

URL = "https://x.atlassian.net/wiki/spaces/DOCS/pages/42"


class TestParse:
    """Test cases for FrontmatterHandler.parse."""

    def test_note_without_frontmatter(self):
        assert FrontmatterHandler.parse("n.md", "# Title\n") == ({}, "# Title\n")

    def test_fields_and_body(self):
        fields, body = FrontmatterHandler.parse("n.md", "---\ntags: [a]\n---\n# Title\n")

        assert fields == {"tags": ["a"]}
        assert body == "# Title\n"

    def test_empty_block(self):
        assert FrontmatterHandler.parse("n.md", "---\n---\nbody") == ({}, "body")

    def test_crlf_block(self):
        fields, body = FrontmatterHandler.parse("n.md", "---\r\nk: v\r\n---\r\nbody")

        assert fields == {"k": "v"}
        assert body == "body"

    def test_horizontal_rule_later_is_not_frontmatter(self):
        content = "text\n---\nmore"
        assert FrontmatterHandler.parse("n.md", content) == ({}, content)

    def test_invalid_yaml(self):
        with pytest.raises(FrontmatterError, match="n.md"):
            FrontmatterHandler.parse("n.md", "---\nkey: [unclosed\n---\nbody")

    def test_non_mapping(self):
        with pytest.raises(FrontmatterError, match="got list"):
            FrontmatterHandler.parse("n.md", "---\n- a\n---\nbody")

    def test_depth_limit(self):
        nested = "a:\n" + "".join(f"{'  ' * i}b{i}:\n" for i in range(1, 13)) + "  " * 13 + "leaf: 1\n"

        with pytest.raises(FrontmatterError, match="maximum depth"):
            FrontmatterHandler.parse("n.md", f"---\n{nested}---\nbody")


class TestSetConfluenceUrl:
    """Test cases for FrontmatterHandler.set_confluence_url."""

    def test_adds_block_to_plain_note(self):
        assert FrontmatterHandler.set_confluence_url("# T\n", URL) == f"---\nconfluence: {URL}\n---\n# T\n"

    def test_appends_to_existing_fields(self):
        content = "---\n# keep me\ntags: [a]\n---\nbody"

        assert FrontmatterHandler.set_confluence_url(content, URL) == (
            f"---\n# keep me\ntags: [a]\nconfluence: {URL}\n---\nbody"
        )

    def test_replaces_existing_url(self):
        content = "---\nconfluence: https://old\ntags: [a]\n---\nbody"

        assert FrontmatterHandler.set_confluence_url(content, URL) == (
            f"---\nconfluence: {URL}\ntags: [a]\n---\nbody"
        )

    def test_fills_empty_block(self):
        assert FrontmatterHandler.set_confluence_url("---\n---\nbody", URL) == (
            f"---\nconfluence: {URL}\n---\nbody"
        )

    def test_same_url_is_a_no_op(self):
        content = f"---\nconfluence: {URL}\n---\nbody"
        assert FrontmatterHandler.set_confluence_url(content, URL) == content

    def test_result_parses(self):
        updated = FrontmatterHandler.set_confluence_url("---\ntitle: x\n---\nbody", URL)
        assert FrontmatterHandler.parse("n.md", updated) == ({"title": "x", "confluence": URL}, "body")
