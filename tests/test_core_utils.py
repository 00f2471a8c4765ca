"""Tests for output preparation, naming helpers and the markup model."""

import pytest

import site_clone


class TestPrepareOutput:
    def test_creates_tree(self, tmp_path):
        layout = site_clone.prepare_output(tmp_path / "out")
        assert layout.root == (tmp_path / "out").resolve()
        for d in (layout.root, layout.css, layout.images, layout.js):
            assert d.is_dir()
        assert layout.index_html == layout.root / "index.html"

    def test_idempotent_and_keeps_files(self, tmp_path):
        layout = site_clone.prepare_output(tmp_path / "out")
        (layout.css / "keep.css").write_text("a{}")
        (layout.root / "notes.txt").write_text("mine")

        again = site_clone.prepare_output(tmp_path / "out")

        assert again == layout
        assert (layout.css / "keep.css").read_text() == "a{}"
        assert (layout.root / "notes.txt").read_text() == "mine"

    def test_relative_path_resolved_against_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        layout = site_clone.prepare_output("clone")
        assert layout.root == tmp_path.resolve() / "clone"
        assert (tmp_path / "clone" / "images").is_dir()

    def test_filesystem_error_is_fatal(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(site_clone.OutputDirError):
            site_clone.prepare_output(blocker / "site")


class TestNaming:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://example.com/css/main.css?v=12#top", "main.css"),
            ("https://example.com/a/b/", ""),
            ("https://example.com", ""),
            ("https://example.com/img/hello%20world.png", "hello world.png"),
            ("https://example.com/x/a%3Ab.js", "a_b.js"),
            ("https://example.com/.hidden", "_hidden"),
            ("https://example.com/x/a%00b%1Fc.png", "a_b_c.png"),
        ],
    )
    def test_url_basename(self, url, expected):
        assert site_clone.url_basename(url) == expected

    def test_allocate_slot_counts_up(self, tmp_path):
        assert site_clone.allocate_slot(tmp_path, "a.png").filename == "a.png"
        (tmp_path / "a.png").write_bytes(b"")
        (tmp_path / "a_1.png").write_bytes(b"")
        slot = site_clone.allocate_slot(tmp_path, "a.png")
        assert slot.filename == "a_2.png"
        assert slot.path == tmp_path / "a_2.png"

    def test_allocate_slot_without_extension(self, tmp_path):
        (tmp_path / "LICENSE").write_bytes(b"")
        assert site_clone.allocate_slot(tmp_path, "LICENSE").filename == "LICENSE_1"

    @pytest.mark.parametrize(
        "content_type, ext",
        [
            ("image/png", "png"),
            ("image/gif", "gif"),
            ("image/webp; charset=binary", "webp"),
            ("image/svg+xml", "svg"),
            ("image/jpeg", "jpg"),
            ("image/avif", "jpg"),
            ("", "jpg"),
            (None, "jpg"),
        ],
    )
    def test_image_ext_for_type(self, content_type, ext):
        assert site_clone.image_ext_for_type(content_type) == ext

    def test_parse_srcset(self):
        assert site_clone.parse_srcset("a.jpg 1x,  b.jpg 2x") == ["a.jpg", "b.jpg"]
        assert site_clone.parse_srcset("") == []

    @pytest.mark.parametrize(
        "value, fetchable",
        [
            ("/a.png", True),
            ("https://x.test/a.js", True),
            ("DATA:image/gif;base64,R0lG", False),
            ("blob:https://x.test/1", False),
            ("  ", False),
            (None, False),
        ],
    )
    def test_can_fetch_url(self, value, fetchable):
        assert site_clone.can_fetch_url(value) is fetchable


class TestMarkupDocument:
    HTML = (
        "<html><head><title>T</title></head><body>"
        '<div class="hero wide" data-x="1"><img src="/a.png" alt="A" srcset="/a2.png 2x"></div>'
        "</body></html>"
    )

    def test_select_and_attribute_edits(self):
        doc = site_clone.MarkupDocument(self.HTML)
        img = doc.select("img")[0]
        doc.set_attr(img, "src", "images/a.png")
        doc.remove_attrs(img, "srcset", "data-src")

        out = doc.serialize()
        assert 'src="images/a.png"' in out
        assert "srcset" not in out
        assert 'alt="A"' in out
        assert 'data-x="1"' in out
        assert "<title>T</title>" in out

    def test_get_attr_joins_multi_valued(self):
        doc = site_clone.MarkupDocument(self.HTML)
        div = doc.select("div")[0]
        assert doc.get_attr(div, "class") == "hero wide"
        assert doc.get_attr(div, "missing") is None

    def test_base_url(self):
        plain = site_clone.MarkupDocument("<p>x</p>")
        assert plain.base_url("https://example.com/a/") == "https://example.com/a/"
        based = site_clone.MarkupDocument('<head><base href="/static/"></head>')
        assert based.base_url("https://example.com/a/") == "https://example.com/static/"


class TestSanitizeFilename:
    def test_long_name_keeps_extension(self):
        name = site_clone.sanitize_filename("x" * 300 + ".webp")
        assert len(name) == site_clone.MAX_FILENAME_LEN
        assert name.endswith("x.webp")

    def test_short_name_untouched(self):
        assert site_clone.sanitize_filename("logo.png") == "logo.png"
