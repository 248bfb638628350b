"""Tests for the HTML document rewriter.

The rewriter is exercised on small hand-written pages and the output is
re-parsed with BeautifulSoup so assertions don't depend on serialisation
details such as attribute quoting or void-element syntax.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from flamingbird.rewrite.document import rewrite_document

_TARGET = "https://example.com/blog/post.html"
_BANNER = '<div id="fb-banner"><a href="/">Back</a></div>'


def _rewrite(html: str, target: str = _TARGET) -> BeautifulSoup:
    return BeautifulSoup(rewrite_document(html, target, _BANNER), "html.parser")


# ---------------------------------------------------------------------------
# Head handling
# ---------------------------------------------------------------------------

class TestBlockingMeta:
    def test_removes_frame_and_csp_meta(self) -> None:
        soup = _rewrite(
            "<html><head>"
            '<meta http-equiv="X-Frame-Options" content="DENY">'
            '<meta http-equiv="Content-Security-Policy" content="default-src \'self\'">'
            '<meta charset="utf-8">'
            "</head><body></body></html>"
        )
        assert soup.find("meta", attrs={"http-equiv": True}) is None
        assert soup.find("meta", charset="utf-8") is not None

    def test_http_equiv_match_ignores_case(self) -> None:
        soup = _rewrite(
            '<html><head><meta http-equiv="content-security-policy" content="x">'
            "</head><body></body></html>"
        )
        assert soup.find("meta") is None

    def test_other_http_equiv_values_are_kept(self) -> None:
        soup = _rewrite(
            '<html><head><meta http-equiv="Content-Type" content="text/html">'
            "</head><body></body></html>"
        )
        assert soup.find("meta", attrs={"http-equiv": "Content-Type"}) is not None


class TestBaseElement:
    def test_inserts_base_when_missing(self) -> None:
        soup = _rewrite("<html><head><title>T</title></head><body></body></html>")
        bases = soup.find_all("base")
        assert len(bases) == 1
        assert soup.head.contents[0] is bases[0]

    def test_existing_base_is_reused_not_duplicated(self) -> None:
        soup = _rewrite(
            '<html><head><base href="/other/"><base href="/again/"></head>'
            "<body></body></html>"
        )
        assert len(soup.find_all("base")) == 1

    def test_base_found_in_body_moves_to_head(self) -> None:
        soup = _rewrite(
            "<html><head><title>T</title></head>"
            "<body><base href='/x/'><p>a</p></body></html>"
        )
        assert len(soup.find_all("base")) == 1
        assert soup.head.contents[0].name == "base"
        assert soup.body.find("base") is None
        assert soup.find("base")["href"] == (
            "/res?url=https%3A%2F%2Fexample.com%2Fblog%2Fpost.html"
        )

    def test_base_points_at_target_through_resource_endpoint(self) -> None:
        # <base> is not an anchor, so the href pass routes it like any <link>.
        soup = _rewrite("<html><head></head><body></body></html>")
        assert soup.find("base")["href"] == (
            "/res?url=https%3A%2F%2Fexample.com%2Fblog%2Fpost.html"
        )

    def test_fragment_gets_head_and_body(self) -> None:
        soup = _rewrite('<p>hello</p><img src="a.png">')
        assert soup.head is not None
        assert soup.body is not None
        assert soup.body.find("p").get_text() == "hello"
        assert soup.head.find("p") is None


# ---------------------------------------------------------------------------
# src / srcset
# ---------------------------------------------------------------------------

class TestSrcRewriting:
    def test_relative_src_becomes_resource_link(self) -> None:
        soup = _rewrite('<html><body><img src="img/a.png"></body></html>')
        assert soup.find("img")["src"] == (
            "/res?url=https%3A%2F%2Fexample.com%2Fblog%2Fimg%2Fa.png"
        )

    def test_script_and_iframe_src_are_rewritten(self) -> None:
        soup = _rewrite(
            '<html><head><script src="https://cdn.net/app.js"></script></head>'
            '<body><iframe src="/embed"></iframe></body></html>'
        )
        assert soup.find("script")["src"] == "/res?url=https%3A%2F%2Fcdn.net%2Fapp.js"
        assert soup.find("iframe")["src"] == "/res?url=https%3A%2F%2Fexample.com%2Fembed"

    def test_authored_proxy_like_src_resolves_against_target(self) -> None:
        soup = _rewrite('<html><body><img src="/res?url=foo"></body></html>')
        assert soup.find("img")["src"] == (
            "/res?url=https%3A%2F%2Fexample.com%2Fres%3Furl%3Dfoo"
        )

    def test_blank_src_is_left_alone(self) -> None:
        soup = _rewrite('<html><body><img src="   "></body></html>')
        assert soup.find("img")["src"] == "   "

    def test_srcset_candidates_are_rewritten(self) -> None:
        soup = _rewrite('<html><body><img srcset="a.png 1x, b.png 2x"></body></html>')
        assert soup.find("img")["srcset"] == (
            "/res?url=https%3A%2F%2Fexample.com%2Fblog%2Fa.png 1x, "
            "/res?url=https%3A%2F%2Fexample.com%2Fblog%2Fb.png 2x"
        )


class TestSourceElements:
    def test_second_pass_is_idempotent(self) -> None:
        soup = _rewrite(
            "<html><body><video>"
            '<source src="/v.mp4" type="video/mp4">'
            "</video><picture>"
            '<source srcset="/s.webp 1x, /l.webp 2x">'
            "</picture></body></html>"
        )
        sources = soup.find_all("source")
        assert sources[0]["src"] == "/res?url=https%3A%2F%2Fexample.com%2Fv.mp4"
        assert sources[1]["srcset"] == (
            "/res?url=https%3A%2F%2Fexample.com%2Fs.webp 1x, "
            "/res?url=https%3A%2F%2Fexample.com%2Fl.webp 2x"
        )


# ---------------------------------------------------------------------------
# href
# ---------------------------------------------------------------------------

class TestHrefRewriting:
    def test_same_host_anchor_navigates(self) -> None:
        soup = _rewrite('<html><body><a href="../about">About</a></body></html>')
        assert soup.find("a", string="About")["href"] == (
            "/fetch?target=https%3A%2F%2Fexample.com%2Fabout"
        )

    def test_cross_host_anchor_is_unmodified(self) -> None:
        soup = _rewrite('<html><body><a href="https://other.com/y">O</a></body></html>')
        assert soup.find("a", string="O")["href"] == "https://other.com/y"

    def test_mailto_anchor_is_unmodified(self) -> None:
        soup = _rewrite('<html><body><a href="mailto:me@example.com">M</a></body></html>')
        assert soup.find("a", string="M")["href"] == "mailto:me@example.com"

    def test_stylesheet_link_becomes_resource_link(self) -> None:
        soup = _rewrite(
            '<html><head><link rel="stylesheet" href="/css/site.css"></head>'
            "<body></body></html>"
        )
        assert soup.find("link")["href"] == (
            "/res?url=https%3A%2F%2Fexample.com%2Fcss%2Fsite.css"
        )

    def test_link_rel_is_not_inspected(self) -> None:
        soup = _rewrite(
            '<html><head><link rel="canonical" href="https://example.com/c"></head>'
            "<body></body></html>"
        )
        assert soup.find("link")["href"] == "/res?url=https%3A%2F%2Fexample.com%2Fc"

    def test_blank_href_is_left_alone(self) -> None:
        soup = _rewrite('<html><body><a href="">E</a></body></html>')
        assert soup.find("a", string="E")["href"] == ""


# ---------------------------------------------------------------------------
# Banner & serialisation
# ---------------------------------------------------------------------------

class TestBannerAndOutput:
    def test_banner_is_first_child_of_body(self) -> None:
        soup = _rewrite("<html><body>\n<p>content</p></body></html>")
        first = soup.body.contents[0]
        assert first.name == "div"
        assert first["id"] == "fb-banner"
        # The banner is inserted after the rewrite passes, so its link stays "/".
        assert first.find("a")["href"] == "/"

    def test_output_adds_no_entities_beyond_markup_escapes(self) -> None:
        html = rewrite_document(
            "<html><body><p>café &amp; &lt;tag&gt;</p></body></html>",
            _TARGET,
            _BANNER,
        )
        assert "café &amp; &lt;tag&gt;" in html

    def test_character_references_come_back_as_characters(self) -> None:
        # The parser decodes references; only &, < and > are re-escaped.
        html = rewrite_document(
            "<html><body><p>&copy; &#8217;</p></body></html>", _TARGET, _BANNER
        )
        assert "© ’" in html
        assert "&copy;" not in html

    def test_inline_script_is_untouched(self) -> None:
        html = rewrite_document(
            '<html><body><script>var u = "/api?a=1&b=2";</script></body></html>',
            _TARGET,
            _BANNER,
        )
        assert 'var u = "/api?a=1&b=2";' in html
