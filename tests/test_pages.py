from types import SimpleNamespace

import pytest

from services import FALLBACK_REDIRECT_URL, render_error_page, render_redirect_page, resolve_redirect_url


def _request(google=None, review=None, website=None):
    business = SimpleNamespace(google_review_url=google, website=website)
    return SimpleNamespace(business=business, review_url=review)


@pytest.mark.parametrize(
    "google, review, website, expected",
    [
        ("A", "B", "C", "A"),
        (None, "B", "C", "B"),
        ("", "B", "C", "B"),
        (None, None, "C", "C"),
        ("", "", "", FALLBACK_REDIRECT_URL),
        (None, None, None, FALLBACK_REDIRECT_URL),
    ],
)
def test_resolve_redirect_url_priority(google, review, website, expected):
    assert resolve_redirect_url(_request(google, review, website)) == expected


def test_redirect_page_has_all_redirect_paths():
    html = render_redirect_page("Corner Bakery", "https://g.page/r/abc/review", "Dana", True)

    assert '<meta http-equiv="refresh" content="2;url=https://g.page/r/abc/review">' in html
    assert 'const redirectUrl = "https://g.page/r/abc/review";' in html
    assert "setTimeout" in html
    assert '<a href="https://g.page/r/abc/review" rel="noopener noreferrer">' in html
    assert "Corner Bakery's Review Page" in html
    assert "Hi Dana!" in html


def test_redirect_page_badges():
    first = render_redirect_page("Biz", "https://example.com", "Dana", True)
    repeat = render_redirect_page("Biz", "https://example.com", "Dana", False)

    assert "First Click Tracked" in first and "#10b981" in first
    assert "Repeat Visit" not in first
    assert "Repeat Visit" in repeat and "#f59e0b" in repeat
    assert "First Click Tracked" not in repeat


def test_redirect_page_escapes_values():
    html = render_redirect_page("<b>Joe's</b>", 'https://x.example/?a=1&b="2"</script>', "<i>", False)

    assert "<b>Joe" not in html
    assert "&lt;b&gt;" in html
    assert "Hi &lt;i&gt;!" in html
    assert "</script>\"" not in html
    assert 'href="https://x.example/?a=1&amp;b=&quot;2&quot;&lt;/script&gt;"' in html


def test_redirect_page_tolerates_empty_values():
    html = render_redirect_page("", "", "", True)
    assert "Hi there!" in html


def test_error_page_is_static():
    html = render_error_page("Link Inactive", "No longer active.", "Contact the business.")

    assert "<title>Link Inactive - Review Runner</title>" in html
    assert "<h1>Link Inactive</h1>" in html
    assert '<p class="submessage">Contact the business.</p>' in html
    assert "http-equiv" not in html
    assert "<a " not in html
    assert "<script" not in html
