import pyromark
from bs4 import BeautifulSoup

from .routing import with_base

GFM_OPTIONS = (
    pyromark.Options.ENABLE_TABLES
    | pyromark.Options.ENABLE_STRIKETHROUGH
    | pyromark.Options.ENABLE_TASKLISTS
    | pyromark.Options.ENABLE_FOOTNOTES
)

LINK_ATTRIBUTES = ["href", "src"]


def prefix_links(html: str, base: str) -> str:
    """
    Add the base path to root-relative `href` and `src` attributes.

    `[Install](/guide/installation/)` with base `/yum-docs/` links to
    `/yum-docs/guide/installation/`. Relative links, absolute URLs and links
    already under the base are left alone.
    """
    soup = BeautifulSoup(html, "html.parser")
    changed = False

    for attribute in LINK_ATTRIBUTES:
        for tag in soup.find_all(attrs={attribute: True}):
            value = tag[attribute]

            if not value.startswith("/") or value.startswith("//"):
                continue

            prefixed = with_base(base, value)

            if prefixed != value:
                tag[attribute] = prefixed
                changed = True

    # untouched output keeps pyromark's serialization
    if not changed:
        return html

    return str(soup)


def render_markdown(text: str, gfm: bool = True, base: str = "/") -> str:
    """Convert Markdown to HTML, with GitHub-flavoured extensions when `gfm` is set."""
    if gfm:
        html = pyromark.html(text, options=GFM_OPTIONS)
    else:
        html = pyromark.html(text)

    return prefix_links(html, base)
