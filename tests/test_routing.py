import pytest

from yumdocs.routing import (
    absolute_url,
    normalize_base,
    output_path_for,
    route_absolute_url,
    route_for,
    route_url,
    with_base,
)


@pytest.mark.parametrize(
    "base, expected",
    [("/yum-docs/", "/yum-docs/"), ("yum-docs", "/yum-docs/"), ("", "/"), ("/", "/"), (None, "/")],
)
def test_normalize_base(base, expected):
    assert normalize_base(base) == expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("index.html", "/"),
        ("index.mdx", "/"),
        ("guide/intro.md", "/guide/intro/"),
        ("guide/index.md", "/guide/"),
        ("404.html", "/404.html"),
        ("404.md", "/404.html"),
        ("robots.txt", "/robots.txt"),
        ("feeds/atom.xml", "/feeds/atom.xml"),
        ("getting-started.mdx", "/getting-started/"),
    ],
)
def test_route_for(path, expected):
    assert route_for(path) == expected


def test_permalink_replaces_route():
    assert route_for("notes.md", "/changelog/") == "/changelog/"
    assert route_for("notes.md", "changelog") == "/changelog/"
    assert route_for("notes.md", "/") == "/"
    assert route_for("feed.html", "/feed.xml") == "/feed.xml"


def test_output_path_for():
    assert output_path_for("/") == "index.html"
    assert output_path_for("/guide/intro/") == "guide/intro/index.html"
    assert output_path_for("/robots.txt") == "robots.txt"


def test_with_base():
    assert with_base("/yum-docs/", "/guide/") == "/yum-docs/guide/"
    assert with_base("/yum-docs/", "guide/") == "/yum-docs/guide/"
    assert with_base("/yum-docs/", "/") == "/yum-docs/"
    assert with_base("/", "/guide/") == "/guide/"


def test_with_base_applies_prefix_once():
    assert with_base("/yum-docs/", "/yum-docs/guide/") == "/yum-docs/guide/"
    assert with_base("/yum-docs/", "/yum-docs") == "/yum-docs"


def test_with_base_leaves_external_links_alone():
    assert with_base("/yum-docs/", "https://example.com/") == "https://example.com/"
    assert with_base("/yum-docs/", "mailto:docs@example.com") == "mailto:docs@example.com"
    assert with_base("/yum-docs/", "#install") == "#install"


def test_absolute_url():
    site = "https://yumshot.github.io/yum-docs"

    assert absolute_url(site, "/yum-docs/", "/") == "https://yumshot.github.io/yum-docs/"
    assert (
        absolute_url(site, "/yum-docs/", "/guide/intro/")
        == "https://yumshot.github.io/yum-docs/guide/intro/"
    )
    assert absolute_url(None, "/yum-docs/", "/guide/") == "/yum-docs/guide/"


def test_route_url_always_adds_base():
    assert route_url("/yum-docs/", "/") == "/yum-docs/"
    assert route_url("/yum-docs/", "/guide/intro/") == "/yum-docs/guide/intro/"
    # a directory named like the base is still a route under the base
    assert route_url("/yum-docs/", "/yum-docs/intro/") == "/yum-docs/yum-docs/intro/"
    assert route_url("/", "/yum-docs/intro/") == "/yum-docs/intro/"


def test_route_absolute_url():
    site = "https://yumshot.github.io/yum-docs"

    assert (
        route_absolute_url(site, "/yum-docs/", "/yum-docs/intro/")
        == "https://yumshot.github.io/yum-docs/yum-docs/intro/"
    )
    assert route_absolute_url(None, "/yum-docs/", "/guide/") == "/yum-docs/guide/"
