import os

from yumdocs import build_site, define_config, mdx
from yumdocs.build import SiteBuilder
from yumdocs.integrations.mdx import load_components

TABLE = "| a | b |\n|---|---|\n| 1 | 2 |\n"


def write_pages(project_dir, files):
    for name, contents in files.items():
        path = os.path.join(project_dir, "pages", name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(contents)


def read(project_dir, path):
    with open(os.path.join(project_dir, "dist", path)) as f:
        return f.read()


def test_components_are_collected_by_name(tmp_path):
    write_pages(
        tmp_path,
        {
            "_components/callouts.html": (
                "{% macro Callout(text) %}<aside>{{ text }}</aside>{% endmacro %}"
                "{% macro Warning(text) %}<aside class='warning'>{{ text }}</aside>{% endmacro %}"
            ),
        },
    )

    builder = SiteBuilder(define_config(None, "dist"), tmp_path, progress=False)

    assert sorted(load_components(builder, "_components")) == ["Callout", "Warning"]


def test_components_can_read_site(tmp_path):
    write_pages(
        tmp_path,
        {
            "_components/home.html": "{% macro Home() %}<a href=\"{{ site.base }}\">home</a>{% endmacro %}",
            "index.mdx": "{{ Home() }}\n",
        },
    )

    config = define_config(None, "dist", "/yum-docs/", integrations=[mdx()])
    build_site(config, tmp_path, progress=False)

    assert '<a href="/yum-docs/">home</a>' in read(tmp_path, "index.html")


def test_mdx_body_reads_page_front_matter(tmp_path):
    write_pages(tmp_path, {"intro.mdx": "---\ntitle: Intro\n---\n# {{ page.title }}\n"})

    build_site(define_config(None, "dist", integrations=[mdx()]), tmp_path, progress=False)

    assert "<h1>Intro</h1>" in read(tmp_path, "intro/index.html")


def test_gfm_tables(tmp_path):
    write_pages(tmp_path, {"table.mdx": TABLE})

    build_site(define_config(None, "dist", integrations=[mdx()]), tmp_path, progress=False)

    assert "<table>" in read(tmp_path, "table/index.html")


def test_gfm_can_be_disabled(tmp_path):
    write_pages(tmp_path, {"table.mdx": TABLE})

    build_site(
        define_config(None, "dist", integrations=[mdx(gfm=False)]), tmp_path, progress=False
    )

    assert "<table>" not in read(tmp_path, "table/index.html")


def test_mdx_integrations_compare_by_options():
    assert mdx() == mdx()
    assert mdx(gfm=False) != mdx()


def test_mdx_links_get_the_base(tmp_path):
    write_pages(tmp_path, {"index.mdx": "[Install](/guide/installation/)\n"})

    config = define_config(None, "dist", "/yum-docs/", integrations=[mdx()])
    build_site(config, tmp_path, progress=False)

    assert '<a href="/yum-docs/guide/installation/">Install</a>' in read(tmp_path, "index.html")
