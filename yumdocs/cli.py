import dataclasses
import datetime
import logging
import os

import click
import orjson

from . import __version__
from .errors import BuildError, ConfigError

SERVE_DIR = os.path.join(".yumdocs", "serve")

NEW_SITE_CONFIG = """from yumdocs.integrations import mdx, sitemap

SITE = "https://example.com"
OUT_DIR = "dist"
BASE = "/"
INTEGRATIONS = [mdx(), sitemap()]
"""


def load_config_or_exit(path):
    from .config import load_config

    try:
        return load_config(path)
    except ConfigError as e:
        raise click.ClickException(str(e))


def run_build(config, project_dir, progress=True):
    from .build import build_site

    start = datetime.datetime.now()

    try:
        pages = build_site(config, project_dir, progress=progress)
    except BuildError as e:
        raise click.ClickException(str(e))

    print(
        f"Built {len(pages)} pages in \033[94m{(datetime.datetime.now() - start).total_seconds():.3f}s\033[0m ✨"
    )


@click.group()
@click.version_option(version=__version__)
def main():
    logging.basicConfig(level=logging.INFO)


@click.command("new")
@click.argument("name")
def new(name):
    cli_dir = os.path.dirname(os.path.realpath(__file__))

    if os.path.exists(name):
        raise click.ClickException("Site already exists.")

    os.makedirs(os.path.join(name, "pages", "_layouts"))
    os.makedirs(os.path.join(name, "pages", "_components"))
    os.makedirs(os.path.join(name, "public"))

    with open(os.path.join(name, "config.py"), "w") as f:
        f.write(NEW_SITE_CONFIG)

    for template, destination in [
        ("index.html", os.path.join("pages", "index.html")),
        ("default.html", os.path.join("pages", "_layouts", "default.html")),
    ]:
        with open(os.path.join(cli_dir, "templates", template)) as source:
            with open(os.path.join(name, destination), "w") as f:
                f.write(source.read())

    print(f"Site {name} created. ✨")
    print("Run cd/into the site directory.")
    print("Then, `yumdocs build` to build the site.")
    print("You can also `yumdocs serve` to start a local server.")


@click.command("build")
@click.option("--config", "config_path", default="config.py", show_default=True)
def build(config_path):
    config = load_config_or_exit(config_path)
    run_build(config, os.path.dirname(os.path.abspath(config_path)))
    print("Done! ✨")


@click.command("serve")
@click.option("--config", "config_path", default="config.py", show_default=True)
@click.option("--port", default=8000, show_default=True)
def serve(config_path, port):
    from livereload import Server

    config = load_config_or_exit(config_path)
    project_dir = os.path.dirname(os.path.abspath(config_path))

    # pages are served under the base path, so the staging tree mirrors it
    staging = dataclasses.replace(
        config, out_dir=os.path.join(SERVE_DIR, config.base_path.strip("/"))
    )

    run_build(staging, project_dir, progress=False)

    srv = Server()

    print("Live reload mode enabled.\nWatching for changes...\n")
    print(f"View your site at \033[92mhttp://localhost:{port}{config.base_path}\033[0m")
    print("Press Ctrl+C to stop.")

    def rebuild():
        run_build(staging, project_dir, progress=False)

    srv.watch(os.path.join(project_dir, config.root_dir), rebuild)
    srv.watch(os.path.join(project_dir, config.public_dir), rebuild)
    srv.serve(root=os.path.join(project_dir, SERVE_DIR), liveport=35729, port=port, debug=False)


@click.command("config")
@click.option("--config", "config_path", default="config.py", show_default=True)
def show_config(config_path):
    config = load_config_or_exit(config_path)
    click.echo(orjson.dumps(config.as_dict(), option=orjson.OPT_INDENT_2).decode())


main.add_command(new)
main.add_command(build)
main.add_command(serve)
main.add_command(show_config)
