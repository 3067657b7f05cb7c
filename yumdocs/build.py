import datetime
import logging
import os
import shutil

import frontmatter
import tqdm
from jinja2 import Environment, FileSystemLoader, meta, nodes
from jinja2.visitor import NodeVisitor
from toposort import CircularDependencyError, toposort_flatten
from yaml import YAMLError

from .config import SiteConfig, contains_path
from .date_helpers import archive_date, date_to_xml_string, long_date, year
from .errors import BuildError
from .markdown import render_markdown
from .routing import (
    absolute_url,
    output_path_for,
    route_absolute_url,
    route_for,
    route_url,
    with_base,
)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = ["html", "md", "txt", "xml"]

# content formats that need an integration to render
INTEGRATION_EXTENSIONS = ["mdx"]

# ensures a single page cannot have more than 10 levels of layout inheritance
INHERITANCE_LIMIT = 10


class Page:
    """
    A page parsed from the pages directory.

    Front matter keys are readable as attributes. Unknown attributes read as `None`
    so templates can test for optional front matter.
    """

    def __init__(self, front_matter):
        self.__dict__.update(front_matter)

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)
        return self.__dict__.get(name)


class VariableVisitor(NodeVisitor):
    """
    Find all variables in a jinja2 template.
    """

    def __init__(self):
        self.variables = set()

    def visit_Name(self, node, *args, **kwargs) -> None:
        self.variables.add(node.name)
        self.generic_visit(node, *args, **kwargs)

    def visit_Getattr(self, node, *args, **kwargs) -> None:
        current_node = node
        variable_chain = []
        while isinstance(current_node, nodes.Getattr):
            variable_chain.append(current_node.attr)
            current_node = current_node.node
        if isinstance(current_node, nodes.Name):
            variable_chain.append(current_node.name)
        full_variable = ".".join(reversed(variable_chain))
        self.variables.add(full_variable)
        self.generic_visit(node, *args, **kwargs)


def make_any_nonexistent_directories(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path)


class SiteBuilder:
    """
    Build a site from a `SiteConfig`.

    A build runs in this order:

    1. integrations set up (`config_setup`);
    2. pages are discovered and their front matter parsed;
    3. dependencies between pages, layouts and includes are computed and sorted;
    4. pages are rendered in dependency order and wrapped in their layouts;
    5. the output directory is rewritten and public files are copied;
    6. integrations run their `post_build` hooks.
    """

    def __init__(self, config: SiteConfig, project_dir: str = ".", progress: bool = True):
        self.config = config
        self.project_dir = os.path.abspath(project_dir)
        self.root_dir = os.path.join(self.project_dir, config.root_dir)
        self.out_dir = os.path.join(self.project_dir, config.out_dir)
        self.public_dir = os.path.join(self.project_dir, config.public_dir)
        self.progress = progress

        self.page_renderers = {}
        self.pages = []
        self.layouts = {}
        self.dependencies = {}
        self.state_to_write = {}

        now = datetime.datetime.now()

        self.state = {
            "url": route_absolute_url(config.site, config.base, "/"),
            "site": config.site,
            "base": config.base_path,
            "pages": [],
            "build_date": now.strftime("%m-%d"),
            "build_timestamp": now.isoformat(),
        }
        self.state.update(config.site_state)

        self.env = Environment(
            loader=FileSystemLoader(self.root_dir),
            keep_trailing_newline=True,
        )

        self.env.filters["url"] = self.url
        self.env.filters["absolute_url"] = self.absolute_url
        self.env.filters["long_date"] = long_date
        self.env.filters["date_to_xml_string"] = date_to_xml_string
        self.env.filters["archive_date"] = archive_date
        self.env.filters["year"] = year
        self.env.globals["base"] = config.base_path

    def url(self, path: str) -> str:
        return with_base(self.config.base, path)

    def absolute_url(self, path: str) -> str:
        return absolute_url(self.config.site, self.config.base, path)

    def add_page_renderer(self, extension: str, renderer) -> None:
        """
        Register a renderer for pages with the given extension.

        A renderer is called as `renderer(page, page_state)` and returns HTML.
        """
        self.page_renderers[extension.lstrip(".")] = renderer

    def discover_pages(self) -> list:
        """
        Find every page source in the pages directory.

        Directories and files starting with `_` hold layouts and components, not pages.
        """
        sources = []

        if not os.path.isdir(self.root_dir):
            raise BuildError(f"pages directory {self.config.root_dir!r} not found")

        for root, dirs, files in os.walk(self.root_dir):
            dirs[:] = sorted(d for d in dirs if not d.startswith("_"))

            for file in sorted(files):
                if file.startswith("_"):
                    continue

                ext = os.path.splitext(file)[-1].replace(".", "")
                path = os.path.relpath(os.path.join(root, file), self.root_dir)

                if ext in ALLOWED_EXTENSIONS or ext in self.page_renderers:
                    sources.append(path.replace(os.sep, "/"))
                elif ext in INTEGRATION_EXTENSIONS:
                    logger.warning(
                        f"{path} needs the {ext} integration to render. Skipping."
                    )
                else:
                    logger.debug(f"Ignoring unsupported file {path}")

        return sources

    def load_page(self, file_name: str) -> Page:
        with open(os.path.join(self.root_dir, file_name), "r", encoding="utf-8") as f:
            try:
                post = frontmatter.loads(f.read())
            except YAMLError as e:
                raise BuildError(f"could not parse front matter in {file_name}") from e

        route = route_for(file_name, post.metadata.get("permalink"))

        page = Page(post.metadata)
        page.file = file_name
        page.extension = os.path.splitext(file_name)[-1].replace(".", "")
        page.content = post.content
        page.route = route
        page.output = output_path_for(route)
        page.url = route_url(self.config.base, route)
        page.absolute_url = route_absolute_url(self.config.site, self.config.base, route)

        return page

    def load_layout(self, layout: str) -> frontmatter.Post:
        layout_path = f"{self.config.layouts_dir}/{layout}.html"

        if layout_path not in self.layouts:
            path = os.path.join(self.root_dir, layout_path)

            if not os.path.exists(path):
                raise BuildError(f"layout {layout!r} not found at {layout_path}")

            with open(path, "r", encoding="utf-8") as f:
                self.layouts[layout_path] = frontmatter.loads(f.read())

        return self.layouts[layout_path]

    def get_file_dependencies(self, page: Page, site_readers: set) -> set:
        """
        Get all dependencies of a page. Dependencies are:

        1. The layouts the page is wrapped in;
        2. Other files that are included or imported in the page, and;
        3. Every other page, when the page reads `site.pages`.
        """
        dependencies = set()

        layout = page.layout
        level = 0

        while layout and level <= INHERITANCE_LIMIT:
            layout_path = f"{self.config.layouts_dir}/{layout}.html"
            dependencies.add(layout_path)
            layout = self.load_layout(layout).metadata.get("layout")
            level += 1

        if page.extension == "md":
            return dependencies

        template = self.env.parse(page.content)

        for include in meta.find_referenced_templates(template):
            if isinstance(include, str):
                dependencies.add(include)

        if page.file in site_readers:
            dependencies.update(
                other.file for other in self.pages if other.file not in site_readers
            )

        return dependencies

    def find_site_readers(self) -> set:
        readers = set()

        for page in self.pages:
            if page.extension == "md":
                continue

            visitor = VariableVisitor()
            visitor.visit(self.env.parse(page.content))

            if any(v == "site.pages" or v.startswith("site.pages.") for v in visitor.variables):
                readers.add(page.file)

        return readers

    def interpolate_front_matter(self, page: Page) -> None:
        """Evaluate front matter with Jinja2 to allow logic in front matter."""
        for key, value in list(page.__dict__.items()):
            if isinstance(value, str) and "{" in value and key != "content":
                page.__dict__[key] = self.env.from_string(value).render(
                    page=page, site=self.state
                )

    def recursively_build_page_template_with_front_matter(
        self,
        file_name: str,
        front_matter: dict,
        page_state: dict,
        current_contents: str = "",
        level: int = 0,
    ) -> str:
        """
        Recursively wrap rendered contents in layouts.

        This function is called recursively until there is no layout key in the front matter.
        """
        if level > INHERITANCE_LIMIT:
            logger.critical(
                f"{file_name} has more than ten levels of recursion. Template will be marked as empty."
            )
            return ""

        if not front_matter or not front_matter.get("layout"):
            return current_contents

        layout = self.load_layout(front_matter["layout"])

        current_contents = self.env.from_string(layout.content).render(
            page_state,
            layout=Page(layout.metadata),
            content=current_contents,
        )

        return self.recursively_build_page_template_with_front_matter(
            file_name, layout.metadata, page_state, current_contents, level + 1
        )

    def render_page(self, page: Page) -> None:
        """
        Render a page and queue it for writing.
        """
        self.interpolate_front_matter(page)

        page_state = {"page": page, "site": self.state}

        for integration in self.config.integrations:
            page_state = integration.pre_template_generation(
                page.file, page_state, self.state
            )

        if page.extension == "md":
            contents = render_markdown(page.content, base=self.config.base)
        elif page.extension in self.page_renderers:
            contents = self.page_renderers[page.extension](page, page_state)
        else:
            contents = self.env.from_string(page.content).render(page_state)

        page.contents = contents

        rendered = self.recursively_build_page_template_with_front_matter(
            page.file, page.__dict__, page_state, contents
        )

        for integration in self.config.integrations:
            rendered = integration.post_template_generation(
                page.file, page_state, self.state, rendered
            )

        self.state_to_write[page.output] = rendered

    def write_output(self) -> None:
        for source in (self.project_dir, self.root_dir, self.public_dir):
            if contains_path(self.out_dir, source):
                raise BuildError(
                    f"refusing to clear {self.out_dir}: it contains {source}"
                )

        if os.path.exists(self.out_dir):
            shutil.rmtree(self.out_dir)

        make_any_nonexistent_directories(self.out_dir)

        if os.path.isdir(self.public_dir):
            shutil.copytree(self.public_dir, self.out_dir, dirs_exist_ok=True)

        for output, rendered in self.state_to_write.items():
            path = os.path.join(self.out_dir, output)
            make_any_nonexistent_directories(os.path.dirname(path))

            with open(path, "wb", buffering=1000) as f:
                f.write(rendered.encode())

    def build(self) -> list:
        """
        Run a full build and return the pages that were written.
        """
        for integration in self.config.integrations:
            integration.config_setup(self)

        routes = {}

        for file_name in self.discover_pages():
            page = self.load_page(file_name)

            if page.draft:
                logger.info(f"Skipping draft {file_name}")
                continue

            if page.route in routes:
                raise BuildError(
                    f"{file_name} and {routes[page.route]} both build {page.route}"
                )

            routes[page.route] = file_name
            self.pages.append(page)

        self.state["pages"] = self.pages

        site_readers = self.find_site_readers()

        for page in self.pages:
            self.dependencies[page.file] = self.get_file_dependencies(page, site_readers)

        try:
            order = toposort_flatten(self.dependencies)
        except CircularDependencyError as e:
            raise BuildError(f"circular dependency between pages: {e.data}") from e

        pages_by_file = {page.file: page for page in self.pages}

        for file_name in tqdm.tqdm(order, disable=not self.progress):
            if file_name in pages_by_file:
                self.render_page(pages_by_file[file_name])

        self.write_output()

        for integration in self.config.integrations:
            integration.post_build(self.state, self)

        logger.info(f"Generated {len(self.pages)} pages in {self.config.out_dir}")

        return self.pages


def build_site(config: SiteConfig, project_dir: str = ".", progress: bool = True) -> list:
    """Build the site described by `config` into its output directory."""
    return SiteBuilder(config, project_dir, progress).build()
