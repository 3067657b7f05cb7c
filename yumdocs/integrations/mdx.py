import logging
import os
from dataclasses import dataclass

from jinja2.runtime import Macro

from ..markdown import render_markdown
from . import Integration

logger = logging.getLogger(__name__)


def load_components(builder, components_dir: str) -> dict:
    """
    Collect every macro defined in the components directory.

    `_components/callout.html` defining `{% macro Callout(text) %}` makes
    `Callout` callable from any MDX page.
    """
    components = {}
    path = os.path.join(builder.root_dir, components_dir)

    if not os.path.isdir(path):
        return components

    for file in sorted(os.listdir(path)):
        if not file.endswith(".html"):
            continue

        template = builder.env.get_template(f"{components_dir}/{file}")
        module = template.make_module(vars={"site": builder.state})

        for name, value in vars(module).items():
            if isinstance(value, Macro):
                if name in components:
                    logger.warning(f"Component {name} in {file} replaces an earlier one")
                components[name] = value

    return components


@dataclass(frozen=True)
class MdxIntegration(Integration):
    """
    Render `.mdx` pages: Markdown whose body can call components.

    The body is rendered as a Jinja2 template with `page`, `site` and every
    component macro in scope, then converted from Markdown to HTML.
    """

    gfm: bool = True
    components_dir: str = "_components"

    name = "mdx"

    def config_setup(self, builder) -> None:
        components = load_components(builder, self.components_dir)

        def render(page, page_state):
            body = builder.env.from_string(page.content).render(page_state, **components)
            return render_markdown(body, gfm=self.gfm, base=builder.config.base)

        builder.add_page_renderer("mdx", render)


def mdx(gfm: bool = True, components_dir: str = "_components") -> MdxIntegration:
    return MdxIntegration(gfm=gfm, components_dir=components_dir)
