class Integration:
    """
    A build-time extension listed in a site's `INTEGRATIONS`.

    Integrations hook into a build at four points, called in the order
    integrations are declared:

    - `config_setup(builder)`, before any page is read;
    - `pre_template_generation(file_name, page_state, site_state)`, before a page renders;
    - `post_template_generation(file_name, page_state, site_state, contents)`, after it renders;
    - `post_build(site_state, builder)`, after every file is written.
    """

    name = None

    def config_setup(self, builder) -> None:
        pass

    def pre_template_generation(self, file_name: str, page_state: dict, site_state: dict) -> dict:
        return page_state

    def post_template_generation(
        self, file_name: str, page_state: dict, site_state: dict, contents: str
    ) -> str:
        return contents

    def post_build(self, site_state: dict, builder) -> None:
        pass


from .mdx import MdxIntegration, mdx
from .sitemap import SitemapIntegration, sitemap
