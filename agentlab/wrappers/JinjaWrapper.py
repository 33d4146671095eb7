import jinja2
from jinja2 import Environment

from agentlab.dao.ProjectPaths import PackagePaths


class JinjaWrapper:
    """
    Templates shipped in agentlab/templates, missing variables are errors
    """
    _jinja: Environment

    def __init__(self, templates_dir: str = None):
        if templates_dir is None:
            templates_dir = PackagePaths().templates_dir()

        self._jinja = jinja2.Environment(
            loader=jinja2.FileSystemLoader(templates_dir),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True
        )

    def render_str(self, template_name: str, data: dict) -> str:
        return self._jinja.get_template(template_name).render(data)

    def render(self, template_name: str, target: str, data: dict):
        with open(target, 'w') as target_file:
            target_file.write(self.render_str(template_name, data))
