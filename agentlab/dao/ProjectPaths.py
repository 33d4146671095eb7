import logging
import os.path

from agentlab.models.Defaults import PROJECT_ROOT_DIR, JOURNAL_FILE_NAME, KIND_CONFIG_FILE_NAME


class PackagePaths:
    """
    Files shipped alongside the code
    """

    _root: str

    def __init__(self):
        self._root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    def templates_dir(self, *path):
        return os.path.join(self._root, 'templates', *path)


class ProjectPaths:
    _root: str

    def __init__(self, root=None):
        if root is None:
            self._root = os.environ.get('AGENTLAB_ROOT', os.path.join(
                os.path.expanduser('~'),
                PROJECT_ROOT_DIR
            ))
        else:
            if os.path.isabs(root):
                self._root = str(root)
            else:
                self._root = os.path.join(
                    os.path.expanduser('~'),
                    root
                )

    def project_root(self, *paths):
        return os.path.join(self._root, *paths)

    def journal_file(self):
        return self.project_root(JOURNAL_FILE_NAME)

    def cluster_dir(self, cluster_name: str):
        return mkdirs(self.project_root(cluster_name))

    def kind_config_file(self, cluster_name: str):
        return os.path.join(self.cluster_dir(cluster_name), KIND_CONFIG_FILE_NAME)


def mkdirs(project_dir: str) -> str:
    if not os.path.isdir(project_dir):
        os.makedirs(project_dir, exist_ok=True)
        logging.info("Created directory: " + project_dir)

    return project_dir
