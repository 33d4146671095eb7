from invoke import Context

from agentlab.dao.ProjectPaths import ProjectPaths
from agentlab.models.Defaults import KIND_CLUSTER_TEMPLATE
from agentlab.models.TopologySpec import ClusterDescriptor
from agentlab.wrappers.JinjaWrapper import JinjaWrapper


class Kind:

    _ctx: Context
    _paths: ProjectPaths
    _echo: bool

    def __init__(self, ctx: Context, paths: ProjectPaths, echo: bool = False):
        self._ctx = ctx
        self._paths = paths
        self._echo = echo

    def write_config(self, cluster: ClusterDescriptor) -> str:
        """
        Renders [project_root]/[cluster_name]/kind-config.yaml with the cluster CIDRs
        """
        config_file_name = self._paths.kind_config_file(cluster.name)
        JinjaWrapper().render(
            KIND_CLUSTER_TEMPLATE,
            config_file_name,
            {
                'name': cluster.name,
                'pod_cidr': cluster.pod_cidr,
                'svc_cidr': cluster.svc_cidr
            }
        )
        return config_file_name

    def create_cluster(self, cluster: ClusterDescriptor, image: str):
        self._ctx.run("kind create cluster --name {} --image={} --config={}".format(
            cluster.name,
            image,
            self.write_config(cluster)
        ), echo=self._echo)

    def delete_cluster(self, cluster_name: str):
        self._ctx.run("kind delete cluster --name {}".format(cluster_name), echo=self._echo)

    def get_clusters(self) -> list[str]:
        return self._ctx.run("kind get clusters", hide='both', echo=self._echo).stdout.splitlines()
