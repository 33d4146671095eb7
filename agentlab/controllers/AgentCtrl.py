from agentlab.dao.SystemContext import SystemContext
from agentlab.models import Patches
from agentlab.models.Manifests import Kustomization, kustomize_url, argocd_agent_base
from agentlab.models.Resources import ConfigMap, Deployment, AppProject, RbacClusterRole, Secret
from agentlab.models.TopologySpec import ClusterDescriptor, PrincipalEndpoint, Topology
from agentlab.wrappers import Logger
from agentlab.wrappers.AgentCtl import AgentCtl
from agentlab.wrappers.Kind import Kind
from agentlab.wrappers.Kubectl import Kubectl
from agentlab.wrappers.OpenSSL import OpenSSL


class AgentCtrl:
    """
    Bootstraps one agent cluster and registers it with the principal.
    """
    _state: SystemContext
    _topology: Topology
    _principal: ClusterDescriptor
    _cluster: ClusterDescriptor
    _endpoint: PrincipalEndpoint

    def __init__(self, state: SystemContext, cluster: ClusterDescriptor, endpoint: PrincipalEndpoint):
        self._state = state
        self._topology = state.topology
        self._principal = state.topology.principal
        self._cluster = cluster
        self._endpoint = endpoint
        self._kind = Kind(state.ctx, state.project_paths, state.echo)
        self._kubectl = Kubectl(state.ctx, state.echo)
        self._openssl = OpenSSL(state.ctx, state.echo)
        self._agentctl = AgentCtl(state.ctx, self._principal, self._topology.namespace, state.echo)
        self._logger = Logger.get(__name__)

    def create_cluster(self):
        self._kind.create_cluster(self._cluster, self._topology.kind_image)
        self._state.journal.cluster_created(self._cluster.name)

    def create_namespace(self):
        self._kubectl.create_namespace(self._cluster, self._topology.namespace)

    def install_argocd(self):
        self._kubectl.apply_kustomization(
            self._cluster,
            self._topology.namespace,
            kustomize_url(argocd_agent_base(self._topology.agent_mode), self._topology.release_branch),
            server_side=True
        )

    def register(self):
        self._agentctl.agent_create(
            self._cluster,
            self._endpoint.resource_proxy_address,
            self._openssl.rand_base64()
        )

    def issue_client_certificate(self):
        self._agentctl.pki_issue_agent(self._cluster)

    def propagate_ca(self):
        self._agentctl.pki_propagate(self._cluster)

    def create_principal_namespace(self):
        self._kubectl.create_namespace(self._principal, self._cluster.name)

    def install_agent(self):
        self._kubectl.apply_kustomization(
            self._cluster,
            self._topology.namespace,
            kustomize_url(Kustomization.agent, self._topology.release_branch)
        )

    def configure_connection(self):
        self._kubectl.patch(self._cluster, 'configmap', ConfigMap.agent_params,
                            Patches.agent_connection(self._topology, self._endpoint),
                            namespace=self._topology.namespace)
        self._kubectl.rollout_restart(self._cluster, self._topology.namespace, Deployment.agent)

    def open_default_project(self):
        # Principal wide, repeated for every agent
        self._kubectl.patch(self._principal, 'appproject', AppProject.default,
                            Patches.default_project_any_destination(),
                            namespace=self._topology.namespace, patch_type='merge')

    def extend_agent_rbac(self):
        self._kubectl.patch(self._cluster, 'clusterrole', RbacClusterRole.agent, Patches.agent_rbac_rule(),
                            patch_type='json')

    def set_server_secret_key(self):
        self._kubectl.patch(self._cluster, 'secret', Secret.argocd,
                            Patches.server_secret_key(self._openssl.secret_key_b64()),
                            namespace=self._topology.namespace, echo=False)

    def bootstrap(self):
        step = self._state.step
        cluster = self._cluster

        self._logger.info("=== Creating Agent Cluster: {} ({}, {}) ===".format(
            cluster.name, cluster.pod_cidr, cluster.svc_cidr))
        step(cluster, 'create-cluster', self.create_cluster)
        step(cluster, 'create-namespace', self.create_namespace)

        self._logger.info("=== Installing Argo CD on Agent: {} ===".format(cluster.name))
        step(cluster, 'install-argocd', self.install_argocd)

        self._logger.info("=== Creating Agent Configuration: {} ===".format(cluster.name))
        step(cluster, 'register-agent', self.register)
        step(cluster, 'issue-agent-cert', self.issue_client_certificate)
        step(cluster, 'propagate-ca', self.propagate_ca)
        step(cluster, 'principal-namespace', self.create_principal_namespace)

        self._logger.info("=== Deploying Agent: {} ===".format(cluster.name))
        step(cluster, 'install-agent', self.install_agent)
        step(cluster, 'configure-connection', self.configure_connection)
        step(cluster, 'default-appproject', self.open_default_project)
        step(cluster, 'agent-rbac', self.extend_agent_rbac)
        step(cluster, 'server-secret-key', self.set_server_secret_key)
