from agentlab.dao.SystemContext import SystemContext
from agentlab.models import Patches
from agentlab.models.Manifests import Kustomization, kustomize_url
from agentlab.models.Resources import ConfigMap, Deployment, Service
from agentlab.models.TopologySpec import ClusterDescriptor, PrincipalEndpoint, Topology
from agentlab.wrappers import Logger
from agentlab.wrappers.AgentCtl import AgentCtl
from agentlab.wrappers.Docker import Docker
from agentlab.wrappers.Kind import Kind
from agentlab.wrappers.Kubectl import Kubectl, service_dns_name

LOOPBACK_IP = '127.0.0.1'
LOOPBACK_DNS = 'localhost'


class PrincipalCtrl:
    _state: SystemContext
    _topology: Topology
    _cluster: ClusterDescriptor
    _kind: Kind
    _kubectl: Kubectl
    _docker: Docker
    _agentctl: AgentCtl

    def __init__(self, state: SystemContext):
        self._state = state
        self._topology = state.topology
        self._cluster = state.topology.principal
        self._kind = Kind(state.ctx, state.project_paths, state.echo)
        self._kubectl = Kubectl(state.ctx, state.echo)
        self._docker = Docker(state.ctx, state.echo)
        self._agentctl = AgentCtl(state.ctx, self._cluster, self._topology.namespace, state.echo)
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
            kustomize_url(Kustomization.argocd_principal, self._topology.release_branch),
            server_side=True
        )

    def enable_apps_in_any_namespace(self):
        self._kubectl.patch(self._cluster, 'configmap', ConfigMap.cmd_params, Patches.apps_in_any_namespace(),
                            namespace=self._topology.namespace)
        self._kubectl.rollout_restart(self._cluster, self._topology.namespace, Deployment.argocd_server)

    def init_pki(self):
        self._agentctl.pki_init()

    def install_principal(self):
        self._kubectl.apply_kustomization(
            self._cluster,
            self._topology.namespace,
            kustomize_url(Kustomization.principal, self._topology.release_branch)
        )

    def allow_agent_namespaces(self):
        self._kubectl.patch(self._cluster, 'configmap', ConfigMap.agent_params,
                            Patches.principal_allowed_namespaces(self._topology),
                            namespace=self._topology.namespace)
        self._kubectl.rollout_restart(self._cluster, self._topology.namespace, Deployment.principal)

    def expose_principal(self):
        self._kubectl.patch(self._cluster, 'svc', Service.principal, Patches.node_port_service(),
                            namespace=self._topology.namespace)

    def discover(self) -> PrincipalEndpoint:
        """
        External address of the principal as seen from the other kind clusters,
        plus the in-cluster addresses of the principal and resource proxy services.
        """
        principal_service = self._kubectl.get_service(self._cluster, self._topology.namespace, Service.principal)
        resource_proxy_service = self._kubectl.get_service(
            self._cluster, self._topology.namespace, Service.resource_proxy)

        try:
            node_port = principal_service['spec']['ports'][0]['nodePort']
        except (KeyError, IndexError):
            raise ValueError("Service {} has no spec.ports[0].nodePort, the principal is not exposed yet".format(
                Service.principal))

        endpoint = PrincipalEndpoint(
            external_ip=self._docker.container_ip(self._cluster.control_plane_container),
            node_port=node_port,
            dns_name=service_dns_name(principal_service),
            resource_proxy_ip=resource_proxy_service['spec']['clusterIP'],
            resource_proxy_dns_name=service_dns_name(resource_proxy_service)
        )
        self._logger.info("Principal reachable at {}:{}".format(endpoint.external_ip, endpoint.node_port))
        return endpoint

    def issue_principal_certificate(self, endpoint: PrincipalEndpoint):
        self._agentctl.pki_issue(
            'principal',
            [LOOPBACK_IP, endpoint.external_ip],
            [LOOPBACK_DNS, endpoint.dns_name]
        )

    def issue_resource_proxy_certificate(self, endpoint: PrincipalEndpoint):
        self._agentctl.pki_issue(
            'resource-proxy',
            [LOOPBACK_IP, endpoint.resource_proxy_ip],
            [LOOPBACK_DNS, endpoint.resource_proxy_dns_name]
        )

    def create_jwt_key(self):
        self._agentctl.jwt_create_key()

    def bootstrap(self) -> PrincipalEndpoint:
        step = self._state.step
        cluster = self._cluster

        self._logger.info("=== Creating Principal Cluster: {} ===".format(cluster.name))
        step(cluster, 'create-cluster', self.create_cluster)
        step(cluster, 'create-namespace', self.create_namespace)

        self._logger.info("=== Installing Argo CD on Principal ===")
        step(cluster, 'install-argocd', self.install_argocd)
        step(cluster, 'apps-in-any-namespace', self.enable_apps_in_any_namespace)

        self._logger.info("=== Initializing PKI ===")
        step(cluster, 'pki-init', self.init_pki)

        self._logger.info("=== Installing Principal ===")
        step(cluster, 'install-principal', self.install_principal)
        step(cluster, 'allowed-namespaces', self.allow_agent_namespaces)
        step(cluster, 'expose-principal', self.expose_principal)

        self._logger.info("=== Generating Principal Certificates ===")
        endpoint = self.discover()
        step(cluster, 'issue-principal-cert', lambda: self.issue_principal_certificate(endpoint))
        step(cluster, 'issue-resource-proxy-cert', lambda: self.issue_resource_proxy_certificate(endpoint))
        step(cluster, 'jwt-create-key', self.create_jwt_key)

        return endpoint
