import os
import re
from enum import Enum
from typing import Any, Optional

from packaging.version import Version, InvalidVersion
from pydantic import BaseModel, field_validator, model_validator

from agentlab.models import Defaults
from agentlab.models.AddressPlan import pod_cidr, svc_cidr, agent_cluster_id, agent_cluster_names, \
    check_collisions, max_agent_count

RELEASE_REF_PATTERN = re.compile(r'^(release-|v)(?P<version>.+)$')


class AgentMode(str, Enum):
    managed = 'managed'
    autonomous = 'autonomous'

    def __str__(self):
        return self.value


class ClusterRole(str, Enum):
    principal = 'principal'
    agent = 'agent'

    def __str__(self):
        return self.value


def validate_release_ref(ref: str) -> str:
    """
    Accepts 'main', 'release-X.Y[.Z]' branches and 'vX.Y.Z' tags of the agent repository.
    """
    if ref == 'main':
        return ref

    match = RELEASE_REF_PATTERN.match(ref)
    if match is None:
        raise ValueError("Unsupported release ref '{}', expected main, release-X.Y or vX.Y.Z".format(ref))

    try:
        Version(match.group('version'))
    except InvalidVersion:
        raise ValueError("Release ref '{}' does not carry a valid version".format(ref))

    return ref


class TopologySettings(BaseModel):
    principal_name: str = Defaults.PRINCIPAL_CLUSTER_NAME
    agent_count: int = Defaults.AGENT_CLUSTER_COUNT
    namespace: str = Defaults.NAMESPACE_NAME
    agent_mode: AgentMode = AgentMode(Defaults.AGENT_MODE)
    release_branch: str = Defaults.RELEASE_BRANCH
    kind_image: str = Defaults.KIND_IMAGE

    @field_validator('agent_count')
    @classmethod
    def agent_count_in_range(cls, value: int) -> int:
        if not 0 <= value <= max_agent_count():
            raise ValueError("Agent count {} out of range [0, {}]".format(value, max_agent_count()))
        return value

    @field_validator('release_branch')
    @classmethod
    def release_branch_supported(cls, value: str) -> str:
        return validate_release_ref(value)

    @classmethod
    def from_env(cls, **overrides):
        """
        Defaults <- environment (PRINCIPAL_CLUSTER_NAME, NAMESPACE_NAME, AGENT_MODE, RELEASE_BRANCH, KIND_IMAGE)
        <- explicit overrides, None means not given.
        """
        values = dict()
        env = {
            'principal_name': 'PRINCIPAL_CLUSTER_NAME',
            'namespace': 'NAMESPACE_NAME',
            'agent_mode': 'AGENT_MODE',
            'release_branch': 'RELEASE_BRANCH',
            'kind_image': 'KIND_IMAGE',
        }
        for field, env_name in env.items():
            if os.environ.get(env_name):
                values[field] = os.environ.get(env_name)

        for field, value in overrides.items():
            if value is not None:
                values[field] = value

        return cls(**values)


class ClusterDescriptor(BaseModel):
    name: str
    cluster_id: int
    role: ClusterRole
    pod_cidr: str
    svc_cidr: str

    @classmethod
    def build(cls, name: str, cluster_id: int, role: ClusterRole):
        return cls(
            name=name,
            cluster_id=cluster_id,
            role=role,
            pod_cidr=pod_cidr(cluster_id),
            svc_cidr=svc_cidr(cluster_id)
        )

    @property
    def context(self) -> str:
        return "kind-{}".format(self.name)

    @property
    def control_plane_container(self) -> str:
        return "{}-control-plane".format(self.name)


class Topology(BaseModel):
    principal: ClusterDescriptor
    agents: list[ClusterDescriptor] = []
    namespace: str = Defaults.NAMESPACE_NAME
    agent_mode: AgentMode = AgentMode(Defaults.AGENT_MODE)
    release_branch: str = Defaults.RELEASE_BRANCH
    kind_image: str = Defaults.KIND_IMAGE

    @model_validator(mode='after')
    def check_addressing(self):
        if self.principal.cluster_id != Defaults.PRINCIPAL_CLUSTER_ID:
            raise ValueError("Principal must use cluster id {}".format(Defaults.PRINCIPAL_CLUSTER_ID))

        for index, agent in enumerate(self.agents, start=1):
            if agent.cluster_id != agent_cluster_id(index):
                raise ValueError("Agent {} must use cluster id {}, got {}".format(
                    agent.name, agent_cluster_id(index), agent.cluster_id))

        clusters = list(self)
        if len({cluster.name for cluster in clusters}) != len(clusters):
            raise ValueError("Cluster names must be unique")
        if len({cluster.cluster_id for cluster in clusters}) != len(clusters):
            raise ValueError("Cluster ids must be unique")

        check_collisions({cluster.name: cluster.pod_cidr for cluster in clusters})
        return self

    @classmethod
    def plan(cls, settings: TopologySettings):
        agents = list()
        for index, name in enumerate(agent_cluster_names(settings.agent_count), start=1):
            agents.append(ClusterDescriptor.build(name, agent_cluster_id(index), ClusterRole.agent))

        return cls(
            principal=ClusterDescriptor.build(
                settings.principal_name,
                Defaults.PRINCIPAL_CLUSTER_ID,
                ClusterRole.principal
            ),
            agents=agents,
            namespace=settings.namespace,
            agent_mode=settings.agent_mode,
            release_branch=settings.release_branch,
            kind_image=settings.kind_image
        )

    @property
    def allowed_namespaces(self) -> str:
        return ",".join([agent.name for agent in self.agents])

    def agent(self, index: int) -> ClusterDescriptor:
        """
        index is 1-based
        """
        if not 1 <= index <= len(self.agents):
            raise ValueError("Agent index {} out of range [1, {}]".format(index, len(self.agents)))
        return self.agents[index - 1]

    def __contains__(self, cluster: Any):
        if type(cluster) is ClusterDescriptor:
            cluster_name = cluster.name
        else:
            cluster_name = cluster

        return any(member.name == cluster_name for member in self)

    def __iter__(self):
        return iter([self.principal] + list(self.agents))


class PrincipalEndpoint(BaseModel):
    external_ip: str
    node_port: int
    dns_name: str
    resource_proxy_ip: Optional[str] = None
    resource_proxy_dns_name: Optional[str] = None

    @property
    def resource_proxy_address(self) -> str:
        return "{}:{}".format(self.external_ip, Defaults.RESOURCE_PROXY_PORT)
