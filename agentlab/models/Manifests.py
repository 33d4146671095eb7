from enum import Enum

from agentlab.models.Defaults import AGENT_INSTALL_BASE_URL
from agentlab.models.TopologySpec import AgentMode


class Kustomization(Enum):
    argocd_principal = 'argo-cd/principal'
    principal = 'principal'
    agent = 'agent'

    def __str__(self):
        return self.value


def argocd_agent_base(mode: AgentMode) -> str:
    return "argo-cd/agent-{}".format(AgentMode(mode).value)


def kustomize_url(base, release_branch: str) -> str:
    """
    Remote kustomize base of the agent repository pinned to a git ref
    """
    return "{}/{}?ref={}".format(AGENT_INSTALL_BASE_URL, base, release_branch)
