from enum import Enum


class Deployment(Enum):
    argocd_server = 'argocd-server'
    principal = 'argocd-agent-principal'
    agent = 'argocd-agent-agent'

    def __str__(self):
        return self.value


class ConfigMap(Enum):
    cmd_params = 'argocd-cmd-params-cm'
    agent_params = 'argocd-agent-params'

    def __str__(self):
        return self.value


class Service(Enum):
    argocd_server = 'argocd-server'
    principal = 'argocd-agent-principal'
    resource_proxy = 'argocd-agent-resource-proxy'

    def __str__(self):
        return self.value


class Secret(Enum):
    argocd = 'argocd-secret'
    initial_admin = 'argocd-initial-admin-secret'

    def __str__(self):
        return self.value


class RbacClusterRole(Enum):
    agent = 'argocd-agent-agent'

    def __str__(self):
        return self.value


class AppProject(Enum):
    default = 'default'

    def __str__(self):
        return self.value
