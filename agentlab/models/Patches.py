from agentlab.models.Defaults import AGENT_CREDENTIALS
from agentlab.models.TopologySpec import Topology, PrincipalEndpoint

AGENT_RBAC_VERBS = ["get", "list", "watch", "create", "update", "patch", "delete"]


def apps_in_any_namespace() -> dict:
    return {'data': {'application.namespaces': '*'}}


def principal_allowed_namespaces(topology: Topology) -> dict:
    return {'data': {'principal.allowed-namespaces': topology.allowed_namespaces}}


def node_port_service() -> dict:
    return {'spec': {'type': 'NodePort'}}


def agent_connection(topology: Topology, endpoint: PrincipalEndpoint) -> dict:
    return {
        'data': {
            'agent.server.address': endpoint.external_ip,
            'agent.server.port': str(endpoint.node_port),
            'agent.mode': topology.agent_mode.value,
            'agent.creds': AGENT_CREDENTIALS
        }
    }


def default_project_any_destination() -> dict:
    return {
        'spec': {
            'sourceNamespaces': ['*'],
            'destinations': [
                {'name': '*', 'namespace': '*', 'server': '*'}
            ]
        }
    }


def agent_rbac_rule() -> list:
    """
    JSON patch appending Argo CD CR permissions to the agent ClusterRole
    """
    return [
        {
            'op': 'add',
            'path': '/rules/-',
            'value': {
                'apiGroups': ['argoproj.io'],
                'resources': ['applications', 'appprojects'],
                'verbs': AGENT_RBAC_VERBS
            }
        }
    ]


def server_secret_key(secret_key_b64: str) -> dict:
    return {'data': {'server.secretkey': secret_key_b64}}
