from tabulate import tabulate

from agentlab.models.Resources import Service, Secret
from agentlab.models.TopologySpec import Topology
from agentlab.wrappers.AgentCtl import agent_list_command


def user_confirmed(msg=None) -> bool:
    if msg is None:
        msg = 'Continue ?'

    msg += ' [y/N] '

    user_input = input(msg)
    return user_input.strip().lower() == 'y'


def plan_table(topology: Topology) -> str:
    headers = ['cluster', 'role', 'id', 'context', 'pod cidr', 'service cidr']
    table = []
    for cluster in topology:
        table.append([
            cluster.name,
            cluster.role.value,
            cluster.cluster_id,
            cluster.context,
            cluster.pod_cidr,
            cluster.svc_cidr
        ])

    return tabulate(table, headers=headers)


def access_instructions(topology: Topology) -> list[str]:
    principal = topology.principal
    namespace = topology.namespace

    return [
        "",
        "=== Setup Complete ===",
        "Principal Cluster: {}".format(principal.context),
        "Agent Clusters: {}".format(" ".join([agent.name for agent in topology.agents])),
        "",
        "To access ArgoCD UI:",
        "  kubectl port-forward svc/{} -n {} 8080:443 --context {}".format(
            Service.argocd_server, namespace, principal.context),
        "",
        "Get admin password:",
        "  kubectl -n {} get secret {} --context {} -o jsonpath='{{.data.password}}' | base64 -d".format(
            namespace, Secret.initial_admin, principal.context),
        "",
        "List connected agents:",
        "  " + agent_list_command(principal, namespace),
    ]
