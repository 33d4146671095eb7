from invoke import task

from agentlab.models.TopologySpec import Topology
from agentlab.topology import get_journaled_settings
from agentlab.wrappers.AgentCtl import AgentCtl


@task(name='list')
def list_agents(ctx, echo: bool = False):
    """
    Lists the agents registered on the principal
    """
    topology = Topology.plan(get_journaled_settings())
    AgentCtl(ctx, topology.principal, topology.namespace, echo).agent_list()
