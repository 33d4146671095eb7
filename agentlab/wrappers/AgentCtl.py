from invoke import Context

from agentlab.models.TopologySpec import ClusterDescriptor


def principal_cmd(principal: ClusterDescriptor, namespace: str) -> str:
    return "--principal-context {} --principal-namespace {}".format(principal.context, namespace)


def agent_list_command(principal: ClusterDescriptor, namespace: str) -> str:
    return "argocd-agentctl agent list {}".format(principal_cmd(principal, namespace))


class AgentCtl:
    """
    argocd-agentctl, PKI and agent management against the principal
    """

    _ctx: Context
    _principal: ClusterDescriptor
    _namespace: str
    _echo: bool

    def __init__(self, ctx: Context, principal: ClusterDescriptor, namespace: str, echo: bool = False):
        self._ctx = ctx
        self._principal = principal
        self._namespace = namespace
        self._echo = echo

    def _principal_cmd(self) -> str:
        return principal_cmd(self._principal, self._namespace)

    def _agent_cmd(self, agent: ClusterDescriptor) -> str:
        return "--agent-context {} --agent-namespace {}".format(
            agent.context,
            self._namespace
        )

    def pki_init(self):
        # No --upsert, a second init against the same principal fails
        self._ctx.run("argocd-agentctl pki init {}".format(self._principal_cmd()), echo=self._echo)

    def pki_issue(self, role: str, ips: list[str], dns: list[str]):
        """
        role: principal or resource-proxy
        """
        self._ctx.run("argocd-agentctl pki issue {} {} --ip {} --dns {} --upsert".format(
            role,
            self._principal_cmd(),
            ",".join(ips),
            ",".join(dns)
        ), echo=self._echo)

    def pki_issue_agent(self, agent: ClusterDescriptor):
        self._ctx.run("argocd-agentctl pki issue agent {} --principal-context {} {} --upsert".format(
            agent.name,
            self._principal.context,
            self._agent_cmd(agent)
        ), echo=self._echo)

    def pki_propagate(self, agent: ClusterDescriptor):
        self._ctx.run("argocd-agentctl pki propagate {} {}".format(
            self._principal_cmd(),
            self._agent_cmd(agent)
        ), echo=self._echo)

    def jwt_create_key(self):
        self._ctx.run("argocd-agentctl jwt create-key {} --upsert".format(self._principal_cmd()), echo=self._echo)

    def agent_create(self, agent: ClusterDescriptor, resource_proxy_server: str, password: str):
        # never echoed, carries the resource proxy password
        self._ctx.run(
            "argocd-agentctl agent create {} {} "
            "--resource-proxy-server {} "
            "--resource-proxy-username {} "
            "--resource-proxy-password \"{}\"".format(
                agent.name,
                self._principal_cmd(),
                resource_proxy_server,
                agent.name,
                password
            ), echo=False)

    def agent_list(self) -> str:
        return self._ctx.run(agent_list_command(self._principal, self._namespace), echo=self._echo).stdout
