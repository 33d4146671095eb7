from invoke import Context

NETWORK_IP_FORMAT = "'{{range .NetworkSettings.Networks}}{{.IPAddress}}{{end}}'"


class Docker:

    _ctx: Context
    _echo: bool

    def __init__(self, ctx: Context, echo: bool = False):
        self._ctx = ctx
        self._echo = echo

    def container_ip(self, container: str) -> str:
        """
        Address of the container on its docker network, reachable from the other kind nodes
        """
        return self._ctx.run(
            "docker inspect -f " + NETWORK_IP_FORMAT + " " + container,
            hide='stdout', echo=self._echo).stdout.strip()
