import json

import yaml
from invoke import Context

from agentlab.models.TopologySpec import ClusterDescriptor


def service_dns_name(service: dict) -> str:
    return "{}.{}.svc.cluster.local".format(
        service['metadata']['name'],
        service['metadata']['namespace']
    )


class Kubectl:

    _ctx: Context
    _echo: bool

    def __init__(self, ctx: Context, echo: bool = False):
        self._ctx = ctx
        self._echo = echo

    def create_namespace(self, cluster: ClusterDescriptor, namespace: str):
        self._ctx.run("kubectl create namespace {} --context {}".format(
            namespace,
            cluster.context
        ), echo=self._echo)

    def apply_kustomization(self, cluster: ClusterDescriptor, namespace: str, url: str, server_side: bool = False):
        self._ctx.run("kubectl apply {}-n {} -k \"{}\" --context {}".format(
            "--server-side=true " if server_side else '',
            namespace,
            url,
            cluster.context
        ), echo=self._echo)

    def patch(self, cluster: ClusterDescriptor, resource: str, name, payload, namespace: str = None,
              patch_type: str = None, echo: bool = None):
        """
        patch_type: None for kubectl's default strategic merge, 'merge' or 'json'
        """
        namespace_cmd = "-n {} ".format(namespace) if namespace is not None else ''
        type_cmd = "--type={} ".format(patch_type) if patch_type is not None else ''

        self._ctx.run("kubectl patch {} {} {}--context {} {}--patch '{}'".format(
            resource,
            name,
            namespace_cmd,
            cluster.context,
            type_cmd,
            json.dumps(payload)
        ), echo=self._echo if echo is None else echo)

    def rollout_restart(self, cluster: ClusterDescriptor, namespace: str, deployment):
        self._ctx.run("kubectl rollout restart deployment {} -n {} --context {}".format(
            deployment,
            namespace,
            cluster.context
        ), echo=self._echo)

    def get_service(self, cluster: ClusterDescriptor, namespace: str, name) -> dict:
        service = self._ctx.run("kubectl get svc {} -n {} --context {} -o yaml".format(
            name,
            namespace,
            cluster.context
        ), hide='stdout', echo=self._echo).stdout

        return dict(yaml.safe_load(service))
