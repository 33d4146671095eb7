import re
from unittest.mock import Mock

import pytest
from invoke import MockContext, Result, UnexpectedExit

from agentlab.dao.ProjectPaths import ProjectPaths
from agentlab.models.TopologySpec import TopologySettings

PRINCIPAL_EXTERNAL_IP = '172.18.0.2'
PRINCIPAL_NODE_PORT = 30443
RESOURCE_PROXY_IP = '10.97.12.34'
RANDOM_B64 = 'c2VjcmV0LXNlY3JldC1zZWNyZXQ='

PRINCIPAL_SVC_YAML = """
apiVersion: v1
kind: Service
metadata:
  name: argocd-agent-principal
  namespace: argocd
spec:
  type: NodePort
  clusterIP: 10.97.0.10
  ports:
  - name: https
    port: 443
    nodePort: {}
""".format(PRINCIPAL_NODE_PORT)

RESOURCE_PROXY_SVC_YAML = """
apiVersion: v1
kind: Service
metadata:
  name: argocd-agent-resource-proxy
  namespace: argocd
spec:
  type: ClusterIP
  clusterIP: {}
  ports:
  - port: 9090
""".format(RESOURCE_PROXY_IP)

ENV_OVERRIDES = ['PRINCIPAL_CLUSTER_NAME', 'NAMESPACE_NAME', 'AGENT_MODE', 'RELEASE_BRANCH', 'KIND_IMAGE']


def cluster_results(extra: dict = None) -> dict:
    results = {}
    results.update({
        re.compile(r'^kubectl get svc argocd-agent-principal '): Result(PRINCIPAL_SVC_YAML),
        re.compile(r'^kubectl get svc argocd-agent-resource-proxy '): Result(RESOURCE_PROXY_SVC_YAML),
        re.compile(r'^docker inspect '): Result(PRINCIPAL_EXTERNAL_IP + '\n'),
        re.compile(r'^openssl rand '): Result(RANDOM_B64 + '\n'),
    })
    results.update(extra or {})
    results[re.compile(r'.*')] = Result('')
    return results


def mock_context(results: dict = None) -> MockContext:
    """
    Canned results per command; like a real Context, a non-zero exit raises unless warn=True
    """
    ctx = MockContext(run=cluster_results() if results is None else results, repeat=True)
    canned_run = ctx.run

    def run(command, *args, **kwargs):
        result = canned_run(command, *args, **kwargs)
        if result.exited != 0 and not kwargs.get('warn', False):
            raise UnexpectedExit(result)
        return result

    ctx._set(run=Mock(side_effect=run))
    return ctx


def commands(ctx) -> list[str]:
    return [call.args[0] for call in ctx.run.call_args_list]


@pytest.fixture()
def project_root(monkeypatch, tmp_path):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    root = tmp_path / 'agentlab'
    monkeypatch.setenv('AGENTLAB_ROOT', str(root))
    return root


@pytest.fixture()
def paths(project_root):
    return ProjectPaths(root=str(project_root))


@pytest.fixture()
def settings(project_root):
    return TopologySettings(agent_count=2)


@pytest.fixture()
def ctx():
    return mock_context()
