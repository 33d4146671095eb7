import re
from unittest.mock import patch

import pytest
import requests
from invoke import Exit, Result, UnexpectedExit

from conftest import commands, mock_context, cluster_results, PRINCIPAL_SVC_YAML, PRINCIPAL_NODE_PORT
from agentlab import topology
from agentlab.agents import list_agents
from agentlab.journal import show, clear
from agentlab.dao.ProjectPaths import ProjectPaths
from agentlab.dao.RunJournal import RunJournal, StepStatus


def kind_creates(ctx) -> list[str]:
    return [cmd.split()[4] for cmd in commands(ctx) if cmd.startswith('kind create cluster')]


def test_up_principal_only(ctx, project_root, capsys):
    topology.up(ctx, 0, skip_preflight=True)

    assert kind_creates(ctx) == ['argocd-hub']
    assert not any('agent create' in cmd for cmd in commands(ctx))
    assert "=== Setup Complete ===" in capsys.readouterr().out


def test_up_three_agents(ctx, project_root):
    topology.up(ctx, 3, skip_preflight=True)

    assert kind_creates(ctx) == ['argocd-hub', 'argocd-agent1', 'argocd-agent2', 'argocd-agent3']

    configs = [ProjectPaths().kind_config_file(name) for name in kind_creates(ctx)]
    pod_subnets = set()
    for config in configs:
        with open(config) as config_file:
            pod_subnets.add(re.search(r'podSubnet: "(.+)"', config_file.read()).group(1))
    assert pod_subnets == {'10.245.0.0/16', '10.246.0.0/16', '10.247.0.0/16', '10.248.0.0/16'}

    # principal wide, applied once per agent
    assert len([cmd for cmd in commands(ctx) if cmd.startswith('kubectl patch appproject default')]) == 3


def test_up_rejects_invalid_mode(ctx, project_root):
    with pytest.raises(Exit):
        topology.up(ctx, 1, mode='hybrid', skip_preflight=True)

    assert commands(ctx) == []


def test_up_rejects_too_many_agents(ctx, project_root):
    with pytest.raises(Exit):
        topology.up(ctx, 11, skip_preflight=True)


def test_up_stops_on_preflight_problems(ctx, project_root):
    with patch('agentlab.topology.PreflightCtrl') as preflight_ctrl:
        preflight_ctrl.return_value.problems.return_value = ['Required binary not found on PATH: kind']
        with pytest.raises(Exit):
            topology.up(ctx, 1)

    assert commands(ctx) == []


def test_failed_run_resumes(project_root):
    failing = mock_context(cluster_results({
        re.compile(r'^kubectl apply -n argocd -k ".*/kubernetes/agent\?'): Result(exited=1)
    }))

    with pytest.raises(UnexpectedExit):
        topology.up(failing, 1, skip_preflight=True)

    journal = RunJournal(ProjectPaths())
    assert journal.status('argocd-agent1', 'install-agent') == StepStatus.failed
    assert journal.is_done('argocd-hub', 'jwt-create-key')

    ctx = mock_context()
    topology.up(ctx, 1, resume=True, skip_preflight=True)

    assert kind_creates(ctx) == []
    assert not any(cmd.startswith('argocd-agentctl pki init') for cmd in commands(ctx))
    assert any('install/kubernetes/agent?ref=' in cmd for cmd in commands(ctx))
    assert RunJournal(ProjectPaths()).is_done('argocd-agent1', 'server-secret-key')


def test_plan_prints_table(ctx, project_root, capsys):
    topology.plan(ctx, 2)

    out = capsys.readouterr().out
    assert 'argocd-hub' in out
    assert 'argocd-agent2' in out
    assert '10.247.0.0/16' in out


def test_info_uses_last_run(ctx, project_root, capsys):
    topology.up(ctx, 2, principal='hub', skip_preflight=True)
    capsys.readouterr()

    topology.info(ctx)

    out = capsys.readouterr().out
    assert "kubectl port-forward svc/argocd-server -n argocd 8080:443 --context kind-hub" in out
    assert "Agent Clusters: argocd-agent1 argocd-agent2" in out
    assert "argocd-agentctl agent list --principal-context kind-hub --principal-namespace argocd" in out


def test_agent_task_bootstraps_one_agent(ctx, project_root):
    topology.up(ctx, 0, skip_preflight=True)

    journal = RunJournal(ProjectPaths())
    journal.start(journal.settings.model_copy(update={'agent_count': 2}))

    agent_ctx = mock_context()
    topology.agent(agent_ctx, '2')

    assert kind_creates(agent_ctx) == ['argocd-agent2']
    assert any(cmd.startswith('docker inspect') for cmd in commands(agent_ctx))


def test_down_deletes_journaled_clusters(ctx, project_root):
    topology.up(ctx, 1, skip_preflight=True)

    down_ctx = mock_context()
    topology.down(down_ctx, yes=True)

    assert commands(down_ctx) == [
        'kind get clusters',
        'kind delete cluster --name argocd-agent1',
        'kind delete cluster --name argocd-hub'
    ]
    assert not RunJournal(ProjectPaths()).exists()


def test_down_asks_first(ctx, project_root):
    topology.up(ctx, 0, skip_preflight=True)

    down_ctx = mock_context()
    with patch('agentlab.topology.user_confirmed', return_value=False):
        topology.down(down_ctx)

    assert not any(cmd.startswith('kind delete') for cmd in commands(down_ctx))
    assert RunJournal(ProjectPaths()).exists()


def test_down_without_journal_uses_kind(project_root):
    ctx = mock_context({
        'kind get clusters': Result('argocd-hub\nargocd-agent1\nsomething-else\n'),
        re.compile(r'.*'): Result('')
    })

    topology.down(ctx, yes=True)

    assert commands(ctx)[1:] == [
        'kind delete cluster --name argocd-agent1',
        'kind delete cluster --name argocd-hub'
    ]


def kind_reports(*cluster_names) -> dict:
    return {
        'kind get clusters': Result("\n".join(cluster_names) + "\n"),
        re.compile(r'.*'): Result('')
    }


def test_down_after_journal_clear_finds_every_agent(ctx, project_root):
    topology.up(ctx, 3, skip_preflight=True)
    clear(ctx)

    down_ctx = mock_context(kind_reports('argocd-agent1', 'argocd-agent2', 'argocd-agent3', 'argocd-hub'))
    topology.down(down_ctx, yes=True)

    assert commands(down_ctx)[1:] == [
        'kind delete cluster --name argocd-agent3',
        'kind delete cluster --name argocd-agent2',
        'kind delete cluster --name argocd-agent1',
        'kind delete cluster --name argocd-hub'
    ]


def test_down_also_removes_agents_of_an_earlier_larger_run(ctx, project_root):
    topology.up(ctx, 3, skip_preflight=True)
    topology.up(ctx, 1, skip_preflight=True)

    down_ctx = mock_context(kind_reports('argocd-agent1', 'argocd-agent2', 'argocd-agent3', 'argocd-hub'))
    topology.down(down_ctx, yes=True)

    assert commands(down_ctx)[1:] == [
        'kind delete cluster --name argocd-agent3',
        'kind delete cluster --name argocd-agent2',
        'kind delete cluster --name argocd-agent1',
        'kind delete cluster --name argocd-hub'
    ]


def test_up_offline_preflight_exits(ctx, project_root):
    with patch('agentlab.controllers.PreflightCtrl.shutil.which', return_value='/usr/bin/tool'), \
            patch('agentlab.wrappers.GitHub.requests.get', side_effect=requests.ConnectionError('offline')):
        with pytest.raises(Exit):
            topology.up(ctx, 1)

    assert commands(ctx) == []


def test_agent_task_against_unexposed_principal_exits(ctx, project_root):
    topology.up(ctx, 1, skip_preflight=True)

    unexposed = PRINCIPAL_SVC_YAML.replace('    nodePort: {}\n'.format(PRINCIPAL_NODE_PORT), '')
    agent_ctx = mock_context(cluster_results({
        re.compile(r'^kubectl get svc argocd-agent-principal '): Result(unexposed)
    }))

    with pytest.raises(Exit):
        topology.agent(agent_ctx, '1')

    assert kind_creates(agent_ctx) == []


def test_info_with_agent_count_keeps_last_run_principal(ctx, project_root, capsys):
    topology.up(ctx, 1, principal='hub', skip_preflight=True)
    capsys.readouterr()

    topology.info(ctx, '3')

    out = capsys.readouterr().out
    assert "Agent Clusters: argocd-agent1 argocd-agent2 argocd-agent3" in out
    assert "--context kind-hub" in out


def test_list_agents_against_journaled_principal(ctx, project_root):
    topology.up(ctx, 1, principal='hub', skip_preflight=True)

    list_ctx = mock_context()
    list_agents(list_ctx)

    assert commands(list_ctx) == [
        'argocd-agentctl agent list --principal-context kind-hub --principal-namespace argocd'
    ]


def test_journal_show(ctx, project_root, capsys):
    topology.up(ctx, 0, principal='hub', skip_preflight=True)
    capsys.readouterr()

    show(ctx)

    out = capsys.readouterr().out
    assert 'principal_name: hub' in out
    assert 'agent_count: 0' in out
    assert re.search(r'hub\s+jwt-create-key\s+done', out)


def test_journal_show_without_journal(ctx, project_root, capsys):
    show(ctx)

    assert "No journal at" in capsys.readouterr().out


def test_journal_clear_leaves_clusters(ctx, project_root):
    topology.up(ctx, 0, skip_preflight=True)

    clear_ctx = mock_context()
    clear(clear_ctx)

    assert commands(clear_ctx) == []
    assert not RunJournal(ProjectPaths()).exists()
