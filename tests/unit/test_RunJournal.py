import os

from agentlab.dao.RunJournal import RunJournal, StepStatus
from agentlab.models.TopologySpec import TopologySettings


def test_new_journal_is_empty(paths):
    journal = RunJournal(paths)

    assert journal.exists() is False
    assert journal.settings is None
    assert journal.steps == []
    assert journal.clusters == []


def test_journal_survives_reload(paths):
    settings = TopologySettings(agent_count=2, agent_mode='autonomous')
    journal = RunJournal(paths)
    journal.start(settings)
    journal.cluster_created('argocd-hub')
    journal.record('argocd-hub', 'create-cluster', StepStatus.done)
    journal.record('argocd-hub', 'pki-init', StepStatus.failed)

    assert os.path.isfile(paths.journal_file())

    reloaded = RunJournal(paths)
    assert reloaded.settings == settings
    assert reloaded.clusters == ['argocd-hub']
    assert reloaded.is_done('argocd-hub', 'create-cluster') is True
    assert reloaded.is_done('argocd-hub', 'pki-init') is False
    assert reloaded.status('argocd-hub', 'pki-init') == StepStatus.failed
    assert reloaded.status('argocd-agent1', 'create-cluster') is None


def test_last_status_wins(paths):
    journal = RunJournal(paths)
    journal.record('argocd-hub', 'pki-init', StepStatus.failed)
    journal.record('argocd-hub', 'pki-init', StepStatus.done)

    assert len(journal.steps) == 1
    assert journal.is_done('argocd-hub', 'pki-init')


def test_cluster_recorded_once(paths):
    journal = RunJournal(paths)
    journal.cluster_created('argocd-hub')
    journal.cluster_created('argocd-hub')

    assert journal.clusters == ['argocd-hub']


def test_start_forgets_previous_run(paths):
    journal = RunJournal(paths)
    journal.record('argocd-hub', 'create-cluster', StepStatus.done)
    journal.start(TopologySettings(agent_count=0))

    assert journal.steps == []
    assert RunJournal(paths).steps == []


def test_clear(paths):
    journal = RunJournal(paths)
    journal.start(TopologySettings())
    journal.clear()

    assert not os.path.isfile(paths.journal_file())
    assert journal.settings is None
