import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from pydantic_yaml import parse_yaml_raw_as, to_yaml_str

from agentlab.dao.ProjectPaths import ProjectPaths, mkdirs
from agentlab.models.TopologySpec import TopologySettings


class StepStatus(str, Enum):
    done = 'done'
    failed = 'failed'

    def __str__(self):
        return self.value


class StepRecord(BaseModel):
    cluster: str
    step: str
    status: StepStatus


class JournalModel(BaseModel):
    # Settings of the run that produced this journal, a resume must use the same ones
    settings: Optional[TopologySettings] = None
    # Clusters created so far, in creation order, used by teardown
    clusters: list[str] = []
    steps: list[StepRecord] = []


class RunJournal:
    """
    Persisted record of the bootstrap steps of one topology run.
    Steps are keyed by (cluster, step), the last recorded status wins.
    """
    _paths: ProjectPaths
    _journal: JournalModel

    def __init__(self, paths: ProjectPaths):
        self._paths = paths
        if os.path.isfile(self._paths.journal_file()):
            self._read()
        else:
            self._journal = JournalModel()

    def _read(self):
        with open(self._paths.journal_file()) as journal_file:
            self._journal = parse_yaml_raw_as(JournalModel, journal_file.read())

    def _save(self):
        mkdirs(self._paths.project_root())
        with open(self._paths.journal_file(), 'w') as journal_file:
            journal_file.write(to_yaml_str(self._journal))

    @property
    def settings(self) -> Optional[TopologySettings]:
        return self._journal.settings

    @property
    def clusters(self) -> list[str]:
        return list(self._journal.clusters)

    @property
    def steps(self) -> list[StepRecord]:
        return list(self._journal.steps)

    def exists(self) -> bool:
        return os.path.isfile(self._paths.journal_file())

    def start(self, settings: TopologySettings):
        self._journal = JournalModel(settings=settings)
        self._save()

    def status(self, cluster_name: str, step: str) -> Optional[StepStatus]:
        for record in self._journal.steps:
            if record.cluster == cluster_name and record.step == step:
                return record.status
        return None

    def is_done(self, cluster_name: str, step: str) -> bool:
        return self.status(cluster_name, step) == StepStatus.done

    def record(self, cluster_name: str, step: str, status: StepStatus):
        self._journal.steps = [
            record for record in self._journal.steps
            if not (record.cluster == cluster_name and record.step == step)
        ]
        self._journal.steps.append(StepRecord(cluster=cluster_name, step=step, status=status))
        self._save()

    def cluster_created(self, cluster_name: str):
        if cluster_name not in self._journal.clusters:
            self._journal.clusters.append(cluster_name)
            self._save()

    def clear(self):
        if self.exists():
            os.remove(self._paths.journal_file())
        self._journal = JournalModel()
