from typing import Callable

from invoke import Context

from agentlab.dao.ProjectPaths import ProjectPaths
from agentlab.dao.RunJournal import RunJournal, StepStatus
from agentlab.models.TopologySpec import Topology, TopologySettings, ClusterDescriptor
from agentlab.wrappers import Logger


class SystemContext:
    """
    Everything a bootstrap stage needs: the invoke context, the planned topology,
    where to keep local files and the journal of what was already done.
    """
    _ctx: Context
    _echo: bool
    _resume: bool
    _settings: TopologySettings
    _topology: Topology
    _project_paths: ProjectPaths
    _journal: RunJournal

    def __init__(self, ctx: Context, settings: TopologySettings, echo: bool = False, resume: bool = False,
                 project_paths: ProjectPaths = None):
        self._ctx = ctx
        self._echo = echo
        self._resume = resume
        self._settings = settings
        self._topology = Topology.plan(settings)
        if project_paths is None:
            self._project_paths = ProjectPaths()
        else:
            self._project_paths = project_paths
        self._journal = RunJournal(self._project_paths)
        self._logger = Logger.get(__name__)

    @property
    def ctx(self) -> Context:
        return self._ctx

    @property
    def echo(self) -> bool:
        return self._echo

    @property
    def resume(self) -> bool:
        return self._resume

    @property
    def settings(self) -> TopologySettings:
        return self._settings

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def project_paths(self) -> ProjectPaths:
        return self._project_paths

    @property
    def journal(self) -> RunJournal:
        return self._journal

    def begin(self):
        """
        Fresh run: new journal. Resumed run: the journal must come from the same settings.
        """
        if not self._resume:
            self._journal.start(self._settings)
            return

        if self._journal.settings is None:
            raise ValueError("Nothing to resume, no journal at {}".format(self._project_paths.journal_file()))

        if self._journal.settings != self._settings:
            raise ValueError("Journal was written for different settings: {}".format(
                self._journal.settings.model_dump()))

    def step(self, cluster: ClusterDescriptor, step: str, action: Callable[[], None]):
        if self._resume and self._journal.is_done(cluster.name, step):
            self._logger.info("Skipping {} on {}, already done".format(step, cluster.name))
            return

        try:
            action()
        except Exception:
            self._journal.record(cluster.name, step, StepStatus.failed)
            self._logger.error("Step {} failed on {}".format(step, cluster.name))
            raise

        self._journal.record(cluster.name, step, StepStatus.done)
