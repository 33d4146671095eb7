import shutil

import requests

from agentlab.models.Defaults import REQUIRED_BINARIES, AGENT_REPO
from agentlab.models.TopologySpec import TopologySettings
from agentlab.wrappers import Logger
from agentlab.wrappers.GitHub import GitHub


class PreflightCtrl:
    """
    Checks that can fail before any cluster gets created.
    """
    _settings: TopologySettings

    def __init__(self, settings: TopologySettings):
        self._settings = settings
        self._logger = Logger.get(__name__)

    def missing_binaries(self) -> list[str]:
        return [binary for binary in REQUIRED_BINARIES if shutil.which(binary) is None]

    def release_ref_exists(self) -> bool:
        return GitHub(AGENT_REPO).ref_exists(self._settings.release_branch)

    def problems(self) -> list[str]:
        problems = list()
        for binary in self.missing_binaries():
            problems.append("Required binary not found on PATH: {}".format(binary))

        try:
            if not self.release_ref_exists():
                problems.append("Release ref {} not found in {}".format(self._settings.release_branch, AGENT_REPO))
        except requests.RequestException as err:
            problems.append("Could not verify release ref {} in {}: {}".format(
                self._settings.release_branch, AGENT_REPO, err))

        for problem in problems:
            self._logger.error(problem)

        return problems
