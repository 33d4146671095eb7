import requests

from agentlab.models.Defaults import GITHUB_API_URL
from agentlab.wrappers import Logger

# GitHub answers 422 for a ref that is not a valid sha, branch or tag
UNKNOWN_REF_STATUS_CODES = (404, 422)


class GitHub:

    _repo: str
    _timeout: int

    def __init__(self, repo: str, timeout: int = 10):
        self._logger = Logger.get(__name__)
        self._repo = repo
        self._timeout = timeout

    def ref_exists(self, ref: str) -> bool:
        """
        Branch, tag or sha; https://docs.github.com/en/rest/commits/commits#get-a-commit
        Raises requests.RequestException when GitHub can not tell, rate limits included.
        """
        url = "{}/repos/{}/commits/{}".format(GITHUB_API_URL, self._repo, ref)
        response = requests.get(url, timeout=self._timeout)
        if response.status_code == 200:
            return True

        if response.status_code in UNKNOWN_REF_STATUS_CODES:
            self._logger.debug("GitHub: {} answered {}".format(url, response.status_code))
            return False

        raise requests.HTTPError("{} answered {}".format(url, response.status_code), response=response)
