from importlib.metadata import version, PackageNotFoundError

from invoke import Program

from agentlab import ns


def get_version() -> str:
    try:
        return version('agentlab')
    except PackageNotFoundError:
        return 'unknown'


program = Program(namespace=ns, version=get_version())
