from invoke import task
from pydantic_yaml import to_yaml_str
from tabulate import tabulate

from agentlab.dao.ProjectPaths import ProjectPaths
from agentlab.dao.RunJournal import RunJournal


@task()
def show(ctx):
    """
    Prints the settings and the recorded steps of the last run
    """
    paths = ProjectPaths()
    journal = RunJournal(paths)
    if not journal.exists():
        print("No journal at {}".format(paths.journal_file()))
        return

    if journal.settings is not None:
        print(to_yaml_str(journal.settings))

    print(tabulate(
        [[record.cluster, record.step, record.status.value] for record in journal.steps],
        headers=['cluster', 'step', 'status']
    ))


@task()
def clear(ctx):
    """
    Forgets the last run; clusters are left untouched
    """
    RunJournal(ProjectPaths()).clear()
