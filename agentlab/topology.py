from invoke import task, Exit, Failure

from agentlab.controllers.AgentCtrl import AgentCtrl
from agentlab.controllers.PreflightCtrl import PreflightCtrl
from agentlab.controllers.PrincipalCtrl import PrincipalCtrl
from agentlab.dao.ProjectPaths import ProjectPaths
from agentlab.dao.RunJournal import RunJournal
from agentlab.dao.SystemContext import SystemContext
from agentlab.helpers import access_instructions, plan_table, user_confirmed
from agentlab.models.AddressPlan import agent_cluster_names, max_agent_count
from agentlab.models.Defaults import AGENT_CLUSTER_COUNT
from agentlab.models.TopologySpec import TopologySettings, Topology
from agentlab.wrappers import Logger
from agentlab.wrappers.Kind import Kind

logger = Logger.get(__name__)

ABORTED_HINT = ("Setup aborted, clusters are left in place. "
                "Fix the cause and rerun with --resume, or remove them with 'down'")


def get_settings(agent_count=AGENT_CLUSTER_COUNT, principal=None, namespace=None, mode=None,
                 release_branch=None, kind_image=None) -> TopologySettings:
    try:
        return TopologySettings.from_env(
            agent_count=agent_count,
            principal_name=principal,
            namespace=namespace,
            agent_mode=mode,
            release_branch=release_branch,
            kind_image=kind_image
        )
    except ValueError as err:
        raise Exit("Invalid topology settings: {}".format(err), code=1)


def get_journaled_settings(agent_count=None) -> TopologySettings:
    """
    Settings of the last run if there is one, the environment otherwise.
    agent_count, when given, replaces the recorded count only.
    """
    journal = RunJournal(ProjectPaths())
    if journal.settings is None:
        return get_settings(agent_count if agent_count is not None else AGENT_CLUSTER_COUNT)

    if agent_count is None:
        return journal.settings

    try:
        return TopologySettings.model_validate(dict(journal.settings.model_dump(), agent_count=agent_count))
    except ValueError as err:
        raise Exit("Invalid topology settings: {}".format(err), code=1)


def get_state(ctx, settings: TopologySettings, echo: bool = False, resume: bool = False) -> SystemContext:
    try:
        return SystemContext(ctx, settings, echo, resume)
    except ValueError as err:
        raise Exit("Invalid topology: {}".format(err), code=1)


def run_preflight(settings: TopologySettings):
    problems = PreflightCtrl(settings).problems()
    if len(problems) > 0:
        raise Exit("Preflight failed:\n" + "\n".join(problems), code=1)


def print_access_instructions(topology: Topology):
    print("\n".join(access_instructions(topology)))


@task(positional=['agent_count'])
def up(ctx, agent_count=AGENT_CLUSTER_COUNT, principal=None, namespace=None, mode=None, release_branch=None,
       kind_image=None, resume: bool = False, skip_preflight: bool = False, echo: bool = False):
    """
    Creates the principal cluster and [agent_count] agent clusters, default 1.
    """
    settings = get_settings(agent_count, principal, namespace, mode, release_branch, kind_image)
    state = get_state(ctx, settings, echo, resume)
    topology = state.topology

    logger.info("=== Configuration ===")
    logger.info("Principal Cluster: {}".format(topology.principal.name))
    logger.info("Agent Clusters: {}".format(" ".join([agent.name for agent in topology.agents])))
    logger.info("Namespace: {}".format(topology.namespace))
    logger.info("Agent Mode: {}".format(topology.agent_mode))
    logger.info("Release Branch: {}".format(topology.release_branch))

    if not skip_preflight:
        run_preflight(settings)

    try:
        state.begin()
    except ValueError as err:
        raise Exit(str(err), code=1)

    try:
        endpoint = PrincipalCtrl(state).bootstrap()
        for agent in topology.agents:
            AgentCtrl(state, agent, endpoint).bootstrap()
    except Failure:
        logger.error(ABORTED_HINT)
        raise
    except ValueError as err:
        logger.error(ABORTED_HINT)
        raise Exit(str(err), code=1)

    print_access_instructions(topology)


@task(positional=['agent_count'])
def principal(ctx, agent_count=AGENT_CLUSTER_COUNT, principal=None, namespace=None, mode=None,
              release_branch=None, kind_image=None, resume: bool = False, echo: bool = False):
    """
    Creates and configures the principal cluster only, [agent_count] sets its allowed namespaces.
    """
    settings = get_settings(agent_count, principal, namespace, mode, release_branch, kind_image)
    state = get_state(ctx, settings, echo, resume)
    try:
        state.begin()
    except ValueError as err:
        raise Exit(str(err), code=1)

    try:
        PrincipalCtrl(state).bootstrap()
    except ValueError as err:
        logger.error(ABORTED_HINT)
        raise Exit(str(err), code=1)


@task(positional=['index'])
def agent(ctx, index: int, resume: bool = False, echo: bool = False):
    """
    Bootstraps agent [index] (1-based) against an already configured principal.
    """
    state = get_state(ctx, get_journaled_settings(), echo, resume)
    try:
        cluster = state.topology.agent(int(index))
        endpoint = PrincipalCtrl(state).discover()
    except ValueError as err:
        raise Exit(str(err), code=1)

    AgentCtrl(state, cluster, endpoint).bootstrap()


@task(positional=['agent_count'])
def plan(ctx, agent_count=AGENT_CLUSTER_COUNT, principal=None):
    """
    Prints cluster names, contexts and CIDRs without creating anything.
    """
    settings = get_settings(agent_count, principal)
    try:
        topology = Topology.plan(settings)
    except ValueError as err:
        raise Exit("Invalid topology: {}".format(err), code=1)

    print(plan_table(topology))


@task()
def info(ctx, agent_count=None):
    """
    Prints how to reach Argo CD on the principal and list the connected agents.
    """
    print_access_instructions(Topology.plan(get_journaled_settings(agent_count)))


@task()
def preflight(ctx, release_branch=None):
    """
    Checks required binaries and that the release ref exists upstream.
    """
    run_preflight(get_settings(release_branch=release_branch))
    logger.info("Preflight passed")


@task()
def down(ctx, yes: bool = False, echo: bool = False):
    """
    USE WITH CAUTION! - Deletes the clusters created by the last run and its journal.
    """
    paths = ProjectPaths()
    journal = RunJournal(paths)
    kind = Kind(ctx, paths, echo)

    # Journaled clusters first, then whatever an earlier or cleared run left behind
    cluster_names = journal.clusters
    candidates = [get_journaled_settings().principal_name] + agent_cluster_names(max_agent_count())
    existing = kind.get_clusters()
    cluster_names += [name for name in candidates if name in existing and name not in cluster_names]

    if len(cluster_names) == 0:
        logger.info("No clusters to delete")
        journal.clear()
        return

    if not yes and not user_confirmed("Delete kind clusters {} ?".format(", ".join(cluster_names))):
        return

    for cluster_name in reversed(cluster_names):
        kind.delete_cluster(cluster_name)

    journal.clear()
