import ipcalc

from agentlab.models.Defaults import MIN_CLUSTER_ID, MAX_CLUSTER_ID, POD_CIDR_BASE_OCTET, \
    SVC_CIDR_BASE_OCTET, PRINCIPAL_CLUSTER_ID, AGENT_CLUSTER_PREFIX


def validate_cluster_id(cluster_id: int) -> int:
    if not MIN_CLUSTER_ID <= cluster_id <= MAX_CLUSTER_ID:
        raise ValueError("Cluster id {} out of range [{}, {}], the derived CIDR octet would overflow".format(
            cluster_id,
            MIN_CLUSTER_ID,
            MAX_CLUSTER_ID
        ))

    return cluster_id


def pod_cidr(cluster_id: int) -> str:
    return "10.{}.0.0/16".format(POD_CIDR_BASE_OCTET + validate_cluster_id(cluster_id))


def svc_cidr(cluster_id: int) -> str:
    return "10.{}.0.0/12".format(SVC_CIDR_BASE_OCTET + validate_cluster_id(cluster_id))


def agent_cluster_id(index: int) -> int:
    """
    index is 1-based, id 1 belongs to the principal
    """
    return validate_cluster_id(index + PRINCIPAL_CLUSTER_ID)


def agent_cluster_names(count: int) -> list[str]:
    return ["{}{}".format(AGENT_CLUSTER_PREFIX, index) for index in range(1, count + 1)]


def max_agent_count() -> int:
    return MAX_CLUSTER_ID - PRINCIPAL_CLUSTER_ID


def check_collisions(cidrs: dict[str, str]):
    """
    cidrs: cluster name => CIDR. Raises ValueError on the first pair of colliding networks.
    """
    names = list(cidrs.keys())
    for index, name in enumerate(names):
        network = ipcalc.Network(cidrs[name])
        for other_name in names[index + 1:]:
            if network.check_collision(cidrs[other_name]):
                raise ValueError("CIDR {} of {} collides with {} of {}".format(
                    cidrs[name],
                    name,
                    cidrs[other_name],
                    other_name
                ))
