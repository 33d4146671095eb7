PRINCIPAL_CLUSTER_NAME = 'argocd-hub'
AGENT_CLUSTER_PREFIX = 'argocd-agent'
NAMESPACE_NAME = 'argocd'
AGENT_MODE = 'managed'
RELEASE_BRANCH = 'release-0.6'
KIND_IMAGE = 'kindest/node:v1.31.0'
AGENT_CLUSTER_COUNT = 1

PRINCIPAL_CLUSTER_ID = 1
MIN_CLUSTER_ID = 1
MAX_CLUSTER_ID = 11  # 244 + id must stay a valid octet

POD_CIDR_BASE_OCTET = 244
SVC_CIDR_BASE_OCTET = 96

RESOURCE_PROXY_PORT = 9090
AGENT_CREDENTIALS = 'mtls:any'

AGENT_REPO = 'argoproj-labs/argocd-agent'
AGENT_INSTALL_BASE_URL = 'https://github.com/{}/install/kubernetes'.format(AGENT_REPO)
GITHUB_API_URL = 'https://api.github.com'

PROJECT_ROOT_DIR = '.agentlab'
JOURNAL_FILE_NAME = 'journal.yaml'
KIND_CONFIG_FILE_NAME = 'kind-config.yaml'
KIND_CLUSTER_TEMPLATE = 'kind-cluster.jinja.yaml'

REQUIRED_BINARIES = ['kind', 'docker', 'kubectl', 'argocd-agentctl', 'openssl']
