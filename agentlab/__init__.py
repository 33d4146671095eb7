from invoke import Collection

from . import agents
from . import journal
from . import topology

ns = Collection.from_module(topology)
ns.add_collection(agents)
ns.add_collection(journal)
