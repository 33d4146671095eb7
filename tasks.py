from agentlab import ns  # noqa: F401, picked up by 'invoke' run from the repository root
