from configurable_list.dependencies.resolver import JoinDependencies

__all__ = ["JoinDependencies"]
