from configurable_list.lists.base import ConfigurableList, evaluation_scope

__all__ = ["ConfigurableList", "evaluation_scope"]
