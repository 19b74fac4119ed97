from configurable_list.types.base import ListBaseModel

__all__ = ["ListBaseModel"]
