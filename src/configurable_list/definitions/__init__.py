"""List definitions: columns, joins, qualifiers and their registries."""

from configurable_list.definitions.column import Column
from configurable_list.definitions.filters import FilterOption
from configurable_list.definitions.join import Join
from configurable_list.definitions.qualifier import Qualifier
from configurable_list.definitions.registry import NamedRegistry, OrderedRegistry
from configurable_list.definitions.specs import Computed, Spec, Template, as_spec, render_spec

__all__ = [
    "Column",
    "FilterOption",
    "Join",
    "Qualifier",
    "NamedRegistry",
    "OrderedRegistry",
    "Computed",
    "Spec",
    "Template",
    "as_spec",
    "render_spec",
]
