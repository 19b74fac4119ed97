"""Template or computed specifications.

Filters, filter option conditions and value formatters can be declared
either as literal text or as a function producing the text. Both variants
are evaluated through ``render_spec``.
"""

from typing import Any, Callable, Optional, Union

from configurable_list.types.base import ListBaseModel


class Template(ListBaseModel):
    """Literal template text, returned as-is when rendered."""

    text: str

    def __init__(self, text: str, **data: Any):
        super().__init__(text=text, **data)


class Computed(ListBaseModel):
    """Function producing the template text from the render arguments."""

    function: Callable[..., Any]

    def __init__(self, function: Callable[..., Any], **data: Any):
        super().__init__(function=function, **data)


Spec = Union[Template, Computed]


def as_spec(value: Any) -> Optional[Spec]:
    """Coerce a declared string or callable into a spec.

    Raises:
        ValueError: If the value is neither text nor callable
    """
    if value is None or isinstance(value, (Template, Computed)):
        return value
    if isinstance(value, str):
        return Template(value)
    if callable(value):
        return Computed(value)
    raise ValueError(f"Expected a string or a callable, got {type(value).__name__}")


def render_spec(spec: Spec, *args: Any) -> Any:
    """Evaluate a spec.

    A template ignores the arguments; a computed spec is called with them.
    """
    if isinstance(spec, Computed):
        return spec.function(*args)
    return spec.text
