"""Base model class for list definitions with serialization support."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class ListBaseModel(BaseModel):
    """Base model for list definitions.

    Definitions are validated on construction and on assignment. Arbitrary
    types are allowed so that definitions can carry callables.
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        use_enum_values=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to a dictionary, recursing into nested models.

        Callables are rendered with ``repr`` so the result stays JSON friendly.
        """
        data = self.model_dump(by_alias=False, exclude_none=True)

        def convert_nested(obj):
            if isinstance(obj, ListBaseModel):
                return obj.to_dict()
            elif isinstance(obj, dict):
                return {k: convert_nested(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_nested(item) for item in obj]
            elif callable(obj):
                return repr(obj)
            elif hasattr(obj, 'value'):  # enums
                return obj.value
            return obj

        return convert_nested(data)
