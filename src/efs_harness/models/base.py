"""Base Pydantic model configuration for booking API models.

All wire models inherit from HarnessBaseModel to ensure consistent behavior:
- Immutability (frozen=True); changing a booking means model_copy(update=...)
- camelCase aliases, matching the adapter's JSON
- Unknown response fields are ignored, since the harness reads someone else's API
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HarnessBaseModel(BaseModel):
    """Base model for all booking API entities.

    Example:
        >>> class Sample(HarnessBaseModel):
        ...     service_id: str
        >>> Sample.model_validate({"serviceId": "bike"}).service_id
        'bike'
        >>> Sample(service_id="bike").model_dump(by_alias=True)
        {'serviceId': 'bike'}
    """

    model_config = ConfigDict(
        frozen=True,
        # Adapters add fields of their own
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
        validate_default=True,
    )

    def to_wire(self) -> dict:
        """Dump to the JSON-compatible dict sent to the adapter."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
