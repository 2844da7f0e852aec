from typing import Any
from typing import Optional

from pydantic import Field
from pydantic import ValidatorFunctionWrapHandler
from pydantic import field_validator
from pydantic import model_validator
from pydantic_core import PydanticCustomError
from typing_extensions import Self

from .message import Message


class ListResponse(Message):
    """Envelope of list and query results, :rfc:`RFC7644 §3.4.2 <7644#section-3.4.2>`.

    Resources can be given as :class:`~scim2_mapper.Resource` instances,
    they are stored as their wire representation.
    """

    schemas: list[str] = ["urn:ietf:params:scim:api:messages:2.0:ListResponse"]

    total_results: Optional[int] = None
    """The total number of results returned by the list or query operation."""

    start_index: Optional[int] = None
    """The 1-based index of the first result in the current set of list
    results."""

    items_per_page: Optional[int] = None
    """The number of resources returned in a list response page."""

    resources: Optional[list[dict[str, Any]]] = Field(
        None, serialization_alias="Resources"
    )
    """A multi-valued list of complex objects containing the requested
    resources."""

    @field_validator("resources", mode="before")
    @classmethod
    def dump_resources(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [
                item.to_dict() if hasattr(item, "to_dict") else item for item in value
            ]
        return value

    @model_validator(mode="wrap")
    @classmethod
    def check_results_number(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> Self:
        """Validate result numbers.

        :rfc:`RFC7644 §3.4.2 <7644#section-3.4.2.4>` indicates that
        'resources' must be set if 'totalResults' is non-zero.
        """
        obj = handler(value)
        assert isinstance(obj, cls)

        if obj.total_results and not obj.resources:
            raise PydanticCustomError(
                "no_resource_error",
                "Field 'resources' is missing or null but 'total_results' is non-zero.",
            )

        return obj
