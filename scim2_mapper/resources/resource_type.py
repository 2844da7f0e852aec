from typing import TYPE_CHECKING
from typing import Annotated
from typing import Any
from typing import Optional

from pydantic import Field
from typing_extensions import Self

from ..annotations import CaseExact
from ..annotations import Mutability
from ..annotations import Required
from ..annotations import Uniqueness
from ..base import BaseModel

if TYPE_CHECKING:
    from .resource import Resource


class SchemaExtension(BaseModel):
    schema_: Annotated[
        str,
        Mutability.read_only,
        Required.true,
        CaseExact.true,
    ] = Field(alias="schema")
    """The URI of a schema extension."""

    required: Annotated[bool, Mutability.read_only, Required.true] = False
    """A Boolean value that specifies whether or not the schema extension is
    required for the resource type."""


class ResourceType(BaseModel):
    schemas: list[str] = ["urn:ietf:params:scim:schemas:core:2.0:ResourceType"]

    id: Annotated[Optional[str], Mutability.read_only] = None
    """The resource type's server unique id.

    This is often the same value as the "name" attribute.
    """

    name: Annotated[
        Optional[str],
        Mutability.read_only,
        Required.true,
        CaseExact.true,
        Uniqueness.server,
    ] = None
    """The resource type name, e.g. 'User'."""

    description: Annotated[Optional[str], Mutability.read_only] = None
    """The resource type's human-readable description."""

    endpoint: Annotated[
        Optional[str], Mutability.read_only, Required.true, Uniqueness.server
    ] = None
    """The resource type's HTTP-addressable endpoint relative to the Base URL,
    e.g., '/Users'."""

    schema_: Annotated[
        Optional[str],
        Mutability.read_only,
        Required.true,
        CaseExact.true,
    ] = Field(None, alias="schema")
    """The resource type's primary/base schema URI."""

    schema_extensions: Annotated[
        Optional[list[SchemaExtension]], Mutability.read_only
    ] = None
    """A list of URIs of the resource type's schema extensions."""

    meta: Optional[dict[str, Any]] = None

    @classmethod
    def from_resource(
        cls, resource_class: type["Resource"], location: Optional[str] = None
    ) -> Self:
        """Build the ResourceType of a resource class.

        >>> from scim2_mapper.resources.group import Group
        >>> resource_type = ResourceType.from_resource(Group, "/ResourceTypes/Group")
        >>> resource_type.model_dump()["endpoint"]
        '/Groups'
        """
        name = resource_class.resource_type_id()
        meta: dict[str, Any] = {"resourceType": "ResourceType"}
        if location is not None:
            meta["location"] = location

        return cls(
            id=name,
            name=name,
            endpoint=resource_class.endpoint,
            schema_=resource_class.schema.id,
            schema_extensions=[
                SchemaExtension(schema_=extension.id, required=False)
                for extension in resource_class.extension_schemas
            ]
            or None,
            meta=meta,
        )
