from collections.abc import Mapping
from typing import TYPE_CHECKING
from typing import Any
from typing import ClassVar
from typing import Optional
from typing import Union

from pydantic import PrivateAttr
from typing_extensions import Self

from ..annotations import CaseExact
from ..annotations import Mutability
from ..annotations import Returned
from ..attributes import ComplexValue
from ..attributes import SchemaObject
from ..configuration import EngineConfiguration
from ..exceptions import ResourceInvalidException
from ..validator import FieldError
from ..validator import collect_errors
from .schema import Attribute
from .schema import Schema

if TYPE_CHECKING:
    from .resource_type import ResourceType


class Meta(
    ComplexValue.from_schema(
        Schema(
            name="Meta",
            attributes=[
                Attribute(
                    name="resourceType",
                    mutability=Mutability.read_only,
                    case_exact=CaseExact.true,
                ),
                Attribute(
                    name="created",
                    type=Attribute.Type.date_time,
                    mutability=Mutability.read_only,
                ),
                Attribute(
                    name="lastModified",
                    type=Attribute.Type.date_time,
                    mutability=Mutability.read_only,
                ),
                Attribute(
                    name="location",
                    type=Attribute.Type.reference,
                    mutability=Mutability.read_only,
                ),
                Attribute(name="version", mutability=Mutability.read_only),
            ],
        )
    )
):
    """All "meta" sub-attributes are assigned by the service provider and
    are ignored when provided by clients."""


COMMON_ATTRIBUTES = [
    Attribute(
        name="id",
        mutability=Mutability.read_only,
        returned=Returned.always,
        case_exact=CaseExact.true,
    ),
    Attribute(name="externalId", case_exact=CaseExact.true),
    Attribute(name="meta", complex_type=Meta, mutability=Mutability.read_only),
]
"""Attributes shared by every resource, outside of any schema."""


class Resource(SchemaObject):
    """The in-memory value graph of a SCIM resource.

    Subclasses are built with :meth:`~scim2_mapper.attributes.SchemaObject.from_schema`,
    set :attr:`endpoint`, and may be extended with :meth:`extend_schema`.
    Keys are matched ignoring their case, extension attributes may be
    given flat or nested under their schema URN, and unknown keys are
    dropped. Values are not checked on assignment: call :meth:`validate`
    to collect the errors.
    """

    extension_schemas: ClassVar[list[Schema]] = []
    """The extension schemas of the resource."""

    endpoint: ClassVar[str]
    """The endpoint of the resource, relative to the base URL."""

    resource_type_name: ClassVar[Optional[str]] = None
    """The resource type name, when it is not the class name."""

    _attributes_by_field: ClassVar[dict[str, Attribute]] = {
        "id": COMMON_ATTRIBUTES[0],
        "external_id": COMMON_ATTRIBUTES[1],
        "meta": COMMON_ATTRIBUTES[2],
    }

    _errors: list[FieldError] = PrivateAttr(default_factory=list)

    id: Optional[Any] = None
    """A unique identifier for a SCIM resource as defined by the service
    provider."""

    external_id: Optional[Any] = None
    """A String that is an identifier for the resource as defined by the
    provisioning client."""

    meta: Optional[Any] = None
    """A complex attribute containing resource metadata."""

    @classmethod
    def _flatten_payload(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        payload = dict(value)
        for extension_schema in cls.extension_schemas:
            urn = (extension_schema.id or "").lower()
            for key in [key for key in payload if str(key).lower() == urn]:
                extension_values = payload.pop(key)
                if isinstance(extension_values, Mapping):
                    payload.update(extension_values)
        return payload

    @classmethod
    def extend_schema(cls, schema: Schema) -> type[Self]:
        """Build a subclass of this resource carrying the 'schema' extension.

        >>> from scim2_mapper.resources.enterprise_user import ENTERPRISE_USER_SCHEMA
        >>> Employee = Resource.from_schema(
        ...     Schema(id="urn:example:Employee", name="Employee", attributes=[])
        ... ).extend_schema(ENTERPRISE_USER_SCHEMA)
        >>> Employee.schemas()[-1].name
        'EnterpriseUser'
        >>> Employee(employeeNumber="701984").employee_number
        '701984'
        """
        model = cls._with_attributes(cls.__name__, schema.attributes)
        model.extension_schemas = [*cls.extension_schemas, schema]
        return model

    @classmethod
    def schemas(cls) -> list[Schema]:
        return [cls.schema, *cls.extension_schemas]

    @classmethod
    def schema_ids(cls) -> list[str]:
        return [schema.id for schema in cls.schemas() if schema.id]

    @classmethod
    def find_attribute(cls, *path: Union[str, int]) -> Optional[Attribute]:
        """Find an attribute in the core schema, then in the extensions.

        Integer path components are array indices and are ignored.
        """
        for schema in cls.schemas():
            attribute = schema.find_attribute(*path)
            if attribute is not None:
                return attribute
        return None

    @classmethod
    def get_attribute(cls, name: str) -> Optional[Attribute]:
        """Find a top-level attribute, common attributes included."""
        attribute = cls.find_attribute(name)
        if attribute is not None:
            return attribute

        lowered = name.lower()
        return next(
            (item for item in COMMON_ATTRIBUTES if item.name.lower() == lowered), None
        )

    @classmethod
    def resource_type_id(cls) -> str:
        return cls.resource_type_name or cls.__name__

    @classmethod
    def resource_type(cls, location: Optional[str] = None) -> "ResourceType":
        """Build the resource type discovery document of this class."""
        from .resource_type import ResourceType

        return ResourceType.from_resource(cls, location)

    @property
    def errors(self) -> list[FieldError]:
        """The errors found by the last call to :meth:`validate`."""
        return self._errors

    def to_dict(self) -> dict[str, Any]:
        """Dump the resource to its wire representation.

        ``meta.resourceType`` is always set, and the attributes of each
        extension schema are nested under the extension URN.
        """
        payload = self.model_dump()
        payload["meta"] = {
            **(payload.get("meta") or {}),
            "resourceType": self.resource_type_id(),
        }

        for extension_schema in self.extension_schemas:
            payload[extension_schema.id] = {
                attribute.name: payload.pop(attribute.name)
                for attribute in extension_schema.attributes
                if attribute.name in payload
            }

        return {"schemas": self.schema_ids(), **payload}

    def validate(
        self, configuration: Optional[EngineConfiguration] = None
    ) -> list[FieldError]:
        """Check the values against the core and extension schemas.

        The errors are returned and kept in :attr:`errors`.
        """
        self._errors = collect_errors(self.schemas(), self, configuration)
        return self._errors

    def is_valid(self, configuration: Optional[EngineConfiguration] = None) -> bool:
        return not self.validate(configuration)

    def ensure_valid(self, configuration: Optional[EngineConfiguration] = None) -> None:
        """Raise :class:`~scim2_mapper.exceptions.ResourceInvalidException` on validation errors."""
        errors = self.validate(configuration)
        if errors:
            raise ResourceInvalidException(errors=errors)
