from enum import Enum
from typing import Annotated
from typing import Any
from typing import List  # noqa : UP005,UP035
from typing import Optional
from typing import Union

from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator

from ..annotations import CaseExact
from ..annotations import Mutability
from ..annotations import Required
from ..annotations import Returned
from ..annotations import Uniqueness
from ..base import BaseModel
from ..configuration import EngineConfiguration
from ..utils import _normalize_attribute_name


class Attribute(BaseModel):
    """Declaration of one attribute of a schema or a complex type.

    An attribute declared with a ``complex_type`` is of type ``complex``
    and takes its sub-attributes from that type's schema:

    >>> from scim2_mapper.resources.user import Name
    >>> attribute = Attribute(name="name", complex_type=Name)
    >>> attribute.type.value
    'complex'
    >>> attribute.get_attribute("GIVENNAME").name
    'givenName'
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    class Type(str, Enum):
        string = "string"
        complex = "complex"
        boolean = "boolean"
        decimal = "decimal"
        integer = "integer"
        date_time = "dateTime"
        reference = "reference"
        binary = "binary"

    name: Annotated[str, Mutability.read_only, Required.true, CaseExact.true]
    """The attribute's name."""

    type: Annotated[Type, Mutability.read_only, Required.true] = Type.string
    """The attribute's data type."""

    multi_valued: Annotated[bool, Mutability.read_only, Required.true] = False
    """A Boolean value indicating the attribute's plurality."""

    description: Annotated[Optional[str], Mutability.read_only, CaseExact.true] = None
    """The attribute's human-readable description."""

    required: Annotated[Required, Mutability.read_only] = Required.false
    """A Boolean value that specifies whether or not the attribute is
    required."""

    case_exact: Annotated[CaseExact, Mutability.read_only] = CaseExact.false
    """A Boolean value that specifies whether or not a string attribute is case
    sensitive."""

    mutability: Annotated[Mutability, Mutability.read_only, CaseExact.true] = (
        Mutability.read_write
    )
    """A single keyword indicating the circumstances under which the value of
    the attribute can be (re)defined."""

    returned: Annotated[Returned, Mutability.read_only, CaseExact.true] = (
        Returned.default
    )
    """A single keyword that indicates when an attribute and associated values
    are returned."""

    uniqueness: Annotated[Uniqueness, Mutability.read_only, CaseExact.true] = (
        Uniqueness.none
    )
    """A single keyword value that specifies how the service provider enforces
    uniqueness of attribute values."""

    canonical_values: Annotated[
        Optional[List[str]], Mutability.read_only, CaseExact.true  # noqa: UP006
    ] = None
    """A collection of suggested canonical values that MAY be used (e.g.,
    "work" and "home")."""

    sub_attributes: Annotated[Optional[List["Attribute"]], Mutability.read_only] = None  # noqa: UP006
    """When an attribute is of type "complex", "subAttributes" defines a set of
    sub-attributes."""

    complex_type: Any = Field(None, exclude=True)
    """The :class:`~scim2_mapper.attributes.ComplexValue` subclass values of
    this attribute are converted to."""

    relaxable: bool = Field(False, exclude=True)
    """A required attribute which is only enforced while
    :attr:`EngineConfiguration.optional_value_fields_required` is set."""

    @model_validator(mode="before")
    @classmethod
    def derive_from_complex_type(cls, data: Any) -> Any:
        """Attributes with a complex type are complex and borrow its sub-attributes."""
        if not isinstance(data, dict):
            return data

        complex_type = data.get("complex_type", data.get("complextype"))
        if complex_type is None:
            return data

        data = dict(data)
        data.setdefault("type", Attribute.Type.complex)
        data.setdefault("sub_attributes", list(complex_type.schema.attributes))
        return data

    @field_validator("canonical_values")
    @classmethod
    def drop_empty_canonical_values(
        cls, value: Optional[list[str]]
    ) -> Optional[list[str]]:
        return value or None

    def is_required(self, configuration: Optional[EngineConfiguration] = None) -> bool:
        """Tell whether a blank value is an error for this attribute."""
        if not self.required:
            return False
        if self.relaxable and configuration is not None:
            return configuration.optional_value_fields_required
        return True

    def get_attribute(self, attribute_name: str) -> Optional["Attribute"]:
        """Find a sub-attribute by its name, ignoring the case."""
        lowered = attribute_name.lower()
        for sub_attribute in self.sub_attributes or []:
            if sub_attribute.name.lower() == lowered:
                return sub_attribute
        return None

    def __getitem__(self, name: str) -> "Attribute":
        """Find a sub-attribute by its name."""
        if attribute := self.get_attribute(name):
            return attribute
        raise KeyError(f"This attribute has no '{name}' sub-attribute")

    def is_valid(
        self, value: Any, configuration: Optional[EngineConfiguration] = None
    ) -> bool:
        """Check a single value against this attribute.

        >>> Attribute(name="userName", required=True).is_valid(None)
        False
        >>> Attribute(name="tags", multi_valued=True).is_valid(["a", 123])
        False
        """
        return not self.validate_value(value, configuration)

    def validate_value(
        self, value: Any, configuration: Optional[EngineConfiguration] = None
    ) -> list:
        """Return the :class:`~scim2_mapper.validator.FieldError` list for a value."""
        from ..validator import Validator

        return Validator(configuration).validate_attribute(self, value)

    def _to_python(self) -> tuple[Any, Any]:
        """Build tuple suited to be passed to pydantic 'create_model'.

        Fields take any value: types are checked by the validator, not
        on assignment.
        """
        field = Field(
            default=None,
            description=self.description,
            serialization_alias=self.name,
            validation_alias=_normalize_attribute_name(self.name),
        )
        return Optional[Any], field


class Schema(BaseModel):
    """A resource or complex type schema, :rfc:`RFC7643 §7 <7643#section-7>`.

    Complex types hold a schema without ``id``, only resources and
    extensions are identified by a URN.
    """

    model_config = ConfigDict(frozen=True)

    schemas: list[str] = ["urn:ietf:params:scim:schemas:core:2.0:Schema"]

    id: Annotated[Optional[str], Mutability.read_only, Required.true] = None
    """The unique URI of the schema."""

    name: Annotated[Optional[str], Mutability.read_only, Required.true] = None
    """The schema's human-readable name."""

    description: Annotated[Optional[str], Mutability.read_only] = None
    """The schema's human-readable description."""

    attributes: Annotated[List[Attribute], Mutability.read_only, Required.true] = []  # noqa: UP006
    """A complex type that defines service provider attributes and their
    qualities via the following set of sub-attributes."""

    def get_attribute(self, attribute_name: str) -> Optional[Attribute]:
        """Find an attribute by its name, ignoring the case."""
        lowered = attribute_name.lower()
        for attribute in self.attributes:
            if attribute.name.lower() == lowered:
                return attribute
        return None

    def __getitem__(self, name: str) -> Attribute:
        """Find an attribute by its name."""
        if attribute := self.get_attribute(name):
            return attribute
        raise KeyError(f"This schema has no '{name}' attribute")

    def find_attribute(self, *path: Union[str, int]) -> Optional[Attribute]:
        """Walk the attribute tree along a path of names.

        Integer components stand for array indices and are skipped, so a
        path built from a resource payload can be used as is.

        >>> from scim2_mapper.resources.user import User
        >>> User.schema.find_attribute("emails", 0, "VALUE").name
        'value'
        >>> User.schema.find_attribute("emails", "unknown") is None
        True
        """
        names = [component for component in path if not isinstance(component, int)]
        if not names:
            return None

        current = self.get_attribute(str(names[0]))
        for name in names[1:]:
            if current is None:
                return None
            current = current.get_attribute(str(name))
        return current

    def to_dict(self, location: Optional[str] = None) -> dict[str, Any]:
        """Dump the schema discovery representation."""
        payload = self.model_dump()
        payload["meta"] = {"resourceType": "Schema"}
        if location is not None:
            payload["meta"]["location"] = location
        return payload
