import keyword
import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING
from typing import Any
from typing import ClassVar
from typing import Optional

from pydantic import ConfigDict
from pydantic import ValidationInfo
from pydantic import create_model
from pydantic import field_validator
from pydantic import model_validator
from pydantic.alias_generators import to_snake
from typing_extensions import Self

from .base import BaseModel
from .utils import _normalize_attribute_name
from .utils import to_plain

if TYPE_CHECKING:
    from .resources.schema import Attribute
    from .resources.schema import Schema

logger = logging.getLogger(__name__)

_NON_WORD_OR_LEADING_DIGIT = re.compile(r"\W|^(?=\d)")


def _make_python_identifier(attribute_name: str) -> str:
    """Build the field name of an attribute.

    >>> _make_python_identifier("displayName")
    'display_name'
    >>> _make_python_identifier("$ref")
    'ref'
    """
    sanitized = to_snake(_NON_WORD_OR_LEADING_DIGIT.sub("", attribute_name))
    if keyword.iskeyword(sanitized):
        sanitized = f"{sanitized}_"
    return sanitized


class SchemaObject(BaseModel):
    """A pydantic model whose fields are the attributes of a :class:`~scim2_mapper.resources.schema.Schema`.

    Fields accept any value, so values of the wrong type stay around
    until the :class:`~scim2_mapper.validator.Validator` reports them.
    Mappings given to complex attributes are turned into instances of
    the attribute's complex type, and unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    schema: ClassVar["Schema"]
    """The schema the fields are built from."""

    _attributes_by_field: ClassVar[dict[str, "Attribute"]] = {}

    def __init__(self, values: Optional[Mapping[str, Any]] = None, /, **kwargs: Any):
        super().__init__(**{**(values or {}), **kwargs})

    @classmethod
    def from_schema(cls, schema: "Schema") -> type[Self]:
        """Build a subclass holding one field per attribute of 'schema'."""
        model = cls._with_attributes(schema.name or cls.__name__, schema.attributes)
        model.schema = schema
        return model

    @classmethod
    def _with_attributes(cls, name: str, attributes: list["Attribute"]) -> type[Self]:
        fields = {
            _make_python_identifier(attribute.name): attribute
            for attribute in attributes
        }
        model = create_model(  # type: ignore[call-overload]
            name,
            __base__=cls,
            __module__=cls.__module__,
            **{field: attribute._to_python() for field, attribute in fields.items()},
        )
        model._attributes_by_field = {**cls._attributes_by_field, **fields}
        return model

    @classmethod
    def _field_name(cls, attribute_name: str) -> Optional[str]:
        normalized = _normalize_attribute_name(attribute_name)
        return next(
            (
                field_name
                for field_name, field in cls.model_fields.items()
                if field.validation_alias == normalized
            ),
            None,
        )

    @model_validator(mode="before")
    @classmethod
    def drop_unknown_attributes(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value

        known = {field.validation_alias for field in cls.model_fields.values()}
        payload = {}
        for key, val in cls._flatten_payload(value).items():
            if not isinstance(key, str) or key in cls.model_fields:
                payload[key] = val
            elif (normalized := _normalize_attribute_name(key)) in known:
                payload[normalized] = val
            else:
                logger.debug("Dropping unknown %s attribute '%s'", cls.__name__, key)
        return payload

    @classmethod
    def _flatten_payload(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return value

    @field_validator("*", mode="before")
    @classmethod
    def convert_complex_values(cls, value: Any, info: ValidationInfo) -> Any:
        attribute = cls._attributes_by_field.get(info.field_name or "")
        if attribute is None:
            return value
        return convert_complex_value(attribute, to_plain(value))

    def __getitem__(self, name: str) -> Any:
        field_name = self._field_name(name)
        if field_name is None:
            raise KeyError(name)
        return getattr(self, field_name)

    def __setitem__(self, name: str, value: Any) -> None:
        field_name = self._field_name(name)
        if field_name is None:
            raise KeyError(name)
        setattr(self, field_name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def get(self, name: str, default: Any = None) -> Any:
        try:
            value = self[name]
        except KeyError:
            return default
        return default if value is None else value


class ComplexValue(SchemaObject):
    """A value of a complex attribute as defined in :rfc:`RFC7643 §2.3.8 <7643#section-2.3.8>`.

    Complex types are built with :meth:`~SchemaObject.from_schema`:

    >>> from scim2_mapper.resources.user import Email
    >>> email = Email({"VALUE": "bjensen@example.com", "type": "work", "foo": 1})
    >>> email.value
    'bjensen@example.com'
    >>> email.model_dump()
    {'value': 'bjensen@example.com', 'type': 'work'}
    """


def convert_complex_value(attribute: "Attribute", value: Any) -> Any:
    """Turn plain mappings into instances of the attribute's complex type.

    Values of any other shape, including a single mapping given to a
    multi-valued attribute, are kept untouched so invalid input stays
    around for validation.
    """
    complex_type = attribute.complex_type
    if complex_type is None:
        return value

    if attribute.multi_valued:
        if not isinstance(value, list):
            return value
        return [_to_complex(complex_type, item) for item in value]
    return _to_complex(complex_type, value)


def _to_complex(complex_type: type[ComplexValue], value: Any) -> Any:
    if isinstance(value, Mapping):
        return complex_type(value)
    return value
