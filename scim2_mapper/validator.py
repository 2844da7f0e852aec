"""Check resource value graphs against their schemas.

Validation never raises: every problem is collected as a
:class:`FieldError` so all the issues of a payload can be reported at
once.
"""

import re
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING
from typing import Any
from typing import NamedTuple
from typing import Optional

from .configuration import DEFAULT_CONFIGURATION
from .configuration import EngineConfiguration
from .utils import is_blank

if TYPE_CHECKING:
    from .resources.schema import Attribute
    from .resources.schema import Schema

_DATE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:?\d{2})?$")


class FieldError(NamedTuple):
    attribute: str
    """The dotted name of the attribute in error."""

    message: str

    def __str__(self) -> str:
        return f"{self.attribute} {self.message}"


def _is_date_time(value: Any) -> bool:
    """Tell whether a value is a full ISO 8601 timestamp.

    >>> _is_date_time("2018-07-26T11:59:43-06:00")
    True
    >>> _is_date_time("2018-07-26")
    False
    >>> _is_date_time("2018-07-26T11")
    False
    >>> _is_date_time("20180726T115943")
    False
    """
    if isinstance(value, datetime):
        return True
    if not isinstance(value, str) or not _DATE_TIME.match(value):
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_decimal(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Validator:
    """Walk schemas and values, collecting :class:`FieldError` instances.

    :param configuration: Decides, among others, whether the ``value``
        sub-attribute of multi-valued complex types is required.
    """

    def __init__(self, configuration: Optional[EngineConfiguration] = None):
        self.configuration = configuration or DEFAULT_CONFIGURATION

    def validate(self, schema: "Schema", values: Any) -> list[FieldError]:
        """Validate every attribute of 'schema' against 'values'.

        'values' is either a mapping or an object exposing the attribute
        values by key, such as :class:`~scim2_mapper.Resource`.
        """
        errors = []
        for attribute in schema.attributes:
            errors.extend(
                self.validate_attribute(attribute, _lookup(values, attribute.name))
            )
        return errors

    def validate_attribute(self, attribute: "Attribute", value: Any) -> list[FieldError]:
        if is_blank(value):
            if attribute.is_required(self.configuration):
                return [FieldError(attribute.name, "is required")]
            return []

        if attribute.type == attribute.Type.complex:
            if attribute.multi_valued:
                if not isinstance(value, list):
                    return [
                        FieldError(attribute.name, "has to follow the complexType format.")
                    ]
                errors = []
                for item in value:
                    errors.extend(self._validate_complex(attribute, item))
                return errors
            return self._validate_complex(attribute, value)

        return self._validate_simple(attribute, value)

    def _validate_complex(self, attribute: "Attribute", value: Any) -> list[FieldError]:
        value_schema = getattr(type(value), "schema", None)
        expected_schema = getattr(attribute.complex_type, "schema", None)
        if value_schema is None or value_schema is not expected_schema:
            return [FieldError(attribute.name, "has to follow the complexType format.")]

        return [
            FieldError(f"{attribute.name}.{error.attribute}", error.message)
            for error in self.validate(value_schema, value)
        ]

    def _validate_simple(self, attribute: "Attribute", value: Any) -> list[FieldError]:
        type_name = attribute.type.value
        if attribute.multi_valued:
            if isinstance(value, list) and all(
                self._is_simple_type(attribute, item) for item in value
            ):
                return []
            return [
                FieldError(
                    attribute.name,
                    "or one of its elements has the wrong type. "
                    f"It has to be an array of {type_name}s.",
                )
            ]

        if self._is_simple_type(attribute, value):
            return []
        return [
            FieldError(
                attribute.name, f"has the wrong type. It has to be a(n) {type_name}."
            )
        ]

    def _is_simple_type(self, attribute: "Attribute", value: Any) -> bool:
        checks = {
            attribute.Type.string: lambda v: isinstance(v, str),
            attribute.Type.reference: lambda v: isinstance(v, str),
            attribute.Type.binary: lambda v: isinstance(v, (str, bytes)),
            attribute.Type.boolean: lambda v: isinstance(v, bool),
            attribute.Type.integer: _is_integer,
            attribute.Type.decimal: _is_decimal,
            attribute.Type.date_time: _is_date_time,
        }
        check = checks.get(attribute.type)
        return bool(check and check(value))


def _lookup(values: Any, name: str) -> Any:
    if isinstance(values, Mapping):
        return values.get(name)
    try:
        return values[name]
    except (KeyError, TypeError):
        return None


def collect_errors(
    schemas: Iterable["Schema"],
    values: Any,
    configuration: Optional[EngineConfiguration] = None,
) -> list[FieldError]:
    """Validate 'values' against several schemas at once."""
    validator = Validator(configuration)
    errors = []
    for schema in schemas:
        errors.extend(validator.validate(schema, values))
    return errors
