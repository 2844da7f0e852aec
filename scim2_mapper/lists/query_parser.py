import re
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any
from typing import Optional

from typing_extensions import Self

from ..exceptions import InvalidFilterException
from ..utils import CaseInsensitiveDict
from ..utils import is_blank

_LIKE_SPECIAL_CHARACTERS = re.compile(r"([\\%_])")


class QueryParser:
    """Turn a ``attribute operator value`` list filter into storage terms.

    The queryable attributes map SCIM attribute names to storage fields.
    Each entry is a field name, a list of field names to be combined with
    a logical OR, or a mapping holding ``column``, ``columns`` or
    ``ignore``.

    >>> parser = QueryParser({"familyName": "last_name"}).parse("familyName eq BAZ")
    >>> parser.attribute, parser.operator, parser.parameter
    (['last_name'], '=', 'BAZ')
    >>> QueryParser({"familyName": "last_name"}).parse("familyName pr").operator
    'IS NOT NULL'

    Combining comparisons with ``and`` or ``or`` is not supported.
    """

    OPERATORS = {
        "eq": "=",
        "ne": "!=",
        "gt": ">",
        "ge": ">=",
        "lt": "<",
        "le": "<=",
        "co": "LIKE",
        "sw": "LIKE",
        "ew": "LIKE",
        "pr": "IS NOT NULL",
    }
    UNARY_OPERATORS = {"pr"}

    def __init__(
        self,
        attribute_map: Mapping[str, Any],
        schema_ids: Iterable[str] = (),
    ):
        self.attribute_map = CaseInsensitiveDict(attribute_map)
        self.schema_ids = list(schema_ids)
        self.filter: Optional[str] = None
        self.scim_attribute: Optional[str] = None
        self.scim_operator: Optional[str] = None
        self.scim_parameter: Optional[str] = None

    def parse(self, filter: str) -> Self:
        """Parse 'filter', raising :class:`~scim2_mapper.InvalidFilterException` if it is not supported."""
        self.filter = filter
        tokens = (filter or "").strip().split(maxsplit=2)
        if len(tokens) < 2:
            raise InvalidFilterException(
                detail=f"Expected an attribute and an operator in '{filter}'",
                filter=filter,
            )

        attribute, operator = tokens[0], tokens[1].lower()
        if operator not in self.OPERATORS:
            raise InvalidFilterException(
                detail=f"Unsupported operator '{tokens[1]}'", filter=filter
            )

        if operator in self.UNARY_OPERATORS and len(tokens) > 2:
            raise InvalidFilterException(
                detail=f"Unexpected value after '{tokens[1]}'", filter=filter
            )
        if operator not in self.UNARY_OPERATORS and len(tokens) < 3:
            raise InvalidFilterException(
                detail=f"Missing value after '{tokens[1]}'", filter=filter
            )

        self.scim_attribute = self._strip_schema_id(attribute)
        self.scim_operator = operator
        self.scim_parameter = tokens[2] if len(tokens) > 2 else None
        self._fields = self._storage_fields(self.scim_attribute)
        return self

    def _strip_schema_id(self, attribute: str) -> str:
        for schema_id in self.schema_ids:
            prefix = re.compile(rf"^{re.escape(schema_id)}[:.]", re.IGNORECASE)
            attribute = prefix.sub("", attribute)
        return attribute

    def _storage_fields(self, scim_attribute: str) -> list[str]:
        mapped = self.attribute_map.get(scim_attribute)
        if is_blank(mapped):
            raise InvalidFilterException(
                detail=f"Unable to find domain attribute from SCIM attribute: '{scim_attribute}'",
                filter=self.filter,
            )

        if isinstance(mapped, str):
            return [mapped]
        if isinstance(mapped, list):
            return list(mapped)
        if isinstance(mapped, Mapping):
            if mapped.get("ignore"):
                return []
            if mapped.get("column"):
                return [mapped["column"]]
            if mapped.get("columns"):
                return list(mapped["columns"])

        raise ValueError(f"Malformed queryable attribute entry for '{scim_attribute}'")

    @property
    def attribute(self) -> list[str]:
        """The storage fields to compare, possibly empty for ignored attributes."""
        return self._fields

    @property
    def operator(self) -> str:
        """The generic comparison operator, such as ``=`` or ``LIKE``."""
        return self.OPERATORS[self.scim_operator]

    @property
    def parameter(self) -> str:
        """The comparison value, without its surrounding quotes."""
        value = self.scim_parameter
        if is_blank(value):
            return ""
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            return value[1:-1]
        return value

    @property
    def like_parameter(self) -> str:
        """The value escaped for a ``LIKE`` comparison, with wildcards for
        ``co``, ``sw`` and ``ew``.

        >>> QueryParser({"userName": "username"}).parse('userName co "50%"').like_parameter
        '%50\\\\%%'
        """
        value = self.parameter
        escaped = _LIKE_SPECIAL_CHARACTERS.sub(r"\\\1", value)
        if self.scim_operator in ("eq", "ne"):
            return escaped
        if self.scim_operator == "co":
            return f"%{escaped}%"
        if self.scim_operator == "sw":
            return f"{escaped}%"
        if self.scim_operator == "ew":
            return f"%{escaped}"
        return value

    @property
    def case_sensitive(self) -> bool:
        """Identifiers and meta attributes are compared case-sensitively."""
        lowered = (self.scim_attribute or "").lower()
        return lowered in ("id", "externalid") or lowered.startswith("meta.")
