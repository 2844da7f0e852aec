"""Apply :rfc:`RFC7644 §3.5.2 <7644#section-3.5.2>` PATCH operations.

The operations are not applied to the domain object directly. The object
is rendered as a SCIM payload, the operations edit that payload, and the
result is written back onto the object with the full replacement
semantics of :meth:`~scim2_mapper.ScimMixin.from_scim`.

Paths support one level of filtering, with a single equality comparison
such as ``emails[type eq "work"].value``.
"""

import logging
import re
from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import Any
from typing import NamedTuple
from typing import Optional

from pydantic import ValidationError

from .configuration import DEFAULT_CONFIGURATION
from .configuration import EngineConfiguration
from .exceptions import InvalidSyntaxException
from .exceptions import NoTargetException
from .messages.patch_op import PatchOp
from .messages.patch_op import PatchOperation
from .utils import CaseInsensitiveDict
from .utils import deep_case_insensitive
from .utils import deep_merge
from .utils import dot_path
from .utils import is_blank
from .utils import path_str_to_array

logger = logging.getLogger(__name__)

PATCH_FAILURE_DETAIL = "PATCH describes unrecognised attributes and/or unsupported filters"

_ROOT = "root"
_FILTERED_COMPONENT = re.compile(r"^(?P<name>[^\[\]]+)\[(?P<filter>.*)\]$")
_FILTER_EXPRESSION = re.compile(
    r"^\s*(?P<attribute>[^\s\"]+)\s+(?P<operator>[A-Za-z]+)\s+(?P<value>.+?)\s*$"
)


class PathFilter(NamedTuple):
    """A ``attribute eq "value"`` filter selecting array entries."""

    attribute: str
    value: str

    @classmethod
    def parse(cls, expression: str) -> "PathFilter":
        """Parse a filter, only accepting a single equality comparison.

        >>> PathFilter.parse('type eq "work"')
        PathFilter(attribute='type', value='work')
        """
        match = _FILTER_EXPRESSION.match(expression)
        if not match:
            raise InvalidSyntaxException(detail=f"Unsupported filter '{expression}'")

        if match["operator"].lower() != "eq":
            raise InvalidSyntaxException(
                detail=f"Unsupported filter operator '{match['operator']}'"
            )

        value = match["value"]
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        elif " " in value:
            raise InvalidSyntaxException(detail=f"Unsupported filter '{expression}'")

        if '"' in value:
            raise InvalidSyntaxException(detail=f"Unsupported filter '{expression}'")

        return cls(match["attribute"], value)

    def matches(self, entry: Any) -> bool:
        """Compare as case-insensitive strings."""
        if not isinstance(entry, Mapping):
            return False
        if not isinstance(entry, CaseInsensitiveDict):
            entry = CaseInsensitiveDict(entry)
        actual = entry.get(self.attribute)
        return _as_string(actual).lower() == self.value.lower()


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def split_component(component: str) -> tuple[str, Optional[PathFilter]]:
    """Split a path component into the attribute name and its optional filter.

    >>> split_component('emails[type eq "work"]')
    ('emails', PathFilter(attribute='type', value='work'))
    >>> split_component("userName")
    ('userName', None)
    """
    if "[" not in component:
        return component, None

    match = _FILTERED_COMPONENT.match(component)
    if not match:
        raise InvalidSyntaxException(detail=f"Malformed path component '{component}'")
    return match["name"], PathFilter.parse(match["filter"])


class PatchEngine:
    """Apply PATCH operations to a SCIM payload, in place.

    :param snapshot: The SCIM payload, as built by
        :meth:`~scim2_mapper.Resource.to_dict`.
    :param schema_ids: The URNs of the resource schemas, so that paths
        starting with an extension URN can be recognized.
    :param configuration: Holds the optional ``exception_reporter``.
    """

    def __init__(
        self,
        snapshot: Mapping[str, Any],
        schema_ids: list[str],
        configuration: Optional[EngineConfiguration] = None,
    ):
        self.snapshot = deep_case_insensitive(snapshot)
        self.schema_ids = schema_ids
        self.configuration = configuration or DEFAULT_CONFIGURATION

    def apply(self, operation: PatchOperation) -> None:
        nature = operation.op.value
        if is_blank(operation.path) and nature == PatchOperation.Op.remove.value:
            raise NoTargetException(
                detail="A path is required for remove operations", path=operation.path
            )

        try:
            if is_blank(operation.path):
                if not isinstance(operation.value, Mapping):
                    raise TypeError(
                        f"A {nature} operation without a path needs an object value"
                    )
                wrapper =CaseInsensitiveDict({_ROOT: self.snapshot})
                self._apply_at_path(nature, [_ROOT], operation.value, wrapper, root=True)
                self.snapshot = wrapper[_ROOT]
            else:
                components = self._components(operation.path)
                self._apply_at_path(nature, components, operation.value, self.snapshot)
        except Exception as exc:
            logger.debug(
                "PATCH operation %s on '%s' failed",
                nature,
                operation.path,
                exc_info=exc,
            )
            if self.configuration.exception_reporter is not None:
                self.configuration.exception_reporter(exc)
            raise InvalidSyntaxException(detail=PATCH_FAILURE_DETAIL) from exc

    def _components(self, path: str) -> list[str]:
        """Split 'path', dropping a leading core schema URN.

        Extension URNs are kept, as the snapshot nests extension
        attributes under them.
        """
        components = path_str_to_array(self.schema_ids, path)
        if (
            len(components) > 1
            and self.schema_ids
            and components[0].lower() == self.schema_ids[0].lower()
        ):
            return components[1:]
        return components

    def _apply_at_path(
        self,
        nature: str,
        path: list[str],
        value: Any,
        node: MutableMapping[str, Any],
        root: bool = False,
    ) -> None:
        if not isinstance(node, MutableMapping):
            raise TypeError(f"Cannot apply '{'.'.join(path)}' to {type(node).__name__}")

        name, path_filter = split_component(path[0])

        if len(path) == 1:
            self._apply_leaf(nature, name, path_filter, value, node, root)
            return

        if path_filter is None:
            if node.get(name) is None:
                node[name] = CaseInsensitiveDict()
            targets = [node[name]]
        else:
            if node.get(name) is None:
                node[name] = []
            entries = node[name]
            if not isinstance(entries, list):
                raise TypeError(f"'{name}' is not a multi-valued attribute")

            targets = [entry for entry in entries if path_filter.matches(entry)]
            if not targets and nature != "remove":
                created = CaseInsensitiveDict()
                entries.append(created)
                targets = [created]

        for target in targets:
            self._apply_at_path(nature, path[1:], value, target)

    def _apply_leaf(
        self,
        nature: str,
        name: str,
        path_filter: Optional[PathFilter],
        value: Any,
        node: MutableMapping[str, Any],
        root: bool,
    ) -> None:
        current = node.get(name)

        if current is None:
            if nature != "remove":
                if path_filter is not None and not isinstance(value, list):
                    value = [value]
                node[name] = value
            return

        if path_filter is not None and nature != "add":
            if not isinstance(current, list):
                raise TypeError(f"'{name}' is not a multi-valued attribute")

            if nature == "remove":
                current[:] = [entry for entry in current if not path_filter.matches(entry)]
                return

            matched = [entry for entry in current if path_filter.matches(entry)]
            for entry in matched:
                entry.clear()
                entry.update(value)
            if not matched:
                current.append(deep_case_insensitive(value))
            return

        if nature == "add":
            self._add(name, value, current, node)
        elif nature == "replace":
            if root and isinstance(current, MutableMapping):
                deep_merge(current, self._expand_keys(value))
            else:
                node[name] = value
        elif isinstance(current, list) and value is not None:
            self._remove_matching(name, value, current)
        else:
            del node[name]

    def _add(
        self,
        name: str,
        value: Any,
        current: Any,
        node: MutableMapping[str, Any],
    ) -> None:
        if isinstance(current, list):
            items = value if isinstance(value, list) else [value]
            current.extend(deep_case_insensitive(items))
        elif isinstance(current, MutableMapping) and isinstance(value, Mapping):
            # Sub-collections are extended one key at a time, not replaced.
            for key, item in value.items():
                self._apply_at_path(
                    "add", self._components(key), item, current
                )
        else:
            node[name] = value

    def _expand_keys(self, value: Any) -> CaseInsensitiveDict:
        """Turn ``name.givenName`` and URN-prefixed keys into nested objects."""
        if not isinstance(value, Mapping):
            raise TypeError("Replacing the whole resource needs an object value")

        expanded = CaseInsensitiveDict()
        for key, item in value.items():
            deep_merge(expanded, dot_path(self._components(key), item))
        return expanded

    def _remove_matching(self, name: str, value: Any, current: list[Any]) -> None:
        """Remove the entries matching the given values.

        Some clients wrap the entries to remove in an object named after
        the attribute, or send a single entry or a bare value.
        """
        if isinstance(value, Mapping):
            wrapper = CaseInsensitiveDict(value)
            if len(wrapper) == 1 and isinstance(wrapper.get(name), list):
                value = wrapper[name]
            else:
                value = [value]
        elif not isinstance(value, list):
            value = [value]

        for item in value:
            criteria = CaseInsensitiveDict(
                item if isinstance(item, Mapping) else {"value": item}
            )
            criteria.pop("$ref", None)
            if not criteria:
                continue
            current[:] = [entry for entry in current if not _matches_all(entry, criteria)]


def _matches_all(entry: Any, criteria: CaseInsensitiveDict) -> bool:
    if not isinstance(entry, Mapping):
        return False
    if not isinstance(entry, CaseInsensitiveDict):
        entry = CaseInsensitiveDict(entry)
    return all(
        key in entry and _as_string(entry[key]) == _as_string(expected)
        for key, expected in criteria.items()
    )


def parse_patch(patch_payload: Any) -> PatchOp:
    """Validate a PATCH request payload.

    :raises InvalidSyntaxException: when the payload is malformed, such as
        when ``Operations`` is missing or an ``op`` is unknown.
    """
    if isinstance(patch_payload, PatchOp):
        return patch_payload
    try:
        return PatchOp.model_validate(patch_payload)
    except ValidationError as exc:
        raise InvalidSyntaxException() from exc


def apply_patch(
    obj: Any,
    patch_payload: Any,
    configuration: Optional[EngineConfiguration] = None,
) -> Any:
    """Apply a PATCH request payload to a :class:`~scim2_mapper.ScimMixin` object.

    The operations are applied in order, and the object is only written
    once all of them succeeded.
    """
    patch = parse_patch(patch_payload)
    resource = obj.to_scim()
    engine = PatchEngine(resource.to_dict(), resource.schema_ids(), configuration)
    for operation in patch.operations:
        engine.apply(operation)

    obj.from_scim(engine.snapshot)
    return obj
