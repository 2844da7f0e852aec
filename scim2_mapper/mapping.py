"""Translate domain objects to SCIM payloads, and back.

A mapping tree mirrors the SCIM attribute names and ends with leaves
telling where each value comes from:

- :class:`Accessor`, an attribute, property or method of the domain
  object, used to read and, when possible, to write the value;
- :class:`Literal`, a fixed value which is only read;
- :class:`StaticEntry`, one entry of a SCIM array distinguished by a
  discriminator, such as the ``type`` of an email;
- :class:`DynamicList`, a SCIM array enumerating a domain collection.

Mapping trees are usually written with the shorthand accepted by
:func:`compile_map`.
"""

import functools
import inspect
import logging
from collections.abc import Mapping
from typing import Any
from typing import Callable
from typing import Optional
from typing import Union

from .configuration import DEFAULT_CONFIGURATION
from .configuration import EngineConfiguration
from .resources.resource import Resource
from .utils import CaseInsensitiveDict

logger = logging.getLogger(__name__)

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]

_MISSING = object()


@functools.lru_cache(maxsize=None)
def _resolve_accessor(owner: type, name: str) -> tuple[Optional[Getter], Optional[Setter]]:
    """Find how to read and write 'name' on instances of 'owner'.

    Properties are read with their getter and written with their setter
    if they have one. Methods are called to read the value and are never
    written. Anything else is handled as a plain instance attribute.
    """
    member = inspect.getattr_static(owner, name, _MISSING)

    if isinstance(member, property):
        return member.fget, member.fset

    if inspect.isfunction(member) or isinstance(member, (staticmethod, classmethod)):

        def call(obj: Any) -> Any:
            return getattr(obj, name)()

        return call, None

    def read(obj: Any) -> Any:
        return getattr(obj, name, None)

    def write(obj: Any, value: Any) -> None:
        setattr(obj, name, value)

    return read, write


class MapNode:
    """Base class of the mapping tree nodes."""


class Literal(MapNode):
    """A fixed value, emitted as is and never written back.

    >>> Literal("work").value
    'work'
    """

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"


class Accessor(MapNode):
    """Read and write a value on the domain object.

    Either 'name' is given and resolved against the domain class, or the
    'get' and 'set' callables are given explicitly. Resolutions are memoized
    per class outside of the node, so the node never changes once compiled
    and accessors of collection items can be shared by objects of
    different classes.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        get: Optional[Getter] = None,
        set: Optional[Setter] = None,
    ):
        if name is None and get is None and set is None:
            raise ValueError("An accessor needs a name or a getter")

        self.name = name
        self._explicit = name is None
        self._getter = get
        self._setter = set

    def __repr__(self) -> str:
        return f"Accessor({self.name!r})"

    def resolve(self, owner: type) -> tuple[Optional[Getter], Optional[Setter]]:
        if self._explicit:
            return self._getter, self._setter

        return _resolve_accessor(owner, self.name)

    def get(self, obj: Any) -> Any:
        getter, _ = self.resolve(type(obj))
        return getter(obj) if getter is not None else None

    def can_write(self, obj: Any) -> bool:
        _, setter = self.resolve(type(obj))
        return setter is not None

    def set(self, obj: Any, value: Any) -> None:
        _, setter = self.resolve(type(obj))
        if setter is None:
            raise AttributeError(f"{self!r} cannot be written on {type(obj).__name__}")
        setter(obj, value)


class Nested(MapNode):
    """A SCIM object whose keys map to other nodes."""

    def __init__(self, children: Mapping[str, Any]):
        self.children = {key: compile_map(value) for key, value in children.items()}

    def __repr__(self) -> str:
        return f"Nested({self.children!r})"


class StaticEntry(MapNode):
    """One SCIM array entry, identified by the value of its 'match' attribute.

    On read, the entry is always emitted with ``{match: with_}`` merged in.
    On write, the input entry holding that value is looked up.
    """

    def __init__(self, match: str, with_: Any, using: Any):
        self.match = match
        self.with_ = with_
        self.using = compile_map(using)

    def __repr__(self) -> str:
        return f"StaticEntry({self.match!r}, {self.with_!r})"


class DynamicList(MapNode):
    """A SCIM array enumerating a collection of the domain object.

    'using' maps each item of the collection. Writing the array requires
    'find_with', which turns a SCIM array entry back into a domain item.
    """

    def __init__(
        self,
        list: Union[str, Accessor],
        using: Any,
        find_with: Optional[Callable[[Any], Any]] = None,
    ):
        self.list = list if isinstance(list, Accessor) else Accessor(list)
        self.using = compile_map(using)
        self.find_with = find_with

    def __repr__(self) -> str:
        return f"DynamicList({self.list.name!r})"


class ArrayNode(MapNode):
    """A SCIM array made of :class:`StaticEntry` or :class:`DynamicList` entries.

    Entries of any other kind are rejected, as they could not be written
    back. An array is expected to hold either static entries or a single
    dynamic list, but mixing them is not checked.
    """

    def __init__(self, entries: list[Any]):
        self.entries = [_compile_array_entry(entry) for entry in entries]

    def __repr__(self) -> str:
        return f"ArrayNode({self.entries!r})"


def _compile_array_entry(entry: Any) -> MapNode:
    if isinstance(entry, (StaticEntry, DynamicList)):
        return entry

    if isinstance(entry, Mapping):
        if "list" in entry:
            return DynamicList(
                list=entry["list"],
                using=entry.get("using", {}),
                find_with=entry.get("find_with"),
            )
        if "match" in entry:
            return StaticEntry(
                match=entry["match"], with_=entry.get("with"), using=entry.get("using", {})
            )

    raise ValueError(
        f"Array entries need a 'match' or a 'list' key, got {entry!r}"
    )


def compile_map(tree: Any) -> MapNode:
    """Compile the shorthand notation of a mapping tree into nodes.

    - strings are :class:`Accessor` names,
    - mappings are :class:`Nested` objects,
    - lists are arrays; their mapping items with a ``list`` key are
      :class:`DynamicList`, and those with a ``match`` key are
      :class:`StaticEntry`,
    - other values are :class:`Literal`.

    >>> compile_map({"userName": "username", "active": True})
    Nested({'userName': Accessor('username'), 'active': Literal(True)})
    """
    if isinstance(tree, MapNode):
        return tree
    if isinstance(tree, str):
        return Accessor(tree)
    if isinstance(tree, Mapping):
        return Nested(tree)
    if isinstance(tree, list):
        return ArrayNode(tree)
    return Literal(tree)


def _scim_scalar(value: Any) -> Any:
    """SCIM identifiers are strings, so numbers are turned into strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class AttributeMap:
    """Run a mapping tree in both directions for a resource class.

    :param tree: The mapping tree, in shorthand notation or as nodes.
    :param resource: The :class:`~scim2_mapper.Resource` subclass whose
        schemas decide which attributes can be written.
    :param owner: The domain class, used to resolve the accessors once
        and for all.
    :param configuration: The engine configuration.
    """

    def __init__(
        self,
        tree: Any,
        resource: type[Resource],
        owner: Optional[type] = None,
        configuration: Optional[EngineConfiguration] = None,
    ):
        self.root = compile_map(tree)
        self.resource = resource
        self.owner = owner
        self.configuration = configuration or DEFAULT_CONFIGURATION
        if owner is not None:
            for accessor in self.accessors():
                accessor.resolve(owner)

    def accessors(self) -> list[Accessor]:
        """The accessors applied to the domain object itself.

        Accessors used on the items of dynamic lists are left out, but
        the accessors of the lists themselves are included.
        """
        found: list[Accessor] = []

        def walk(node: MapNode) -> None:
            if isinstance(node, Accessor):
                found.append(node)
            elif isinstance(node, Nested):
                for child in node.children.values():
                    walk(child)
            elif isinstance(node, StaticEntry):
                walk(node.using)
            elif isinstance(node, DynamicList):
                found.append(node.list)
            elif isinstance(node, ArrayNode):
                for entry in node.entries:
                    walk(entry)

        walk(self.root)
        return found

    def mutable_attributes(self, owner: Optional[type] = None) -> list[str]:
        """The names of the accessors which can be written."""
        owner = owner or self.owner
        if owner is None:
            raise ValueError("The domain class is needed to find writable accessors")

        return [
            accessor.name
            for accessor in self.accessors()
            if accessor.name is not None and accessor.resolve(owner)[1] is not None
        ]

    def to_scim(self, obj: Any) -> dict[str, Any]:
        """Read the SCIM representation of 'obj'."""
        payload = self._read(obj, self.root)
        return payload if isinstance(payload, dict) else {}

    def _read(self, obj: Any, node: MapNode) -> Any:
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, Accessor):
            return _scim_scalar(node.get(obj))

        if isinstance(node, Nested):
            return {key: self._read(obj, child) for key, child in node.children.items()}

        if isinstance(node, ArrayNode):
            items = []
            for entry in node.entries:
                if isinstance(entry, StaticEntry):
                    value = self._read(obj, entry.using)
                    if not isinstance(value, dict):
                        value = {}
                    value[entry.match] = entry.with_
                    items.append(value)
                elif isinstance(entry, DynamicList):
                    collection = entry.list.get(obj) or []
                    items.extend(self._read(item, entry.using) for item in collection)
            return items

        raise TypeError(f"Unexpected mapping node {node!r}")

    def from_scim(self, obj: Any, payload: Mapping[str, Any]) -> None:
        """Write 'payload' onto 'obj', with full replacement semantics.

        Every mapped attribute is written, and those missing from the
        payload are cleared. Read-only and immutable attributes, literals
        and the root ``id`` are never written.
        """
        self._write(obj, self.root, self._flatten_extensions(payload), [])

    def _flatten_extensions(self, payload: Mapping[str, Any]) -> CaseInsensitiveDict:
        """Make extension attributes reachable from the top level.

        The extension objects are kept too, for trees mapping them under
        their URN, and gather the extension attributes given at the top
        level.
        """
        flattened = CaseInsensitiveDict(payload or {})
        for extension_schema in self.resource.extension_schemas:
            values = flattened.get(extension_schema.id)
            nested = CaseInsensitiveDict(values if isinstance(values, Mapping) else {})
            for attribute in extension_schema.attributes:
                if attribute.name in flattened and attribute.name not in nested:
                    nested[attribute.name] = flattened[attribute.name]
            for key, value in nested.items():
                flattened[key] = value
            flattened[extension_schema.id] = nested
        return flattened

    def _write(self, obj: Any, node: MapNode, value: Any, path: list[str]) -> None:
        if isinstance(node, Literal):
            return

        if isinstance(node, Accessor):
            self._write_accessor(obj, node, value, path)

        elif isinstance(node, Nested):
            values = value if isinstance(value, Mapping) else CaseInsensitiveDict()
            if not isinstance(values, CaseInsensitiveDict):
                values = CaseInsensitiveDict(values)
            for key, child in node.children.items():
                self._write(obj, child, values.get(key), [*path, key])

        elif isinstance(node, ArrayNode):
            items = value if isinstance(value, list) else []
            for entry in node.entries:
                if isinstance(entry, StaticEntry):
                    found = next(
                        (item for item in items if _entry_matches(item, entry)), None
                    )
                    self._write(obj, entry.using, found, path)
                elif isinstance(entry, DynamicList):
                    self._write_dynamic_list(obj, entry, items, path)

        else:
            raise TypeError(f"Unexpected mapping node {node!r}")

    def _write_accessor(
        self, obj: Any, accessor: Accessor, value: Any, path: list[str]
    ) -> None:
        lowered = [component.lower() for component in path]
        if lowered == ["id"]:
            return

        if lowered != ["externalid"] and not self._is_writable(path):
            logger.debug("Not writing read-only attribute '%s'", ".".join(path))
            return

        if not accessor.can_write(obj):
            logger.debug("No setter for attribute '%s'", ".".join(path))
            return

        accessor.set(obj, value)

    def _write_dynamic_list(
        self, obj: Any, entry: DynamicList, items: list[Any], path: list[str]
    ) -> None:
        if not self._is_writable(path):
            logger.debug("Not writing read-only collection '%s'", ".".join(path))
            return

        if entry.find_with is None:
            raise ValueError(
                f"The '{'.'.join(path)}' dynamic list needs a 'find_with' "
                "function to be written"
            )

        found = [entry.find_with(item) for item in items]
        if entry.list.can_write(obj):
            entry.list.set(obj, [item for item in found if item is not None])

    def _is_writable(self, path: list[str]) -> bool:
        schema_ids = {schema_id.lower() for schema_id in self.resource.schema_ids()}
        lookup = [component for component in path if component.lower() not in schema_ids]
        attribute = self.resource.find_attribute(*lookup)
        return attribute is not None and attribute.mutability.writable


def _entry_matches(item: Any, entry: StaticEntry) -> bool:
    if not isinstance(item, Mapping):
        return False
    if not isinstance(item, CaseInsensitiveDict):
        item = CaseInsensitiveDict(item)
    return item.get(entry.match) == entry.with_
