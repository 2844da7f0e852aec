import re
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import Any
from typing import Optional

from pydantic.alias_generators import to_snake

_UNDERSCORE_ALPHANUMERIC = re.compile(r"_+([0-9A-Za-z]+)")
_NON_WORD_UNDERSCORE = re.compile(r"[\W_]+")


def _int_to_str(status: Optional[int]) -> Optional[str]:
    return None if status is None else str(status)


def _to_camel(string: str) -> str:
    """Transform strings to camelCase.

    Unlike the pydantic implementation, characters following a special
    character are left untouched, so '$ref' stays '$ref'.

    >>> _to_camel("multi_valued")
    'multiValued'
    >>> _to_camel("$ref")
    '$ref'
    """
    snake = to_snake(string)
    camel = _UNDERSCORE_ALPHANUMERIC.sub(lambda m: m.group(1).title(), snake)
    return camel


def _normalize_attribute_name(attribute_name: str) -> str:
    """Remove all non-alphanumerical characters and lowercase a string.

    Extension URNs keep their punctuation, only the case is folded.

    >>> _normalize_attribute_name("multiValued")
    'multivalued'
    >>> _normalize_attribute_name("multi_valued")
    'multivalued'
    """
    is_extension_attribute = ":" in attribute_name
    if not is_extension_attribute:
        attribute_name = _NON_WORD_UNDERSCORE.sub("", attribute_name)

    return attribute_name.lower()


def _fold(key: Any) -> Any:
    return key.lower() if isinstance(key, str) else key


class CaseInsensitiveDict(MutableMapping[str, Any]):
    """A dict whose string keys are looked up case-insensitively.

    Keys keep the case they were first written with: writing 'User' and
    then 'USER' leaves a single 'User' key holding the second value.
    Nested mappings, including mappings inside lists, are converted on
    assignment so the whole structure behaves the same way.

    >>> data = CaseInsensitiveDict({"userName": "bjensen"})
    >>> data["USERNAME"]
    'bjensen'
    >>> list(data)
    ['userName']
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        self._keys: dict[Any, str] = {}
        self._data: dict[str, Any] = {}
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)

    def __setitem__(self, key: str, value: Any) -> None:
        actual_key = self._keys.setdefault(_fold(key), key)
        self._data[actual_key] = deep_case_insensitive(value)

    def __getitem__(self, key: str) -> Any:
        return self._data[self._keys[_fold(key)]]

    def __delitem__(self, key: str) -> None:
        actual_key = self._keys.pop(_fold(key))
        del self._data[actual_key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return _fold(key) in self._keys

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self.to_dict() == to_plain(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._data!r})"

    def canonical_key(self, key: str) -> Optional[str]:
        """Return the key as it is stored, or :data:`None` if absent."""
        return self._keys.get(_fold(key))

    def copy(self) -> "CaseInsensitiveDict":
        return CaseInsensitiveDict(self._data)

    def to_dict(self) -> dict[str, Any]:
        """Convert back to plain dicts and lists, at any depth."""
        return to_plain(self)


def deep_case_insensitive(value: Any) -> Any:
    """Convert mappings to :class:`CaseInsensitiveDict`, recursing through lists."""
    if isinstance(value, CaseInsensitiveDict):
        return value
    if isinstance(value, Mapping):
        return CaseInsensitiveDict(value)
    if isinstance(value, list):
        return [deep_case_insensitive(item) for item in value]
    return value


def to_plain(value: Any) -> Any:
    """Convert case-insensitive mappings back to plain dicts, at any depth."""
    if isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    return value


def is_blank(value: Any) -> bool:
    """Tell whether a value counts as absent.

    :data:`None`, empty strings, whitespace-only strings and empty
    collections are blank. ``False`` and ``0`` are not.

    >>> is_blank(" ")
    True
    >>> is_blank(False)
    False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def dot_path(components: list[str], value: Any) -> Any:
    """Nest a value under a list of path components.

    >>> dot_path(["name", "givenName"], "Barbara")
    {'name': {'givenName': 'Barbara'}}
    """
    if not components:
        return value
    return {components[0]: dot_path(components[1:], value)}


def deep_merge(target: MutableMapping[str, Any], other: Mapping[str, Any]) -> None:
    """Merge 'other' into 'target' in place, recursing into nested mappings."""
    for key, value in other.items():
        current = target.get(key)
        if isinstance(current, MutableMapping) and isinstance(value, Mapping):
            deep_merge(current, value)
        else:
            target[key] = value


def _split_outside_brackets(path: str) -> list[str]:
    """Split on dots which are not inside a ``[...]`` filter."""
    components = []
    depth = 0
    current = ""
    for char in path:
        if char == "[":
            depth += 1
        elif char == "]":
            depth = max(depth - 1, 0)

        if char == "." and depth == 0:
            components.append(current)
            current = ""
        else:
            current += char

    components.append(current)
    return components


def path_str_to_array(schema_ids: Iterable[str], path: str) -> list[str]:
    """Split an attribute path in components, recognizing extension schema URNs.

    A path starting with a known schema URN followed by ``:`` yields the
    URN as a leading component; a bare URN yields a single component.

    >>> path_str_to_array([], "name.givenName")
    ['name', 'givenName']
    >>> urn = "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User"
    >>> path_str_to_array([urn], urn + ":manager.value")[1:]
    ['manager', 'value']
    """
    if ":" in path:
        lowered = path.lower()
        for schema_id in schema_ids:
            schema_lower = schema_id.lower()
            if lowered == schema_lower:
                return [schema_id]
            if lowered.startswith(f"{schema_lower}:"):
                remainder = path[len(schema_id) + 1 :]
                return [schema_id] + _split_outside_brackets(remainder)

    return _split_outside_brackets(path)
