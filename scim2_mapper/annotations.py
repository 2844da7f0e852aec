from enum import Enum


class Mutability(str, Enum):
    """When the value of an attribute can be (re)defined, as per :rfc:`RFC7643 §7 <7643#section-7>`."""

    read_only = "readOnly"
    """The attribute is assigned by the service provider and never written
    from a client payload."""

    read_write = "readWrite"
    """The attribute can be read and updated at any time."""

    immutable = "immutable"
    """The attribute can be set at creation or replacement, and is never
    updated afterwards."""

    write_only = "writeOnly"
    """The attribute can be updated at any time but is never returned."""

    _default = read_write

    @property
    def writable(self) -> bool:
        """Whether a mapped value can be written back onto a domain object."""
        return self in (Mutability.read_write, Mutability.write_only)


class Returned(str, Enum):
    """When an attribute is returned in a response."""

    always = "always"
    """Returned regardless of the ``attributes`` query parameter."""

    never = "never"
    """Never returned."""

    default = "default"
    """Returned unless explicitly excluded."""

    request = "request"
    """Returned only when explicitly requested."""

    _default = default


class Uniqueness(str, Enum):
    """How the service provider enforces uniqueness of attribute values."""

    none = "none"
    server = "server"
    global_ = "global"

    _default = none


class Required(Enum):
    """Whether an attribute must hold a non-blank value."""

    true = True
    false = False

    _default = false

    def __bool__(self) -> bool:
        return self.value


class CaseExact(Enum):
    """Whether a string attribute is case sensitive."""

    true = True
    false = False

    _default = false

    def __bool__(self) -> bool:
        return self.value
