"""SCIM exceptions corresponding to RFC 7644 error types.

Every exception carries the HTTP status and ``scimType`` it stands for,
and renders to an :class:`~scim2_mapper.Error` payload with
:meth:`SCIMException.to_error`.
"""

from typing import TYPE_CHECKING
from typing import Any
from typing import Optional

if TYPE_CHECKING:
    from .messages.error import Error


class SCIMException(Exception):
    """Base exception for SCIM protocol errors.

    Subclasses set :attr:`status` and :attr:`scim_type` according to
    :rfc:`RFC 7644 Table 9 <7644#section-3.12>`.
    """

    status: int = 400
    scim_type: str = ""
    _default_detail: str = "A SCIM error occurred"

    def __init__(self, *, detail: Optional[str] = None, **context: Any):
        self.context = context
        self._detail = detail
        super().__init__(detail or self._default_detail)

    @property
    def detail(self) -> str:
        """The error detail message."""
        return self._detail or self._default_detail

    def to_error(self) -> "Error":
        """Convert this exception to a SCIM Error response object."""
        from .messages.error import Error

        return Error(
            status=self.status,
            scim_type=self.scim_type or None,
            detail=str(self),
        )

    @classmethod
    def from_error(cls, error: "Error") -> "SCIMException":
        """Create an exception from a SCIM Error object.

        :param error: The SCIM Error object to convert.
        :return: The appropriate SCIMException subclass instance.
        """
        from .messages.error import Error

        if not isinstance(error, Error):
            raise TypeError(f"Expected Error, got {type(error).__name__}")

        exception_class = _SCIM_TYPE_TO_EXCEPTION.get(error.scim_type or "")
        if exception_class is None:
            exception_class = _STATUS_TO_EXCEPTION.get(error.status or 400, cls)
        return exception_class(detail=error.detail)


class InvalidFilterException(SCIMException):
    """The specified filter syntax was invalid or is not supported.

    :rfc:`RFC 7644 Section 3.4.2.2 <7644#section-3.4.2.2>`
    """

    status = 400
    scim_type = "invalidFilter"
    _default_detail = (
        "The specified filter syntax was invalid, "
        "or the specified attribute and filter comparison combination is not supported"
    )

    def __init__(self, *, filter: Optional[str] = None, **kw: Any):
        self.filter = filter
        super().__init__(**kw)


class InvalidSyntaxException(SCIMException):
    """The request body message structure was invalid.

    Raised for malformed or unsupported PATCH requests.
    """

    status = 400
    scim_type = "invalidSyntax"
    _default_detail = (
        "The request body message structure was invalid "
        "or did not conform to the request schema"
    )


class InvalidValueException(SCIMException):
    """A required value was missing or the value was not compatible."""

    status = 400
    scim_type = "invalidValue"
    _default_detail = (
        "A required value was missing, or the value specified was not compatible "
        "with the operation or attribute type, or resource schema"
    )

    def __init__(
        self,
        *,
        attribute: Optional[str] = None,
        reason: Optional[str] = None,
        **kw: Any,
    ):
        self.attribute = attribute
        self.reason = reason
        super().__init__(**kw)


class ResourceInvalidException(InvalidValueException):
    """A resource failed schema validation.

    All the field errors are joined in a single detail message.
    """

    def __init__(self, *, errors: Optional[list[Any]] = None, **kw: Any):
        self.errors = list(errors or [])
        if self.errors and "detail" not in kw:
            joined = ", ".join(str(error) for error in self.errors)
            kw["detail"] = f"Operation failed since record has become invalid: {joined}"
        super().__init__(**kw)


class NoTargetException(SCIMException):
    """The specified path did not yield a target that could be operated on.

    :rfc:`RFC 7644 Section 3.5.2 <7644#section-3.5.2>`
    """

    status = 400
    scim_type = "noTarget"
    _default_detail = (
        "The specified path did not yield an attribute or attribute value "
        "that could be operated on"
    )

    def __init__(self, *, path: Optional[str] = None, **kw: Any):
        self.path = path
        super().__init__(**kw)


class MutabilityException(SCIMException):
    """The attempted modification is not compatible with the attribute's mutability."""

    status = 400
    scim_type = "mutability"
    _default_detail = (
        "The attempted modification is not compatible with the target attribute's "
        "mutability or current state"
    )

    def __init__(self, *, attribute: Optional[str] = None, **kw: Any):
        self.attribute = attribute
        super().__init__(**kw)


class UniquenessException(SCIMException):
    """One or more attribute values are already in use or reserved.

    Storage layers raise this when they detect a duplicate.
    """

    status = 409
    scim_type = "uniqueness"
    _default_detail = (
        "One or more of the attribute values are already in use or are reserved"
    )

    def __init__(
        self,
        *,
        attribute: Optional[str] = None,
        value: Optional[Any] = None,
        **kw: Any,
    ):
        self.attribute = attribute
        self.value = value
        super().__init__(**kw)


class NotFoundException(SCIMException):
    """The requested resource does not exist."""

    status = 404
    _default_detail = "Resource not found"

    def __init__(self, *, id: Optional[Any] = None, **kw: Any):
        self.id = id
        if id is not None and "detail" not in kw:
            kw["detail"] = f'Resource "{id}" not found'
        super().__init__(**kw)


class AuthenticationException(SCIMException):
    """The request could not be authenticated."""

    status = 401
    _default_detail = "Requires authentication"


_SCIM_TYPE_TO_EXCEPTION: dict[str, type[SCIMException]] = {
    "invalidFilter": InvalidFilterException,
    "invalidSyntax": InvalidSyntaxException,
    "invalidValue": InvalidValueException,
    "noTarget": NoTargetException,
    "mutability": MutabilityException,
    "uniqueness": UniquenessException,
}

_STATUS_TO_EXCEPTION: dict[int, type[SCIMException]] = {
    401: AuthenticationException,
    404: NotFoundException,
}
