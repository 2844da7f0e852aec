"""Tests for SCIM exceptions."""

from scim2_mapper import AuthenticationException
from scim2_mapper import Error
from scim2_mapper import FieldError
from scim2_mapper import InvalidFilterException
from scim2_mapper import InvalidSyntaxException
from scim2_mapper import InvalidValueException
from scim2_mapper import MutabilityException
from scim2_mapper import NoTargetException
from scim2_mapper import NotFoundException
from scim2_mapper import ResourceInvalidException
from scim2_mapper import SCIMException
from scim2_mapper import UniquenessException


def test_base_exception_default_message():
    """SCIMException uses default message when no detail is provided."""
    exc = SCIMException()
    assert str(exc) == "A SCIM error occurred"
    assert exc.status == 400
    assert exc.scim_type == ""


def test_base_exception_custom_message():
    """SCIMException uses custom detail when provided."""
    exc = SCIMException(detail="Custom error message")
    assert str(exc) == "Custom error message"
    assert exc.detail == "Custom error message"


def test_to_error():
    """to_error() converts SCIMException to Error response object."""
    exc = SCIMException(detail="Test error")
    error = exc.to_error()
    assert isinstance(error, Error)
    assert error.status == 400
    assert error.scim_type is None
    assert error.detail == "Test error"


def test_context_attributes():
    """Extra keyword arguments are stored in context dict."""
    exc = NoTargetException(detail="Error", path="emails", extra="data")
    assert exc.path == "emails"
    assert exc.context == {"extra": "data"}


def test_invalid_filter_exception():
    exc = InvalidFilterException(filter="userName zz bjensen")
    assert exc.filter == "userName zz bjensen"
    assert exc.to_error().model_dump() == {
        "schemas": ["urn:ietf:params:scim:api:messages:2.0:Error"],
        "status": "400",
        "scimType": "invalidFilter",
        "detail": "The specified filter syntax was invalid, "
        "or the specified attribute and filter comparison combination is not supported",
    }


def test_uniqueness_exception():
    exc = UniquenessException(attribute="userName", value="bjensen")
    assert exc.status == 409
    assert exc.attribute == "userName"
    assert exc.value == "bjensen"
    assert exc.to_error().scim_type == "uniqueness"


def test_resource_invalid_exception():
    """Every field error is listed in the detail."""
    exc = ResourceInvalidException(
        errors=[
            FieldError("userName", "is required"),
            FieldError("active", "has the wrong type. It has to be a(n) boolean."),
        ]
    )
    assert isinstance(exc, InvalidValueException)
    assert exc.detail == (
        "Operation failed since record has become invalid: userName is required, "
        "active has the wrong type. It has to be a(n) boolean."
    )
    assert exc.to_error().scim_type == "invalidValue"


def test_not_found_exception():
    exc = NotFoundException(id="2819c223")
    assert exc.detail == 'Resource "2819c223" not found'
    error = exc.to_error()
    assert error.status == 404
    assert error.scim_type is None
    assert NotFoundException().detail == "Resource not found"


def test_authentication_exception():
    error = AuthenticationException().to_error()
    assert error.status == 401
    assert error.detail == "Requires authentication"


def test_all_exceptions_inherit_from_scim_exception():
    for exception_class in (
        InvalidFilterException,
        InvalidSyntaxException,
        InvalidValueException,
        ResourceInvalidException,
        NoTargetException,
        MutabilityException,
        UniquenessException,
        NotFoundException,
        AuthenticationException,
    ):
        assert issubclass(exception_class, SCIMException)
        assert isinstance(exception_class().to_error(), Error)


def test_from_error_scim_type():
    """The scimType decides the exception class."""
    for scim_type, exception_class in (
        ("invalidFilter", InvalidFilterException),
        ("invalidSyntax", InvalidSyntaxException),
        ("invalidValue", InvalidValueException),
        ("noTarget", NoTargetException),
        ("mutability", MutabilityException),
        ("uniqueness", UniquenessException),
    ):
        error = Error(status=400, scim_type=scim_type, detail="Some detail")
        exc = SCIMException.from_error(error)
        assert type(exc) is exception_class
        assert exc.detail == "Some detail"


def test_from_error_status():
    """Without a known scimType, the status decides the exception class."""
    assert isinstance(SCIMException.from_error(Error(status=404)), NotFoundException)
    assert isinstance(
        SCIMException.from_error(Error(status=401)), AuthenticationException
    )
    exc = SCIMException.from_error(Error(status=500, scim_type="unknown"))
    assert type(exc) is SCIMException
    assert exc.detail == "A SCIM error occurred"


def test_from_error_no_detail():
    exc = SCIMException.from_error(Error(scim_type="noTarget"))
    assert exc.detail == NoTargetException().detail
