import pytest

from scim2_mapper import Attribute
from scim2_mapper import Email
from scim2_mapper import EngineConfiguration
from scim2_mapper import FieldError
from scim2_mapper import Name
from scim2_mapper import ResourceInvalidException
from scim2_mapper import User
from scim2_mapper import Validator


def test_required_attribute():
    """Blank values of required attributes are reported."""
    attribute = Attribute(name="userName", required=True)
    assert not attribute.is_valid(None)
    assert not attribute.is_valid("   ")
    assert attribute.is_valid("bjensen")
    assert attribute.validate_value("") == [FieldError("userName", "is required")]


def test_optional_blank_attribute():
    """Blank values of optional attributes are never checked."""
    attribute = Attribute(name="age", type=Attribute.Type.integer)
    assert attribute.is_valid(None)
    assert attribute.is_valid([])


def test_false_is_not_blank():
    """False is a value for required booleans."""
    attribute = Attribute(name="active", type=Attribute.Type.boolean, required=True)
    assert attribute.is_valid(False)
    assert not attribute.is_valid("false")


def test_wrong_simple_type():
    attribute = Attribute(name="userName")
    assert attribute.validate_value(10) == [
        FieldError("userName", "has the wrong type. It has to be a(n) string.")
    ]


def test_wrong_multi_valued_type():
    attribute = Attribute(name="tags", multi_valued=True)
    assert attribute.is_valid(["a", "b"])
    assert attribute.validate_value(["a", 123]) == [
        FieldError(
            "tags",
            "or one of its elements has the wrong type. "
            "It has to be an array of strings.",
        )
    ]
    assert not attribute.is_valid("a")


def test_integer_and_decimal_types():
    integer = Attribute(name="count", type=Attribute.Type.integer)
    decimal = Attribute(name="ratio", type=Attribute.Type.decimal)
    assert integer.is_valid(3)
    assert not integer.is_valid(3.5)
    assert not integer.is_valid(True)
    assert decimal.is_valid(3.5)
    assert decimal.is_valid(3)
    assert not decimal.is_valid("3.5")


def test_date_time_type():
    """Only full timestamps are accepted."""
    attribute = Attribute(name="lastModified", type=Attribute.Type.date_time)
    assert attribute.is_valid("2018-07-26T11:59:43-06:00")
    assert attribute.is_valid("2011-05-13T04:42:34Z")
    assert not attribute.is_valid("2018-07-26")
    assert not attribute.is_valid("yesterday")
    assert not attribute.is_valid("2018-07-26T11")
    assert not attribute.is_valid("20180726T115943")
    assert not attribute.is_valid("2018-07-26T11:59")
    assert attribute.validate_value("2018-07-26") == [
        FieldError("lastModified", "has the wrong type. It has to be a(n) dateTime.")
    ]


def test_complex_type_format():
    """Complex attributes only accept values of their own complex type."""
    attribute = Attribute(name="name", complex_type=Name)
    assert attribute.type == Attribute.Type.complex
    assert attribute.is_valid(Name({"givenName": "Barbara"}))
    assert attribute.validate_value(Email({"value": "bjensen@example.com"})) == [
        FieldError("name", "has to follow the complexType format.")
    ]
    assert attribute.validate_value("Barbara Jensen") == [
        FieldError("name", "has to follow the complexType format.")
    ]


def test_multi_valued_complex_needs_a_list():
    """A single object is not a valid value for a multi-valued complex attribute."""
    user = User(userName="bjensen", emails={"value": "bjensen@example.com"})
    assert user.emails == {"value": "bjensen@example.com"}
    assert user.validate() == [
        FieldError("emails", "has to follow the complexType format.")
    ]


def test_nested_errors_are_prefixed():
    user = User(userName="bjensen", emails=[{"type": "work"}])
    assert user.validate() == [FieldError("emails.value", "is required")]
    assert str(user.errors[0]) == "emails.value is required"


def test_relaxed_value_fields():
    """The value of emails and similar attributes can be made optional."""
    user = User(userName="bjensen", emails=[{"type": "work"}])
    configuration = EngineConfiguration(optional_value_fields_required=False)
    assert user.is_valid(configuration)
    assert not user.is_valid()


def test_validator_collects_every_error():
    validator = Validator()
    errors = validator.validate(
        User.schema, {"userName": None, "active": "yes", "nickName": 3}
    )
    assert [error.attribute for error in errors] == ["userName", "nickName", "active"]


def test_ensure_valid():
    user = User(displayName="Babs Jensen")
    with pytest.raises(
        ResourceInvalidException,
        match="Operation failed since record has become invalid: userName is required",
    ) as exc_info:
        user.ensure_valid()

    assert exc_info.value.errors == [FieldError("userName", "is required")]
    assert exc_info.value.to_error().scim_type == "invalidValue"

    User(userName="bjensen").ensure_valid()
