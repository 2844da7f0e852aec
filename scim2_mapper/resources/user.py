from typing import ClassVar

from ..annotations import Mutability
from ..annotations import Returned
from ..annotations import Uniqueness
from ..attributes import ComplexValue
from .resource import Resource
from .schema import Attribute
from .schema import Schema


def _vdtp_schema(name: str) -> Schema:
    """Build the schema of a Value/Display/Type/Primary complex type.

    Each complex type gets its own schema instance, so values of one type
    are rejected where another is expected.
    """
    return Schema(
        name=name,
        attributes=[
            Attribute(name="value", required=True, relaxable=True),
            Attribute(name="display", mutability=Mutability.read_only),
            Attribute(name="type"),
            Attribute(name="primary", type=Attribute.Type.boolean),
        ],
    )


class Name(
    ComplexValue.from_schema(
        Schema(
            name="Name",
            attributes=[
                Attribute(name="familyName"),
                Attribute(name="givenName"),
                Attribute(name="middleName"),
                Attribute(name="formatted"),
                Attribute(name="honorificPrefix"),
                Attribute(name="honorificSuffix"),
            ],
        )
    )
):
    """The components of the user's name."""


class Email(ComplexValue.from_schema(_vdtp_schema("Email"))):
    """An email address of the user."""


class PhoneNumber(ComplexValue.from_schema(_vdtp_schema("PhoneNumber"))):
    """A phone number of the user."""


class Ims(ComplexValue.from_schema(_vdtp_schema("Ims"))):
    """An instant messaging address of the user."""


class Photo(ComplexValue.from_schema(_vdtp_schema("Photo"))):
    """A URL of an image of the user."""


class Entitlement(ComplexValue.from_schema(_vdtp_schema("Entitlement"))):
    """An entitlement of the user."""


class Role(ComplexValue.from_schema(_vdtp_schema("Role"))):
    """A role of the user."""


class X509Certificate(ComplexValue.from_schema(_vdtp_schema("X509Certificate"))):
    """A DER-encoded X.509 certificate of the user."""


class Address(
    ComplexValue.from_schema(
        Schema(
            name="Address",
            attributes=[
                Attribute(name="type"),
                Attribute(name="formatted"),
                Attribute(name="streetAddress"),
                Attribute(name="locality"),
                Attribute(name="region"),
                Attribute(name="postalCode"),
                Attribute(name="country"),
                Attribute(name="primary", type=Attribute.Type.boolean),
            ],
        )
    )
):
    """A physical mailing address."""


class GroupMembership(
    ComplexValue.from_schema(
        Schema(
            name="Reference",
            attributes=[
                Attribute(name="value", mutability=Mutability.read_only, required=True),
                Attribute(name="$ref", type=Attribute.Type.reference),
                Attribute(name="display", mutability=Mutability.read_only),
                Attribute(name="type", mutability=Mutability.read_only),
            ],
        )
    )
):
    """A group the user belongs to, as listed in the user's "groups"."""


USER_SCHEMA = Schema(
    id="urn:ietf:params:scim:schemas:core:2.0:User",
    name="User",
    description="User Account",
    attributes=[
        Attribute(name="userName", required=True, uniqueness=Uniqueness.server),
        Attribute(name="name", complex_type=Name),
        Attribute(name="displayName"),
        Attribute(name="nickName"),
        Attribute(name="profileUrl"),
        Attribute(name="title"),
        Attribute(name="userType"),
        Attribute(name="preferredLanguage"),
        Attribute(name="locale"),
        Attribute(name="timezone"),
        Attribute(name="active", type=Attribute.Type.boolean),
        Attribute(
            name="password",
            mutability=Mutability.write_only,
            returned=Returned.never,
        ),
        Attribute(name="emails", multi_valued=True, complex_type=Email),
        Attribute(name="phoneNumbers", multi_valued=True, complex_type=PhoneNumber),
        Attribute(name="ims", multi_valued=True, complex_type=Ims),
        Attribute(name="photos", multi_valued=True, complex_type=Photo),
        Attribute(name="addresses", multi_valued=True, complex_type=Address),
        Attribute(
            name="groups",
            multi_valued=True,
            complex_type=GroupMembership,
            mutability=Mutability.read_only,
        ),
        Attribute(name="entitlements", multi_valued=True, complex_type=Entitlement),
        Attribute(name="roles", multi_valued=True, complex_type=Role),
        Attribute(
            name="x509Certificates", multi_valued=True, complex_type=X509Certificate
        ),
    ],
)


class User(Resource.from_schema(USER_SCHEMA)):
    """A SCIM user, :rfc:`RFC7643 §4.1 <7643#section-4.1>`.

    >>> user = User({"USERNAME": "bjensen", "name": {"givenName": "Barbara"}})
    >>> user.user_name
    'bjensen'
    >>> user.name.given_name
    'Barbara'
    """

    endpoint: ClassVar[str] = "/Users"
