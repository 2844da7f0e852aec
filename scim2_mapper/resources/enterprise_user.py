from ..annotations import Mutability
from ..attributes import ComplexValue
from .schema import Attribute
from .schema import Schema
from .user import User


class Manager(
    ComplexValue.from_schema(
        Schema(
            name="Manager",
            attributes=[
                Attribute(name="value"),
                Attribute(name="$ref", type=Attribute.Type.reference),
                Attribute(name="displayName", mutability=Mutability.read_only),
            ],
        )
    )
):
    """The user's manager, referenced by its "id"."""


ENTERPRISE_USER_SCHEMA = Schema(
    id="urn:ietf:params:scim:schemas:extension:enterprise:2.0:User",
    name="EnterpriseUser",
    description="Enterprise User",
    attributes=[
        Attribute(name="employeeNumber"),
        Attribute(name="costCenter"),
        Attribute(name="organization"),
        Attribute(name="division"),
        Attribute(name="department"),
        Attribute(name="manager", complex_type=Manager),
    ],
)


class EnterpriseUser(User.extend_schema(ENTERPRISE_USER_SCHEMA)):
    """A user carrying the :rfc:`RFC7643 §4.3 <7643#section-4.3>` enterprise extension.

    Extension attributes can be given flat or under the extension URN,
    and are nested under the URN when dumped:

    >>> user = EnterpriseUser({"userName": "bjensen", "employeeNumber": "701984"})
    >>> user.to_dict()[ENTERPRISE_USER_SCHEMA.id]
    {'employeeNumber': '701984'}
    """

    resource_type_name = "User"
