from typing import ClassVar

from ..annotations import Mutability
from ..attributes import ComplexValue
from .resource import Resource
from .schema import Attribute
from .schema import Schema


class GroupMember(
    ComplexValue.from_schema(
        Schema(
            name="ReferenceMember",
            attributes=[
                Attribute(name="value", mutability=Mutability.immutable, required=True),
                Attribute(name="type", mutability=Mutability.immutable),
                Attribute(name="display", mutability=Mutability.immutable),
            ],
        )
    )
):
    """A member of a group, either a user or a nested group.

    The "type" sub-attribute tells which one.
    """


GROUP_SCHEMA = Schema(
    id="urn:ietf:params:scim:schemas:core:2.0:Group",
    name="Group",
    description="Group",
    attributes=[
        Attribute(name="displayName", required=True),
        Attribute(
            name="members",
            multi_valued=True,
            complex_type=GroupMember,
            mutability=Mutability.read_write,
        ),
    ],
)


class Group(Resource.from_schema(GROUP_SCHEMA)):
    """A SCIM group, :rfc:`RFC7643 §4.2 <7643#section-4.2>`."""

    endpoint: ClassVar[str] = "/Groups"
