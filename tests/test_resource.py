from scim2_mapper import ENTERPRISE_USER_SCHEMA
from scim2_mapper import Attribute
from scim2_mapper import BaseModel
from scim2_mapper import Email
from scim2_mapper import EnterpriseUser
from scim2_mapper import Group
from scim2_mapper import GroupMember
from scim2_mapper import GroupMembership
from scim2_mapper import Manager
from scim2_mapper import Meta
from scim2_mapper import Name
from scim2_mapper import Resource
from scim2_mapper import ResourceType
from scim2_mapper import Schema
from scim2_mapper import User

ENTERPRISE_URN = ENTERPRISE_USER_SCHEMA.id


def test_case_insensitive_attributes():
    """Attribute names are matched ignoring their case."""
    user = User({"USERNAME": "bjensen", "name": {"GIVENNAME": "Barbara"}})
    assert user["userName"] == "bjensen"
    assert user.user_name == "bjensen"
    assert user["username"] == "bjensen"
    assert isinstance(user.name, Name)
    assert user.name.given_name == "Barbara"
    assert user.to_dict()["userName"] == "bjensen"


def test_unknown_attributes_are_dropped():
    user = User(userName="bjensen", favouriteColour="blue")
    assert "favouriteColour" not in user
    assert "favouriteColour" not in user.to_dict()
    assert user.get("favouriteColour", "none") == "none"


def test_complex_values_are_converted():
    user = User(
        userName="bjensen",
        emails=[{"value": "bjensen@example.com", "type": "work", "primary": True}],
    )
    assert user.emails == [
        Email(value="bjensen@example.com", type="work", primary=True)
    ]
    assert user.emails[0]["VALUE"] == "bjensen@example.com"


def test_to_dict():
    """The wire representation holds the schemas and the resource type."""
    user = User(id="2819c223", userName="bjensen", displayName=None)
    assert user.to_dict() == {
        "schemas": ["urn:ietf:params:scim:schemas:core:2.0:User"],
        "id": "2819c223",
        "userName": "bjensen",
        "meta": {"resourceType": "User"},
    }


def test_meta_is_kept():
    user = User(
        userName="bjensen",
        meta={"created": "2010-01-23T04:56:22Z", "location": "/Users/2819c223"},
    )
    assert isinstance(user.meta, Meta)
    assert user.to_dict()["meta"] == {
        "created": "2010-01-23T04:56:22Z",
        "location": "/Users/2819c223",
        "resourceType": "User",
    }


def test_extension_attributes_nested_or_flat():
    """Extension attributes can be given under their URN or at the top level."""
    nested = EnterpriseUser(
        {"userName": "bjensen", ENTERPRISE_URN: {"employeeNumber": "701984"}}
    )
    flat = EnterpriseUser(userName="bjensen", employeeNumber="701984")
    assert nested.employee_number == "701984"
    assert nested == flat

    payload = flat.to_dict()
    assert payload["schemas"] == [
        "urn:ietf:params:scim:schemas:core:2.0:User",
        ENTERPRISE_URN,
    ]
    assert payload[ENTERPRISE_URN] == {"employeeNumber": "701984"}
    assert "employeeNumber" not in payload
    assert payload["meta"]["resourceType"] == "User"


def test_extension_complex_attributes():
    user = EnterpriseUser(
        {
            "userName": "bjensen",
            ENTERPRISE_URN.upper(): {"manager": {"value": "26118915", "displayName": "John"}},
        }
    )
    assert isinstance(user.manager, Manager)
    assert user.to_dict()[ENTERPRISE_URN] == {
        "manager": {"value": "26118915", "displayName": "John"}
    }


def test_empty_extension():
    assert EnterpriseUser(userName="bjensen").to_dict()[ENTERPRISE_URN] == {}


def test_find_attribute():
    """Integer components stand for array indices and are skipped."""
    assert User.find_attribute("emails", 0, "VALUE").name == "value"
    assert User.find_attribute("name", "givenName").name == "givenName"
    assert User.find_attribute("unknown") is None
    assert EnterpriseUser.find_attribute("manager", "displayName").name == "displayName"
    assert User.find_attribute("id") is None
    assert User.get_attribute("id").name == "id"


def test_group_members():
    group = Group(
        displayName="Tour Guides",
        members=[{"value": "2819c223", "type": "User"}],
    )
    assert group.members == [GroupMember(value="2819c223", type="User")]
    assert group.is_valid()
    assert not Group().is_valid()


def test_resource_type():
    resource_type = EnterpriseUser.resource_type("/ResourceTypes/User")
    assert isinstance(resource_type, ResourceType)
    assert resource_type.model_dump() == {
        "schemas": ["urn:ietf:params:scim:schemas:core:2.0:ResourceType"],
        "id": "User",
        "name": "User",
        "endpoint": "/Users",
        "schema": "urn:ietf:params:scim:schemas:core:2.0:User",
        "schemaExtensions": [{"schema": ENTERPRISE_URN, "required": False}],
        "meta": {"resourceType": "ResourceType", "location": "/ResourceTypes/User"},
    }
    assert Group.resource_type().schema_extensions is None


def test_schema_to_dict():
    payload = Group.schema.to_dict(location="/Schemas/Group")
    assert payload["id"] == "urn:ietf:params:scim:schemas:core:2.0:Group"
    assert payload["meta"] == {"resourceType": "Schema", "location": "/Schemas/Group"}

    members = next(item for item in payload["attributes"] if item["name"] == "members")
    assert members["type"] == "complex"
    assert members["multiValued"] is True
    assert [item["name"] for item in members["subAttributes"]] == [
        "value",
        "type",
        "display",
    ]
    assert "complexType" not in members


def test_models_are_built_from_schemas():
    """Each schema attribute is a field, dumped under the attribute name."""
    assert issubclass(User, BaseModel)
    assert User.model_fields["user_name"].serialization_alias == "userName"
    assert GroupMembership.model_fields["ref"].serialization_alias == "$ref"
    assert set(EnterpriseUser.model_fields) > set(User.model_fields)
    assert "employee_number" not in User.model_fields


def test_assignment_converts_complex_values():
    user = User(userName="bjensen")
    user["NAME"] = {"givenName": "Barbara"}
    assert isinstance(user.name, Name)
    assert user.name.given_name == "Barbara"

    user.emails = [{"value": "bjensen@example.com"}]
    assert user.emails == [Email(value="bjensen@example.com")]


def test_extend_schema():
    """Extending a resource builds a subclass, the resource itself is unchanged."""
    Badge = Resource.from_schema(
        Schema(
            id="urn:example:Badge",
            name="Badge",
            attributes=[Attribute(name="label", required=True)],
        )
    )
    ExtendedBadge = Badge.extend_schema(ENTERPRISE_USER_SCHEMA)
    assert issubclass(ExtendedBadge, Badge)
    assert Badge.extension_schemas == []
    assert ExtendedBadge.schema_ids() == ["urn:example:Badge", ENTERPRISE_URN]

    badge = ExtendedBadge({"label": "Guest", ENTERPRISE_URN: {"division": "Theme Park"}})
    assert badge.division == "Theme Park"
    assert badge.to_dict() == {
        "schemas": ["urn:example:Badge", ENTERPRISE_URN],
        "label": "Guest",
        "meta": {"resourceType": "Badge"},
        ENTERPRISE_URN: {"division": "Theme Park"},
    }
