from scim2_mapper import ENTERPRISE_USER_SCHEMA
from scim2_mapper import EnterpriseUser
from scim2_mapper import Group
from scim2_mapper import InvalidSyntaxException
from scim2_mapper import ScimMixin


class Store:
    """Records which can be looked up by id, standing for a database table."""

    def __init__(self):
        self.records = {}

    def save(self, *records):
        for record in records:
            self.records[str(record.id)] = record

    def find(self, record_id):
        return self.records.get(str(record_id))


users = Store()
groups = Store()


def find_member(entry):
    """Find a user or a group from a member entry, users being the default."""
    member_type = (entry.get("type") or "User").lower()
    if member_type == "user":
        return users.find(entry["value"])
    if member_type == "group":
        return groups.find(entry["value"])
    raise InvalidSyntaxException(detail=f"Unrecognised type {member_type!r}")


class MockUser(ScimMixin):
    __scim_resource__ = EnterpriseUser
    __scim_attributes__ = {
        "id": "id",
        "externalId": "scim_uid",
        "userName": "username",
        "displayName": "display_name",
        "name": {
            "givenName": "first_name",
            "familyName": "last_name",
        },
        "password": "password",
        "emails": [
            {
                "match": "type",
                "with": "work",
                "using": {"value": "work_email_address", "primary": True},
            },
            {
                "match": "type",
                "with": "home",
                "using": {"value": "home_email_address", "primary": False},
            },
        ],
        "phoneNumbers": [
            {
                "match": "type",
                "with": "work",
                "using": {"value": "work_phone_number", "primary": False},
            },
        ],
        "groups": [
            {
                "list": "groups",
                "using": {"value": "id", "display": "display_name"},
            },
        ],
        "active": "is_active",
        ENTERPRISE_USER_SCHEMA.id: {
            "organization": "organization",
            "department": "department",
        },
    }
    __scim_queryable_attributes__ = {
        "id": {"column": "id"},
        "externalId": "scim_uid",
        "userName": "username",
        "name.givenName": "first_name",
        "name.familyName": "last_name",
        "emails": {"columns": ["work_email_address", "home_email_address"]},
        "emails.value": ["work_email_address", "home_email_address"],
        "emails.type": {"ignore": True},
        "meta.lastModified": "updated_at",
    }

    scim_type = "User"

    def __init__(
        self,
        id=None,
        scim_uid=None,
        username=None,
        first_name=None,
        last_name=None,
        work_email_address=None,
        home_email_address=None,
        work_phone_number=None,
        password=None,
        is_active=None,
        organization=None,
        department=None,
        groups=None,
    ):
        self.id = id
        self.scim_uid = scim_uid
        self.username = username
        self.first_name = first_name
        self.last_name = last_name
        self.work_email_address = work_email_address
        self.home_email_address = home_email_address
        self.work_phone_number = work_phone_number
        self.password = password
        self.is_active = is_active
        self.organization = organization
        self.department = department
        self.groups = groups or []

    def display_name(self):
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class MockGroup(ScimMixin):
    __scim_resource__ = Group
    __scim_attributes__ = {
        "id": "id",
        "externalId": "scim_uid",
        "displayName": "display_name",
        "members": [
            {
                "list": "members",
                "using": {"value": "id", "type": "scim_type"},
                "find_with": find_member,
            },
        ],
    }
    __scim_queryable_attributes__ = {"displayName": "display_name"}

    scim_type = "Group"

    def __init__(self, id=None, scim_uid=None, display_name=None):
        self.id = id
        self.scim_uid = scim_uid
        self.display_name = display_name
        self.users = []
        self.child_groups = []

    @property
    def members(self):
        return self.users + self.child_groups

    @members.setter
    def members(self, members):
        self.users = [member for member in members if isinstance(member, MockUser)]
        self.child_groups = [
            member for member in members if isinstance(member, MockGroup)
        ]

