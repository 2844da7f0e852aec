from .annotations import CaseExact
from .annotations import Mutability
from .annotations import Required
from .annotations import Returned
from .annotations import Uniqueness
from .attributes import ComplexValue
from .attributes import SchemaObject
from .base import BaseModel
from .configuration import DEFAULT_CONFIGURATION
from .configuration import EngineConfiguration
from .exceptions import AuthenticationException
from .exceptions import InvalidFilterException
from .exceptions import InvalidSyntaxException
from .exceptions import InvalidValueException
from .exceptions import MutabilityException
from .exceptions import NoTargetException
from .exceptions import NotFoundException
from .exceptions import ResourceInvalidException
from .exceptions import SCIMException
from .exceptions import UniquenessException
from .lists.query_parser import QueryParser
from .mapping import Accessor
from .mapping import AttributeMap
from .mapping import DynamicList
from .mapping import Literal
from .mapping import Nested
from .mapping import StaticEntry
from .messages.error import Error
from .messages.list_response import ListResponse
from .messages.message import Message
from .messages.patch_op import PatchOp
from .messages.patch_op import PatchOperation
from .mixin import ScimMixin
from .patch import PatchEngine
from .patch import apply_patch
from .resources.enterprise_user import ENTERPRISE_USER_SCHEMA
from .resources.enterprise_user import EnterpriseUser
from .resources.enterprise_user import Manager
from .resources.group import GROUP_SCHEMA
from .resources.group import Group
from .resources.group import GroupMember
from .resources.resource import Meta
from .resources.resource import Resource
from .resources.resource_type import ResourceType
from .resources.resource_type import SchemaExtension
from .resources.schema import Attribute
from .resources.schema import Schema
from .resources.user import USER_SCHEMA
from .resources.user import Address
from .resources.user import Email
from .resources.user import Entitlement
from .resources.user import GroupMembership
from .resources.user import Ims
from .resources.user import Name
from .resources.user import PhoneNumber
from .resources.user import Photo
from .resources.user import Role
from .resources.user import User
from .resources.user import X509Certificate
from .validator import FieldError
from .validator import Validator

__all__ = [
    "Accessor",
    "Address",
    "Attribute",
    "AttributeMap",
    "AuthenticationException",
    "BaseModel",
    "CaseExact",
    "ComplexValue",
    "DEFAULT_CONFIGURATION",
    "DynamicList",
    "ENTERPRISE_USER_SCHEMA",
    "Email",
    "EngineConfiguration",
    "EnterpriseUser",
    "Entitlement",
    "Error",
    "FieldError",
    "GROUP_SCHEMA",
    "Group",
    "GroupMember",
    "GroupMembership",
    "Ims",
    "InvalidFilterException",
    "InvalidSyntaxException",
    "InvalidValueException",
    "ListResponse",
    "Literal",
    "Manager",
    "Message",
    "Meta",
    "Mutability",
    "MutabilityException",
    "Name",
    "Nested",
    "NoTargetException",
    "NotFoundException",
    "PatchEngine",
    "PatchOp",
    "PatchOperation",
    "PhoneNumber",
    "Photo",
    "QueryParser",
    "Required",
    "Resource",
    "ResourceInvalidException",
    "ResourceType",
    "Returned",
    "Role",
    "SCIMException",
    "ScimMixin",
    "Schema",
    "SchemaExtension",
    "SchemaObject",
    "StaticEntry",
    "USER_SCHEMA",
    "Uniqueness",
    "UniquenessException",
    "User",
    "Validator",
    "X509Certificate",
    "apply_patch",
]
