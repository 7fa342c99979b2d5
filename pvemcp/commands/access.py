"""User, group, role, ACL, and API token commands."""

from __future__ import annotations

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import array, boolean, integer, string
from pvemcp.proxmox.models import ACLEntry, APIToken, Group, Role, User

USERID = string("userid", "User ID including realm, e.g. 'alice@pve'", required=True)
GROUPID = string("groupid", "Group ID", required=True)
ROLEID = string("roleid", "Role ID", required=True)
TOKENID = string("tokenid", "Token ID (without the user part)", required=True)
COMMENT = string("comment", "Comment")
EXPIRE = integer("expire", "Expiry as a Unix timestamp (0 = never)", minimum=0)

_USER_FIELDS = (
    string("email", "Email address"),
    COMMENT,
    string("firstname", "First name"),
    string("lastname", "Last name"),
    array("groups", "Groups the user belongs to", delimited=True),
    EXPIRE,
)

ENDPOINTS = [
    Endpoint(
        name="list_users",
        description="List all users",
        method="GET",
        path="access/users",
        params=(boolean("enabled", "Only enabled (true) or disabled (false) users"),),
        fields={"enabled": "enabled"},
        shape=list[User],
        result_key="users",
    ),
    Endpoint(
        name="get_user",
        description="Get details of a user",
        method="GET",
        path="access/users/{userid}",
        params=(USERID,),
        shape=User,
        result_key="user",
        echo={"userid": "userid"},
    ),
    Endpoint(
        name="create_user",
        description="Create a user",
        method="POST",
        path="access/users",
        params=(USERID, string("password", "Initial password (pve realm only)")) + _USER_FIELDS,
        fields={
            "userid": "userid",
            "password": "password",
            "email": "email",
            "comment": "comment",
            "firstname": "firstname",
            "lastname": "lastname",
            "groups": "groups",
            "expire": "expire",
        },
        echo={"userid": "userid"},
        action="create",
        message="User created",
    ),
    Endpoint(
        name="update_user",
        description="Update a user's details",
        method="PUT",
        path="access/users/{userid}",
        params=(USERID,) + _USER_FIELDS + (boolean("enable", "Enable or disable the account"),),
        fields={
            "email": "email",
            "comment": "comment",
            "firstname": "firstname",
            "lastname": "lastname",
            "groups": "groups",
            "expire": "expire",
            "enable": "enable",
        },
        echo={"userid": "userid"},
        action="update",
        message="User updated",
    ),
    Endpoint(
        name="delete_user",
        description="Delete a user",
        method="DELETE",
        path="access/users/{userid}",
        params=(USERID,),
        echo={"userid": "userid"},
        action="delete",
        message="User deleted",
    ),
    Endpoint(
        name="change_password",
        description="Change a user's password",
        method="PUT",
        path="access/password",
        params=(USERID, string("password", "New password", required=True)),
        fields={"userid": "userid", "password": "password"},
        echo={"userid": "userid"},
        action="change_password",
        message="Password changed",
    ),
    Endpoint(
        name="list_groups",
        description="List all groups",
        method="GET",
        path="access/groups",
        shape=list[Group],
        result_key="groups",
    ),
    Endpoint(
        name="create_group",
        description="Create a group",
        method="POST",
        path="access/groups",
        params=(GROUPID, COMMENT),
        fields={"groupid": "groupid", "comment": "comment"},
        echo={"groupid": "groupid"},
        action="create",
        message="Group created",
    ),
    Endpoint(
        name="delete_group",
        description="Delete a group",
        method="DELETE",
        path="access/groups/{groupid}",
        params=(GROUPID,),
        echo={"groupid": "groupid"},
        action="delete",
        message="Group deleted",
    ),
    Endpoint(
        name="list_roles",
        description="List all roles and their privileges",
        method="GET",
        path="access/roles",
        shape=list[Role],
        result_key="roles",
    ),
    Endpoint(
        name="create_role",
        description="Create a role with a set of privileges",
        method="POST",
        path="access/roles",
        params=(
            ROLEID,
            array(
                "privs",
                "Privileges, e.g. ['VM.Audit', 'VM.Console'] or 'VM.Audit, VM.Console'",
                delimited=True,
            ),
        ),
        fields={"roleid": "roleid", "privs": "privs"},
        echo={"roleid": "roleid", "privs": "privs"},
        action="create",
        message="Role created",
    ),
    Endpoint(
        name="delete_role",
        description="Delete a role",
        method="DELETE",
        path="access/roles/{roleid}",
        params=(ROLEID,),
        echo={"roleid": "roleid"},
        action="delete",
        message="Role deleted",
    ),
    Endpoint(
        name="list_acl",
        description="List access control entries",
        method="GET",
        path="access/acl",
        shape=list[ACLEntry],
        result_key="acl",
    ),
    Endpoint(
        name="set_acl",
        description="Grant (or with delete=true revoke) a role on a path for users, groups, or tokens",
        method="PUT",
        path="access/acl",
        params=(
            string("path", "ACL path, e.g. '/vms/100'", required=True),
            string("role", "Role ID to grant", required=True),
            string("userid", "User ID"),
            string("groupid", "Group ID"),
            string("tokenid", "Full API token ID, e.g. 'alice@pve!automation'"),
            boolean("propagate", "Apply to child paths", default=True),
            boolean("delete", "Remove the entry instead of adding it"),
        ),
        fields={
            "path": "path",
            "roles": "role",
            "users": "userid",
            "groups": "groupid",
            "tokens": "tokenid",
            "propagate": "propagate",
            "delete": "delete",
        },
        echo={"path": "path", "role": "role"},
        action="set_acl",
        message="ACL updated",
    ),
    Endpoint(
        name="list_api_tokens",
        description="List API tokens of a user",
        method="GET",
        path="access/users/{userid}/token",
        params=(USERID,),
        shape=list[APIToken],
        result_key="tokens",
        echo={"userid": "userid"},
    ),
    Endpoint(
        name="create_api_token",
        description="Create an API token for a user; the secret is only returned once",
        method="POST",
        path="access/users/{userid}/token/{tokenid}",
        params=(
            USERID,
            TOKENID,
            EXPIRE,
            COMMENT,
            boolean("privsep", "Restrict the token to separately assigned privileges", default=True),
        ),
        fields={"expire": "expire", "comment": "comment", "privsep": "privsep"},
        shape=APIToken,
        result_key="token",
        echo={"userid": "userid", "tokenid": "tokenid"},
        action="create",
    ),
    Endpoint(
        name="delete_api_token",
        description="Delete an API token",
        method="DELETE",
        path="access/users/{userid}/token/{tokenid}",
        params=(USERID, TOKENID),
        echo={"userid": "userid", "tokenid": "tokenid"},
        action="delete",
        message="API token deleted",
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
