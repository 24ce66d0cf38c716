"""Workspace permission predicates and member-management policy.

Every predicate here is pure and total: it takes a role and a permission
collection and returns a bool, never raising. OWNER and ADMIN are allowed
everything; EDITOR and VIEWER are allowed an action only when the role is
admitted for it and the action's binding permission (if any) is held.
"""

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from enum import StrEnum

from domain.entities.workspace import WorkspacePermission, WorkspaceRole

P = WorkspacePermission
R = WorkspaceRole

PRIVILEGED_ROLES = frozenset({R.OWNER, R.ADMIN})
_EDITOR_AND_VIEWER = frozenset({R.EDITOR, R.VIEWER})
_EDITOR_ONLY = frozenset({R.EDITOR})
_NOBODY: frozenset[WorkspaceRole] = frozenset()

ROLE_RANK: dict[WorkspaceRole, int] = {
    R.OWNER: 4,
    R.ADMIN: 3,
    R.EDITOR: 2,
    R.VIEWER: 1,
}


class PermissionAction(StrEnum):
    """Guarded actions within a workspace."""

    # Workspace
    VIEW_WORKSPACE = "VIEW_WORKSPACE"
    UPDATE_WORKSPACE = "UPDATE_WORKSPACE"
    MANAGE_WORKSPACE_ALLOCATIONS = "MANAGE_WORKSPACE_ALLOCATIONS"

    # Members
    VIEW_MEMBERS = "VIEW_MEMBERS"
    INVITE_MEMBER = "INVITE_MEMBER"
    REMOVE_MEMBER = "REMOVE_MEMBER"
    MODIFY_MEMBER_ROLE = "MODIFY_MEMBER_ROLE"
    MODIFY_MEMBER_PERMISSIONS = "MODIFY_MEMBER_PERMISSIONS"

    # Funnels
    VIEW_FUNNEL = "VIEW_FUNNEL"
    CREATE_FUNNEL = "CREATE_FUNNEL"
    DUPLICATE_FUNNEL = "DUPLICATE_FUNNEL"
    EDIT_FUNNEL = "EDIT_FUNNEL"
    DELETE_FUNNEL = "DELETE_FUNNEL"

    # Pages
    VIEW_PAGE = "VIEW_PAGE"
    CREATE_PAGE = "CREATE_PAGE"
    EDIT_PAGE = "EDIT_PAGE"
    DELETE_PAGE = "DELETE_PAGE"
    DUPLICATE_PAGE = "DUPLICATE_PAGE"
    REORDER_PAGE = "REORDER_PAGE"

    # Domains
    VIEW_DOMAINS = "VIEW_DOMAINS"
    CREATE_SUBDOMAIN = "CREATE_SUBDOMAIN"
    CREATE_CUSTOM_DOMAIN = "CREATE_CUSTOM_DOMAIN"
    DELETE_DOMAIN = "DELETE_DOMAIN"
    CONNECT_DOMAIN = "CONNECT_DOMAIN"
    DISCONNECT_DOMAIN = "DISCONNECT_DOMAIN"
    MANAGE_DOMAIN = "MANAGE_DOMAIN"
    VERIFY_DOMAIN = "VERIFY_DOMAIN"

    # Themes
    VIEW_THEMES = "VIEW_THEMES"
    CREATE_THEME = "CREATE_THEME"
    UPDATE_THEME = "UPDATE_THEME"
    SET_ACTIVE_THEME = "SET_ACTIVE_THEME"
    DELETE_THEME = "DELETE_THEME"

    # Analytics
    VIEW_ANALYTICS = "VIEW_ANALYTICS"
    EXPORT_ANALYTICS = "EXPORT_ANALYTICS"

    # Media
    UPLOAD_IMAGE = "UPLOAD_IMAGE"
    DELETE_IMAGE = "DELETE_IMAGE"
    MANAGE_IMAGE_FOLDERS = "MANAGE_IMAGE_FOLDERS"


@dataclass(frozen=True)
class ActionRule:
    """Binding permission and admitted non-privileged roles for an action."""

    permission: WorkspacePermission | None
    member_roles: frozenset[WorkspaceRole] = _EDITOR_AND_VIEWER


A = PermissionAction

ACTION_RULES: dict[PermissionAction, ActionRule] = {
    A.VIEW_WORKSPACE: ActionRule(None),
    A.UPDATE_WORKSPACE: ActionRule(P.MANAGE_WORKSPACE),
    A.MANAGE_WORKSPACE_ALLOCATIONS: ActionRule(P.MANAGE_WORKSPACE),
    A.VIEW_MEMBERS: ActionRule(None),
    A.INVITE_MEMBER: ActionRule(P.MANAGE_MEMBERS),
    A.REMOVE_MEMBER: ActionRule(P.MANAGE_MEMBERS),
    A.MODIFY_MEMBER_ROLE: ActionRule(P.MANAGE_MEMBERS),
    A.MODIFY_MEMBER_PERMISSIONS: ActionRule(P.MANAGE_MEMBERS),
    A.VIEW_FUNNEL: ActionRule(None),
    A.CREATE_FUNNEL: ActionRule(P.CREATE_FUNNELS),
    A.DUPLICATE_FUNNEL: ActionRule(P.CREATE_FUNNELS),
    A.EDIT_FUNNEL: ActionRule(P.EDIT_FUNNELS),
    A.DELETE_FUNNEL: ActionRule(P.DELETE_FUNNELS),
    A.VIEW_PAGE: ActionRule(None),
    A.CREATE_PAGE: ActionRule(P.EDIT_PAGES),
    A.EDIT_PAGE: ActionRule(P.EDIT_PAGES),
    A.DELETE_PAGE: ActionRule(P.EDIT_PAGES),
    A.DUPLICATE_PAGE: ActionRule(P.EDIT_PAGES),
    A.REORDER_PAGE: ActionRule(P.EDIT_PAGES),
    A.VIEW_DOMAINS: ActionRule(None),
    A.CREATE_SUBDOMAIN: ActionRule(P.CREATE_DOMAINS),
    A.CREATE_CUSTOM_DOMAIN: ActionRule(P.CREATE_DOMAINS),
    A.DELETE_DOMAIN: ActionRule(P.DELETE_DOMAINS),
    A.CONNECT_DOMAIN: ActionRule(P.CONNECT_DOMAINS),
    A.DISCONNECT_DOMAIN: ActionRule(P.CONNECT_DOMAINS),
    A.MANAGE_DOMAIN: ActionRule(P.MANAGE_DOMAINS),
    A.VERIFY_DOMAIN: ActionRule(P.MANAGE_DOMAINS),
    A.VIEW_THEMES: ActionRule(None),
    A.CREATE_THEME: ActionRule(P.EDIT_FUNNELS, _EDITOR_ONLY),
    A.UPDATE_THEME: ActionRule(P.EDIT_FUNNELS, _EDITOR_ONLY),
    A.SET_ACTIVE_THEME: ActionRule(P.EDIT_FUNNELS, _EDITOR_ONLY),
    A.DELETE_THEME: ActionRule(P.DELETE_FUNNELS, _EDITOR_ONLY),
    A.VIEW_ANALYTICS: ActionRule(P.VIEW_ANALYTICS),
    A.EXPORT_ANALYTICS: ActionRule(P.VIEW_ANALYTICS),
    A.UPLOAD_IMAGE: ActionRule(P.EDIT_PAGES, _EDITOR_ONLY),
    A.DELETE_IMAGE: ActionRule(None, _NOBODY),
    A.MANAGE_IMAGE_FOLDERS: ActionRule(None, _NOBODY),
}


def can_perform(
    action: PermissionAction,
    role: WorkspaceRole | str | None,
    permissions: Iterable[WorkspacePermission | str] = (),
) -> bool:
    """Check whether a role/permission combination authorizes an action."""
    if role in PRIVILEGED_ROLES:
        return True
    rule = ACTION_RULES.get(action)
    if rule is None or role not in rule.member_roles:
        return False
    if rule.permission is None:
        return True
    return rule.permission in set(permissions)


def allowed_actions(
    role: WorkspaceRole, permissions: Iterable[WorkspacePermission | str] = ()
) -> list[PermissionAction]:
    """List every action the role/permission combination authorizes."""
    held = set(permissions)
    return [action for action in PermissionAction if can_perform(action, role, held)]


def has_required_permissions(
    role: WorkspaceRole | str,
    permissions: Iterable[WorkspacePermission | str],
    required: Iterable[WorkspacePermission | str],
) -> bool:
    """Check that every required permission is satisfied for the role."""
    return not missing_permissions(role, permissions, required)


def missing_permissions(
    role: WorkspaceRole | str,
    permissions: Iterable[WorkspacePermission | str],
    required: Iterable[WorkspacePermission | str],
) -> list[str]:
    """Return the required permissions the role does not satisfy, in order."""
    if role in PRIVILEGED_ROLES:
        return []
    if role not in _EDITOR_AND_VIEWER:
        return [str(p) for p in required]
    held = set(permissions)
    return [str(p) for p in required if p not in held]


# Named predicates, one per action family


def can_view_workspace(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.VIEW_WORKSPACE, role, permissions)


def can_update_workspace(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.UPDATE_WORKSPACE, role, permissions)


def can_manage_allocations(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.MANAGE_WORKSPACE_ALLOCATIONS, role, permissions)


def can_view_members(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.VIEW_MEMBERS, role, permissions)


def can_invite_members(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.INVITE_MEMBER, role, permissions)


def can_remove_members(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.REMOVE_MEMBER, role, permissions)


def can_modify_members(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.MODIFY_MEMBER_ROLE, role, permissions)


def can_view_funnel(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.VIEW_FUNNEL, role, permissions)


def can_create_funnel(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.CREATE_FUNNEL, role, permissions)


def can_duplicate_funnel(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.DUPLICATE_FUNNEL, role, permissions)


def can_edit_funnel(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.EDIT_FUNNEL, role, permissions)


def can_delete_funnel(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.DELETE_FUNNEL, role, permissions)


def can_view_page(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.VIEW_PAGE, role, permissions)


def can_create_page(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.CREATE_PAGE, role, permissions)


def can_edit_page(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.EDIT_PAGE, role, permissions)


def can_delete_page(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.DELETE_PAGE, role, permissions)


def can_view_domains(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.VIEW_DOMAINS, role, permissions)


def can_create_domain(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.CREATE_SUBDOMAIN, role, permissions)


def can_delete_domain(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.DELETE_DOMAIN, role, permissions)


def can_connect_domain(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.CONNECT_DOMAIN, role, permissions)


def can_manage_domain(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.MANAGE_DOMAIN, role, permissions)


def can_view_themes(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.VIEW_THEMES, role, permissions)


def can_manage_themes(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.UPDATE_THEME, role, permissions)


def can_delete_theme(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.DELETE_THEME, role, permissions)


def can_view_analytics(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.VIEW_ANALYTICS, role, permissions)


def can_upload_images(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.UPLOAD_IMAGE, role, permissions)


def can_manage_images(role: WorkspaceRole, permissions: Collection[WorkspacePermission] = ()) -> bool:
    return can_perform(A.MANAGE_IMAGE_FOLDERS, role, permissions)


# Member management policy


def can_affect_role(requester_role: WorkspaceRole, target_role: WorkspaceRole) -> bool:
    """Check that the requester ranks strictly above the target."""
    return ROLE_RANK.get(requester_role, 0) > ROLE_RANK.get(target_role, 0)


def role_change_denial(
    requester_role: WorkspaceRole,
    requester_permissions: Collection[WorkspacePermission],
    target_role: WorkspaceRole,
    new_role: WorkspaceRole,
) -> str | None:
    """Return why a role change is refused, or None when it is allowed."""
    if new_role == R.OWNER:
        return "Ownership cannot be assigned by changing a member's role"

    if requester_role == R.OWNER:
        if target_role == R.OWNER:
            return "The workspace owner cannot change their own role"
        return None

    if target_role == R.OWNER:
        return "Only the workspace owner can modify the owner"

    if requester_role == R.ADMIN:
        if target_role == R.ADMIN:
            return "Admins cannot modify other admins"
        if new_role == R.ADMIN:
            return "Only the workspace owner can promote members to admin"
        return None

    if requester_role in _EDITOR_AND_VIEWER:
        if P.MANAGE_MEMBERS not in requester_permissions:
            return "You need the MANAGE_MEMBERS permission to change member roles"
        if target_role not in _EDITOR_AND_VIEWER:
            return "You can only change the roles of editors and viewers"
        if new_role not in _EDITOR_AND_VIEWER:
            return "Only the workspace owner can promote members to admin"
        return None

    return "You cannot change member roles in this workspace"


def permission_change_denial(
    requester_role: WorkspaceRole,
    requester_permissions: Collection[WorkspacePermission],
    target_role: WorkspaceRole,
) -> str | None:
    """Return why a permission change is refused, or None when it is allowed."""
    if target_role not in _EDITOR_AND_VIEWER:
        return "Permissions can only be assigned to editors and viewers"

    if requester_role in PRIVILEGED_ROLES:
        return None

    if requester_role in _EDITOR_AND_VIEWER:
        if P.MANAGE_MEMBERS not in requester_permissions:
            return "You need the MANAGE_MEMBERS permission to change member permissions"
        return None

    return "You cannot change member permissions in this workspace"
