"""
Activity log descriptions.

Turns an action and the entity it touched into a one-line description for
the activity log.
"""

from enum import Enum


class ActivityAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    RESTORED = "restored"
    VIEWED = "viewed"
    LOGIN = "login"
    LOGOUT = "logout"
    PASSWORD_CHANGED = "password_changed"
    STATUS_CHANGED = "status_changed"
    PERMISSIONS_CHANGED = "permissions_changed"
    TRAVEL_TIME_REJECTED = "travel_time_rejected"


_TEMPLATES = {
    ActivityAction.CREATED: "Created new {entity}{item}",
    ActivityAction.UPDATED: "Updated {entity}{item}",
    ActivityAction.DELETED: "Deleted {entity}{item}",
    ActivityAction.RESTORED: "Restored {entity}{item}",
    ActivityAction.VIEWED: "Viewed {entity}{item}",
    ActivityAction.LOGIN: "Logged into the system",
    ActivityAction.LOGOUT: "Logged out of the system",
    ActivityAction.PASSWORD_CHANGED: "Changed account password",
    ActivityAction.STATUS_CHANGED: "Changed status of {entity}{item}",
    ActivityAction.PERMISSIONS_CHANGED: "Changed permissions of {entity}{item}",
    ActivityAction.TRAVEL_TIME_REJECTED: "Rejected {entity}{item}: insufficient travel time",
}


def describe_activity(
    action: ActivityAction | str,
    entity_type: str | None = None,
    label: str | None = None,
    entity_id: int | None = None,
) -> str:
    """
    Build the activity description for an action on an entity.

    Args:
        action: Action tag, e.g. "created"
        entity_type: Entity kind, e.g. "Event" (defaults to "Item")
        label: Human name of the entity (name, title or email)
        entity_id: Used when no label is available

    Returns:
        Description such as "Created new Event 'Derby'"
    """
    entity = entity_type or "Item"
    if label:
        item = f" '{label}'"
    elif entity_id is not None:
        item = f" (ID: {entity_id})"
    else:
        item = ""

    try:
        template = _TEMPLATES[ActivityAction(action)]
    except ValueError:
        action_name = action.value if isinstance(action, Enum) else action
        return f"Performed {action_name} action on {entity}{item}"
    return template.format(entity=entity, item=item)
