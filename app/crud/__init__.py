from app.crud.completions import (
    delete_completion,
    get_completed_habit_ids,
    get_completion,
    get_completion_dates_in_range,
    get_completion_dates_up_to,
    insert_completion,
    insert_completions_bulk,
)
from app.crud.habits import (
    archive_habit,
    create_habit,
    delete_habit,
    get_active_habits,
    get_due_reminder_habits,
    get_habit,
    get_habits_by_ids,
    reorder_habits,
    set_reminder_time,
)
from app.crud.nudges import count_nudges_sent_since, create_nudge, get_latest_nudge_at
from app.crud.partner_invites import (
    accept_invite,
    create_invite,
    delete_accepted_invite_for_pair,
    delete_pending_invite_for_inviter,
    get_accepted_invite_for_pair,
    get_invite,
    get_pending_invite_for_pair,
    get_pending_invites_for_email,
    get_pending_invites_for_inviter,
    reject_invite,
)
from app.crud.partnerships import delete_partnerships_for_user, get_partnership_for_user
from app.crud.push_subscriptions import (
    deactivate_push_subscription,
    get_active_push_subscriptions,
    upsert_push_subscription,
)
from app.crud.reminder_dispatches import claim_reminder_dispatches
from app.crud.user import (
    create_auth_session,
    create_user,
    delete_auth_session,
    get_user_by_email,
    get_user_by_id,
    get_user_for_token,
    normalize_email,
)

__all__ = [
    "create_user",
    "get_user_by_id",
    "get_user_by_email",
    "normalize_email",
    "create_auth_session",
    "get_user_for_token",
    "delete_auth_session",
    "get_active_habits",
    "create_habit",
    "get_habit",
    "get_habits_by_ids",
    "archive_habit",
    "set_reminder_time",
    "reorder_habits",
    "delete_habit",
    "get_due_reminder_habits",
    "insert_completion",
    "insert_completions_bulk",
    "get_completion",
    "delete_completion",
    "get_completed_habit_ids",
    "get_completion_dates_up_to",
    "get_completion_dates_in_range",
    "create_invite",
    "get_invite",
    "get_pending_invites_for_inviter",
    "get_pending_invites_for_email",
    "get_pending_invite_for_pair",
    "get_accepted_invite_for_pair",
    "delete_accepted_invite_for_pair",
    "delete_pending_invite_for_inviter",
    "reject_invite",
    "accept_invite",
    "get_partnership_for_user",
    "delete_partnerships_for_user",
    "create_nudge",
    "get_latest_nudge_at",
    "count_nudges_sent_since",
    "upsert_push_subscription",
    "deactivate_push_subscription",
    "get_active_push_subscriptions",
    "claim_reminder_dispatches",
]
