"""LinkedIn rate limits and sequence content limits.

Connection request capacity depends mostly on account reputation, not on
the subscription tier; InMail credits and profile view limits are what vary
by tier. The ``daily_safe`` figures are the conservative pace used for
automation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

LinkedInAction = Literal["inmail", "connection_requests", "messages"]

# ==============================================================================
# LinkedIn limits per subscription
# ==============================================================================


@dataclass(frozen=True)
class ConnectionRequestLimits:
    """Connection request caps; ``personalized_monthly`` None means unlimited."""

    weekly_max: int
    daily_safe: int
    personalized_monthly: int | None


@dataclass(frozen=True)
class MessageLimits:
    weekly_max: int
    daily_safe: int


@dataclass(frozen=True)
class InmailAllowance:
    monthly_credits: int
    max_accumulation: int
    rollover: bool


@dataclass(frozen=True)
class ProfileViewLimits:
    daily_max: int
    daily_safe: int


@dataclass(frozen=True)
class LinkedInLimits:
    """Every limit that applies to one subscription type."""

    connection_requests: ConnectionRequestLimits
    messages: MessageLimits
    inmail: InmailAllowance
    profile_views: ProfileViewLimits
    #: Free InMails to open profiles; Recruiter tiers only.
    open_profile_messages_monthly: int | None = None


def _premium(inmail: InmailAllowance) -> LinkedInLimits:
    return LinkedInLimits(
        connection_requests=ConnectionRequestLimits(150, 20, None),
        messages=MessageLimits(150, 20),
        inmail=inmail,
        profile_views=ProfileViewLimits(1000, 500),
    )


LINKEDIN_LIMITS: dict[str, LinkedInLimits] = {
    "basic": LinkedInLimits(
        connection_requests=ConnectionRequestLimits(100, 15, 10),
        messages=MessageLimits(100, 15),
        inmail=InmailAllowance(0, 0, rollover=False),
        profile_views=ProfileViewLimits(500, 250),
    ),
    "premium": _premium(InmailAllowance(5, 15, rollover=True)),
    "premium_career": _premium(InmailAllowance(5, 15, rollover=True)),
    "premium_business": _premium(InmailAllowance(15, 45, rollover=True)),
    "sales_navigator": LinkedInLimits(
        connection_requests=ConnectionRequestLimits(200, 25, None),
        messages=MessageLimits(150, 20),
        inmail=InmailAllowance(50, 150, rollover=True),
        profile_views=ProfileViewLimits(2000, 1000),
    ),
    "recruiter_lite": LinkedInLimits(
        connection_requests=ConnectionRequestLimits(200, 25, None),
        messages=MessageLimits(200, 25),
        inmail=InmailAllowance(30, 120, rollover=True),
        profile_views=ProfileViewLimits(2000, 1000),
        open_profile_messages_monthly=1000,
    ),
    "recruiter_corporate": LinkedInLimits(
        connection_requests=ConnectionRequestLimits(250, 30, None),
        messages=MessageLimits(200, 30),
        inmail=InmailAllowance(150, 600, rollover=True),
        profile_views=ProfileViewLimits(2000, 1000),
        open_profile_messages_monthly=1000,
    ),
}

# Per-day automation pace recommended by the messaging provider.
SAFE_DAILY_LIMITS: dict[str, dict[str, int]] = {
    "connection_requests": {
        "basic": 15,
        "premium": 20,
        "premium_career": 20,
        "premium_business": 20,
        "sales_navigator": 25,
        "recruiter_lite": 25,
        "recruiter_corporate": 30,
    },
    "messages": {
        "basic": 15,
        "premium": 20,
        "premium_career": 20,
        "premium_business": 20,
        "sales_navigator": 20,
        "recruiter_lite": 25,
        "recruiter_corporate": 30,
    },
    "profile_views": {
        "basic": 250,
        "premium": 300,
        "premium_career": 300,
        "premium_business": 300,
        "sales_navigator": 500,
        "recruiter_lite": 500,
        "recruiter_corporate": 500,
    },
}

# Maximum InMails sent per day, independent of the monthly credit balance.
DAILY_INMAIL_LIMITS: dict[str, int] = {
    "basic": 0,
    "premium": 5,
    "premium_career": 5,
    "premium_business": 15,
    "sales_navigator": 50,
    "recruiter_lite": 100,
    "recruiter_corporate": 1000,
}

# ==============================================================================
# Cooldowns and pacing (seconds)
# ==============================================================================

RATE_LIMIT_COOLDOWNS_S: dict[str, int] = {
    "connection_request_rejected": 3600,
    "message_rate_limited": 1800,
    "daily_limit_reached": 86400,
    "weekly_limit_reached": 604800,
}

ACTION_DELAYS_S: dict[str, int] = {
    "between_connection_requests": 30,
    "between_messages": 15,
    "between_profile_views": 5,
    "after_error": 60,
}

# Provider status codes that signal a LinkedIn limit.
PROVIDER_RATE_LIMIT_ERRORS: dict[int, str] = {
    422: "cannot_resend_yet",
    429: "rate_limited",
    500: "server_error_possibly_rate_limited",
}

_INMAIL_PRIORITY = (
    "recruiter_corporate",
    "sales_navigator",
    "recruiter_lite",
    "premium_business",
    "premium",
    "premium_career",
)
_DEFAULT_PRIORITY = (*_INMAIL_PRIORITY, "basic")


def get_limits(subscription_type: str | None) -> LinkedInLimits:
    """Return the limits of *subscription_type*; unknown types get basic."""
    return LINKEDIN_LIMITS.get(subscription_type or "basic", LINKEDIN_LIMITS["basic"])


def get_connection_request_limit(
    subscription_type: str | None, *, use_safe_limit: bool = True
) -> int:
    """Daily safe pace, or the weekly maximum when *use_safe_limit* is False."""
    limits = get_limits(subscription_type).connection_requests
    return limits.daily_safe if use_safe_limit else limits.weekly_max


def get_message_limit(
    subscription_type: str | None, *, use_safe_limit: bool = True
) -> int:
    """Daily safe pace, or the weekly maximum when *use_safe_limit* is False."""
    limits = get_limits(subscription_type).messages
    return limits.daily_safe if use_safe_limit else limits.weekly_max


def get_inmail_allowance(subscription_type: str | None) -> InmailAllowance:
    return get_limits(subscription_type).inmail


def can_send_inmail(subscription_type: str | None) -> bool:
    return get_limits(subscription_type).inmail.monthly_credits > 0


def has_open_profile_messages(subscription_type: str | None) -> bool:
    return get_limits(subscription_type).open_profile_messages_monthly is not None


def get_daily_inmail_limit(subscription_type: str | None) -> int:
    return DAILY_INMAIL_LIMITS.get(subscription_type or "basic", 0)


def is_recruiter_subscription(subscription_type: str | None) -> bool:
    return subscription_type in ("recruiter_lite", "recruiter_corporate")


def get_best_subscription_for_action(
    subscription_types: Sequence[str], action: LinkedInAction
) -> str | None:
    """Pick the subscription to use for *action* when an account has several.

    Recruiter Corporate wins, then Sales Navigator, Recruiter Lite and the
    Premium tiers. Basic only counts for non-InMail actions. When nothing in
    the priority list matches, the first subscription is returned.
    """
    if not subscription_types:
        return None
    if len(subscription_types) == 1:
        return subscription_types[0]
    priority = _INMAIL_PRIORITY if action == "inmail" else _DEFAULT_PRIORITY
    for candidate in priority:
        if candidate in subscription_types:
            return candidate
    return subscription_types[0]


# ==============================================================================
# Sequence content limits
# ==============================================================================


@dataclass(frozen=True)
class ContentLimit:
    """Maximum characters for one channel/action pair."""

    channel: str
    action: str
    max_characters: int


CONTENT_LIMITS: tuple[ContentLimit, ...] = (
    ContentLimit("linkedin", "connection_request", 300),
    ContentLimit("linkedin", "message", 8000),
    ContentLimit("linkedin", "inmail", 1900),
    ContentLimit("linkedin", "comment_post", 1250),
    ContentLimit("email", "send", 50000),
)

CONTENT_LIMITS_MAP: dict[str, int] = {
    f"{limit.channel}:{limit.action}": limit.max_characters
    for limit in CONTENT_LIMITS
}


def get_content_limit(channel: str, action: str) -> int | None:
    """Character limit for *channel*/*action*, or None when unconstrained."""
    return CONTENT_LIMITS_MAP.get(f"{channel}:{action}")
