"""
Models for Page Rules and the API envelopes that carry them.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union, get_args

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter, field_validator

from .flexible_int import FlexibleInt


class PageRuleActionID(str, Enum):
    """Action identifiers known to the Page Rules API."""
    ALWAYS_ONLINE = "always_online"
    ALWAYS_USE_HTTPS = "always_use_https"
    BROWSER_CACHE_TTL = "browser_cache_ttl"
    BROWSER_CHECK = "browser_check"
    CACHE_LEVEL = "cache_level"
    DISABLE_APPS = "disable_apps"
    DISABLE_PERFORMANCE = "disable_performance"
    DISABLE_RAILGUN = "disable_railgun"
    DISABLE_SECURITY = "disable_security"
    EDGE_CACHE_TTL = "edge_cache_ttl"
    EMAIL_OBFUSCATION = "email_obfuscation"
    FORWARDING_URL = "forwarding_url"
    IP_GEOLOCATION = "ip_geolocation"
    MIRAGE = "mirage"
    ROCKET_LOADER = "rocket_loader"
    SECURITY_LEVEL = "security_level"
    SERVER_SIDE_EXCLUDE = "server_side_exclude"
    SMART_ERRORS = "smart_errors"
    SSL = "ssl"
    WAF = "waf"


# Human-readable names, as shown in the Cloudflare dashboard
PAGE_RULE_ACTIONS: Dict[str, str] = {
    "always_online": "Always Online",
    "always_use_https": "Always Use HTTPS",
    "browser_cache_ttl": "Browser Cache TTL",
    "browser_check": "Browser Integrity Check",
    "cache_level": "Cache Level",
    "disable_apps": "Disable Apps",
    "disable_performance": "Disable Performance",
    "disable_railgun": "Disable Railgun",
    "disable_security": "Disable Security",
    "edge_cache_ttl": "Edge Cache TTL",
    "email_obfuscation": "Email Obfuscation",
    "forwarding_url": "Forwarding URL",
    "ip_geolocation": "IP Geolocation Header",
    "mirage": "Mirage",
    "rocket_loader": "Rocket Loader",
    "security_level": "Security Level",
    "server_side_exclude": "Server Side Excludes",
    "smart_errors": "Smart Errors",
    "ssl": "SSL",
    "waf": "Web Application Firewall",
}

StringActionID = Literal[
    "always_online",
    "browser_check",
    "cache_level",
    "disable_railgun",
    "email_obfuscation",
    "ip_geolocation",
    "mirage",
    "rocket_loader",
    "security_level",
    "server_side_exclude",
    "smart_errors",
    "ssl",
    "waf",
]
IntegerActionID = Literal["browser_cache_ttl", "edge_cache_ttl"]
FlagActionID = Literal[
    "always_use_https",
    "disable_apps",
    "disable_performance",
    "disable_security",
]

# Action id -> union tag; ids not listed here decode as UnknownAction
ACTION_KINDS: Dict[str, str] = {
    **{action_id: "string" for action_id in get_args(StringActionID)},
    **{action_id: "integer" for action_id in get_args(IntegerActionID)},
    **{action_id: "flag" for action_id in get_args(FlagActionID)},
    "forwarding_url": "forwarding",
}


class PageRuleStatus(str, Enum):
    """Status of a Page Rule."""
    ACTIVE = "active"
    PAUSED = "paused"


class PageRuleConstraint(BaseModel):
    """Match constraint of a target."""
    operator: str = "matches"
    value: str

    model_config = {"extra": "ignore"}


class PageRuleTarget(BaseModel):
    """
    The target to evaluate on a request.

    Currently ``target`` is always "url" and ``constraint.operator`` is always
    "matches"; ``constraint.value`` is the URL pattern to match against.
    """
    target: str = "url"
    constraint: PageRuleConstraint

    model_config = {"extra": "ignore"}

    @classmethod
    def url_matches(cls, pattern: str) -> "PageRuleTarget":
        """Build the standard URL-pattern target."""
        return cls(constraint=PageRuleConstraint(value=pattern))


class _ActionBase(BaseModel):
    model_config = {"extra": "ignore"}

    @property
    def display_name(self) -> str:
        return PAGE_RULE_ACTIONS.get(self.id, self.id)


class StringAction(_ActionBase):
    """Action whose value is a setting string, e.g. ``cache_level=bypass``."""
    id: StringActionID
    value: str


class IntegerAction(_ActionBase):
    """Action whose value is a TTL in seconds."""
    id: IntegerActionID
    value: FlexibleInt


class ForwardingURL(BaseModel):
    """Value of the ``forwarding_url`` action."""
    url: str
    status_code: FlexibleInt = 301

    model_config = {"extra": "ignore"}


class ForwardingURLAction(_ActionBase):
    """Redirect matching requests to another URL."""
    id: Literal["forwarding_url"] = "forwarding_url"
    value: ForwardingURL


class FlagAction(_ActionBase):
    """Action that is switched on by its presence; the value is usually null."""
    id: FlagActionID
    value: Any = None


class UnknownAction(_ActionBase):
    """Action id not modeled by this client; the raw JSON value is kept as is."""
    id: str
    value: Any = None


def _action_kind(data: Any) -> str:
    if isinstance(data, dict):
        action_id = data.get("id")
    else:
        action_id = getattr(data, "id", None)
    action_id = getattr(action_id, "value", action_id)
    if not isinstance(action_id, str):
        return "unknown"
    return ACTION_KINDS.get(action_id, "unknown")


PageRuleAction = Annotated[
    Union[
        Annotated[StringAction, Tag("string")],
        Annotated[IntegerAction, Tag("integer")],
        Annotated[ForwardingURLAction, Tag("forwarding")],
        Annotated[FlagAction, Tag("flag")],
        Annotated[UnknownAction, Tag("unknown")],
    ],
    Discriminator(_action_kind),
]

_action_adapter = TypeAdapter(PageRuleAction)


def make_action(action_id: Union[str, PageRuleActionID], value: Any = None) -> PageRuleAction:
    """
    Build the action variant matching ``action_id``.

    Args:
        action_id: One of the known action ids, or any other id string
        value: The action value in its JSON form

    Returns:
        A StringAction, IntegerAction, ForwardingURLAction, FlagAction or,
        for ids this client does not know, an UnknownAction
    """
    if isinstance(action_id, PageRuleActionID):
        action_id = action_id.value
    return _action_adapter.validate_python({"id": action_id, "value": value})


# Assigned by the API; never part of a request body
SERVER_ASSIGNED_FIELDS = frozenset({"id", "created_on", "modified_on"})


class PageRule(BaseModel):
    """A Page Rule for a zone."""
    id: str = ""
    targets: List[PageRuleTarget] = Field(default_factory=list)
    actions: List[PageRuleAction] = Field(default_factory=list)
    priority: FlexibleInt = 0
    # Plain string so statuses newer than PageRuleStatus still decode
    status: Optional[str] = None
    modified_on: Optional[datetime] = None
    created_on: Optional[datetime] = None

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    def validate_id(cls, v):
        """Treat a null id as not yet assigned."""
        return "" if v is None else v

    @field_validator("targets", "actions", mode="before")
    def validate_lists(cls, v):
        """Treat null lists as empty."""
        return [] if v is None else v

    @field_validator("status", mode="before")
    def validate_status(cls, v):
        """Store the enum value as a plain string and treat "" as unset."""
        if isinstance(v, PageRuleStatus):
            return v.value
        return v or None

    @property
    def known_status(self) -> Optional[PageRuleStatus]:
        """The status as a PageRuleStatus, or None when unset or not recognised."""
        try:
            return PageRuleStatus(self.status)
        except ValueError:
            return None

    def to_request_body(self, partial: bool = False) -> Dict[str, Any]:
        """
        Serialize the rule as a create/update/change request body.

        Args:
            partial: Only include fields that were explicitly set (PATCH)

        Returns:
            JSON-ready dict without the server-assigned id and timestamps
        """
        if partial:
            data = self.model_dump(mode="json", include=set(self.model_fields_set) - SERVER_ASSIGNED_FIELDS)
        else:
            data = self.model_dump(mode="json", exclude=set(SERVER_ASSIGNED_FIELDS))
        if data.get("status") is None:
            data.pop("status", None)
        return data


class PageRuleEnvelope(BaseModel):
    """Fields shared by every Page Rules API response."""
    success: bool = False
    errors: List[str] = Field(default_factory=list)
    messages: List[str] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("errors", "messages", mode="before")
    def validate_string_lists(cls, v):
        return [] if v is None else v


class PageRuleDetailResponse(PageRuleEnvelope):
    """API response containing a single Page Rule."""
    result: PageRule = Field(default_factory=PageRule)

    @field_validator("result", mode="before")
    def validate_result(cls, v):
        return {} if v is None else v


class PageRulesResponse(PageRuleEnvelope):
    """API response containing a list of Page Rules."""
    result: List[PageRule] = Field(default_factory=list)

    @field_validator("result", mode="before")
    def validate_result(cls, v):
        return [] if v is None else v
