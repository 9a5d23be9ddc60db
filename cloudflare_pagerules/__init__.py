"""
Cloudflare Page Rules API client.
"""

__version__ = "0.1.0"

from .client import CloudflareClient
from .config import APIConfig, Settings
from .errors import DecodeError, PageRuleError, TransportError
from .models import (
    PAGE_RULE_ACTIONS,
    FlexibleInt,
    PageRule,
    PageRuleAction,
    PageRuleActionID,
    PageRuleStatus,
    PageRuleTarget,
    decode_flexible_int,
    make_action,
)
from .pagerules import PageRulesAPI, Transport

__all__ = [
    'APIConfig',
    'CloudflareClient',
    'DecodeError',
    'FlexibleInt',
    'PAGE_RULE_ACTIONS',
    'PageRule',
    'PageRuleAction',
    'PageRuleActionID',
    'PageRuleError',
    'PageRulesAPI',
    'PageRuleStatus',
    'PageRuleTarget',
    'Settings',
    'Transport',
    'TransportError',
    'decode_flexible_int',
    'make_action',
]
