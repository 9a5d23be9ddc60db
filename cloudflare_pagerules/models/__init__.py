"""
Models for Page Rules and related data structures.
"""

from .flexible_int import FlexibleInt, decode_flexible_int, encode_flexible_int, parse_flexible_int
from .page_rule import (
    PAGE_RULE_ACTIONS,
    FlagAction,
    ForwardingURL,
    ForwardingURLAction,
    IntegerAction,
    PageRule,
    PageRuleAction,
    PageRuleActionID,
    PageRuleConstraint,
    PageRuleDetailResponse,
    PageRuleEnvelope,
    PageRulesResponse,
    PageRuleStatus,
    PageRuleTarget,
    StringAction,
    UnknownAction,
    make_action,
)

__all__ = [
    'FlexibleInt',
    'decode_flexible_int',
    'encode_flexible_int',
    'parse_flexible_int',
    'PAGE_RULE_ACTIONS',
    'FlagAction',
    'ForwardingURL',
    'ForwardingURLAction',
    'IntegerAction',
    'PageRule',
    'PageRuleAction',
    'PageRuleActionID',
    'PageRuleConstraint',
    'PageRuleDetailResponse',
    'PageRuleEnvelope',
    'PageRulesResponse',
    'PageRuleStatus',
    'PageRuleTarget',
    'StringAction',
    'UnknownAction',
    'make_action',
]
