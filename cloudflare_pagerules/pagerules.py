"""
Page Rules operations for a zone.

Every operation is one round trip: build the path and body, hand them to the
transport, decode the response envelope.
"""

import logging
from typing import Any, List, Optional, Protocol, Type, TypeVar
from urllib.parse import quote

from pydantic import ValidationError

from .errors import DecodeError, TransportError
from .models import PageRule, PageRuleDetailResponse, PageRuleEnvelope, PageRulesResponse

logger = logging.getLogger("cloudflare_pagerules")

EnvelopeT = TypeVar("EnvelopeT", bound=PageRuleEnvelope)


class Transport(Protocol):
    """Anything that can perform an API call and return the raw response body."""

    def make_request(self, method: str, path: str, body: Optional[Any] = None) -> bytes:
        ...


def _segment(identifier: str) -> str:
    # Zone and rule ids are opaque; escape them as a single path segment
    return quote(identifier, safe="")


class PageRulesAPI:
    """
    Client for the Page Rules endpoints of a zone.

    The ``*_response`` methods return the whole envelope. The others return
    only its result. Neither raises when the envelope reports
    ``success: false``; inspect ``success`` and ``errors`` on the envelope
    when that matters.
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    def _rules_path(self, zone_id: str) -> str:
        return f"/zones/{_segment(zone_id)}/pagerules"

    def _rule_path(self, zone_id: str, rule_id: str) -> str:
        return f"{self._rules_path(zone_id)}/{_segment(rule_id)}"

    def _request(
        self,
        method: str,
        path: str,
        body: Optional[Any],
        envelope: Type[EnvelopeT],
        allow_empty: bool = False,
    ) -> EnvelopeT:
        """
        Send one request and decode its response envelope.

        Raises:
            TransportError: If the transport raised; nothing is decoded
            DecodeError: If the response body is not the expected envelope
        """
        logger.debug(f"Page Rules request: {method} {path}")
        try:
            raw = self.transport.make_request(method, path, body)
        except Exception as e:
            # The transport logs the failure itself
            logger.debug(f"Page Rules request failed: {method} {path}: {e}")
            raise TransportError("request failed", e) from e

        # DELETE may answer 204 with no body at all
        if allow_empty and (raw is None or not raw.strip()):
            return envelope(success=True)

        try:
            response = envelope.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Failed to decode Page Rules response for {method} {path}: {e}")
            raise DecodeError("response decode failed", e) from e

        if not response.success:
            logger.warning(f"Page Rules API reported failure for {method} {path}: {response.errors}")
        return response

    def create_page_rule_response(self, zone_id: str, rule: PageRule) -> PageRuleDetailResponse:
        """Create a Page Rule and return the whole response envelope."""
        return self._request(
            "POST", self._rules_path(zone_id), rule.to_request_body(), PageRuleDetailResponse
        )

    def create_page_rule(self, zone_id: str, rule: PageRule) -> PageRule:
        """
        Create a new Page Rule for a zone.

        API reference: POST /zones/:zone_identifier/pagerules

        Args:
            zone_id: Zone identifier
            rule: The rule to create; its id and timestamps are not sent

        Returns:
            The rule as stored by the API, with its id populated
        """
        return self.create_page_rule_response(zone_id, rule).result

    def list_page_rules_response(self, zone_id: str) -> PageRulesResponse:
        """List Page Rules and return the whole response envelope."""
        return self._request("GET", self._rules_path(zone_id), None, PageRulesResponse)

    def list_page_rules(self, zone_id: str) -> List[PageRule]:
        """
        Return all Page Rules for a zone.

        API reference: GET /zones/:zone_identifier/pagerules
        """
        return self.list_page_rules_response(zone_id).result

    def get_page_rule_response(self, zone_id: str, rule_id: str) -> PageRuleDetailResponse:
        """Fetch one Page Rule and return the whole response envelope."""
        return self._request("GET", self._rule_path(zone_id, rule_id), None, PageRuleDetailResponse)

    def get_page_rule(self, zone_id: str, rule_id: str) -> PageRule:
        """
        Fetch detail about one Page Rule for a zone.

        API reference: GET /zones/:zone_identifier/pagerules/:identifier
        """
        return self.get_page_rule_response(zone_id, rule_id).result

    def change_page_rule_response(
        self, zone_id: str, rule_id: str, rule: PageRule
    ) -> PageRuleDetailResponse:
        """Partially update a Page Rule and return the whole response envelope."""
        return self._request(
            "PATCH",
            self._rule_path(zone_id, rule_id),
            rule.to_request_body(partial=True),
            PageRuleDetailResponse,
        )

    def change_page_rule(self, zone_id: str, rule_id: str, rule: PageRule) -> PageRule:
        """
        Change individual settings of a Page Rule.

        Only the fields explicitly set on ``rule`` are sent, so
        ``PageRule(status="paused")`` pauses a rule and leaves the rest alone.
        Use update_page_rule to replace the entire rule.

        API reference: PATCH /zones/:zone_identifier/pagerules/:identifier

        Args:
            zone_id: Zone identifier
            rule_id: Page Rule identifier
            rule: Partial rule holding the fields to change

        Returns:
            The updated rule
        """
        return self.change_page_rule_response(zone_id, rule_id, rule).result

    def update_page_rule_response(
        self, zone_id: str, rule_id: str, rule: PageRule
    ) -> PageRuleDetailResponse:
        """Replace a Page Rule and return the whole response envelope."""
        return self._request(
            "PUT",
            self._rule_path(zone_id, rule_id),
            rule.to_request_body(),
            PageRuleDetailResponse,
        )

    def update_page_rule(self, zone_id: str, rule_id: str, rule: PageRule) -> PageRule:
        """
        Replace a Page Rule, in contrast to change_page_rule which changes
        individual settings.

        API reference: PUT /zones/:zone_identifier/pagerules/:identifier
        """
        return self.update_page_rule_response(zone_id, rule_id, rule).result

    def delete_page_rule_response(self, zone_id: str, rule_id: str) -> PageRuleDetailResponse:
        """Delete a Page Rule and return the whole response envelope."""
        return self._request(
            "DELETE",
            self._rule_path(zone_id, rule_id),
            None,
            PageRuleDetailResponse,
            allow_empty=True,
        )

    def delete_page_rule(self, zone_id: str, rule_id: str) -> None:
        """
        Delete a Page Rule for a zone.

        API reference: DELETE /zones/:zone_identifier/pagerules/:identifier
        """
        self.delete_page_rule_response(zone_id, rule_id)
