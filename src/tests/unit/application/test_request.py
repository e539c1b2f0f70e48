"""Unit tests for SimpleRequest."""

from tenancy.application.request import SimpleRequest
from tenancy.ports.resolvers import TenancyRequest


class TestSimpleRequest:
    def test_satisfies_request_protocol(self):
        assert isinstance(SimpleRequest(), TenancyRequest)

    def test_segments_are_one_based_and_skip_empties(self):
        request = SimpleRequest(path="//acme//billing/?page=2")

        assert request.segment(1) == "acme"
        assert request.segment(2) == "billing"
        assert request.segment(3) is None
        assert request.segment(0) is None

    def test_header_lookup_ignores_case(self):
        request = SimpleRequest(headers={"X-Tenant": "acme"})

        assert request.header("x-tenant") == "acme"
        assert request.header("X-Landlord") is None
