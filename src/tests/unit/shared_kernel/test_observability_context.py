"""Unit tests for ObservationContext."""

from tenancy.shared_kernel.observability_context import ObservationContext


class TestObservationContext:
    def test_as_dict_skips_unset_values(self):
        context = ObservationContext(request_id="req-1", extra={"job": "sync"})

        assert context.as_dict() == {"request_id": "req-1", "job": "sync"}

    def test_with_methods_return_new_instances(self):
        context = ObservationContext(request_id="req-1")

        scoped = context.with_tenant("1").with_landlord("10").with_extra(step=2)

        assert context.tenant_id is None
        assert scoped.as_dict() == {
            "request_id": "req-1",
            "tenant_id": "1",
            "landlord_id": "10",
            "step": 2,
        }
