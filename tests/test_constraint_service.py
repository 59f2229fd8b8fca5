"""Tests for the constraint cache and ConstraintValidationService."""

from __future__ import annotations

import asyncio

import pytest

from tests.conftest import (
    FakeClock,
    FakeEntityClient,
    constraint_claim,
    item_snak,
    property_entity,
    string_snak,
)
from wbschema.constraints.cache import ConstraintCache, cache_key
from wbschema.constraints.models import PropertyConstraint
from wbschema.constraints.service import ConstraintValidationService
from wbschema.exceptions import ConstraintFetchError, EntityNotFoundError

FORMAT_CLAIM = constraint_claim("Q21502404", {"P1793": [string_snak("P1793", "^Q[0-9]+$")]})
SINGLE_VALUE_CLAIM = constraint_claim("Q19474404")
ALLOWED_CLAIM = constraint_claim(
    "Q21510859", {"P2305": [item_snak("P2305", "Q30"), item_snak("P2305", "Q142")]}
)
SYMMETRIC_CLAIM = constraint_claim("Q21510862")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client() -> FakeEntityClient:
    return FakeEntityClient(
        {
            "P1": property_entity("P1", [FORMAT_CLAIM]),
            "P2": property_entity("P2", [SINGLE_VALUE_CLAIM]),
            "P3": property_entity("P3", [SYMMETRIC_CLAIM]),
            "P17": property_entity("P17", [ALLOWED_CLAIM], label="country"),
        }
    )


@pytest.fixture
def service(client, settings, clock) -> ConstraintValidationService:
    return ConstraintValidationService(client, settings=settings, clock=clock)


class TestConstraintCache:
    def test_entries_expire_after_ttl(self, clock) -> None:
        cache = ConstraintCache(ttl=300, clock=clock)
        cache.set("wikidata:P1", [1])
        clock.advance(299)
        assert cache.get("wikidata:P1") == [1]
        clock.advance(1)
        assert cache.get("wikidata:P1") is None
        assert len(cache) == 0

    def test_empty_lists_are_cached(self, clock) -> None:
        cache = ConstraintCache(clock=clock)
        cache.set("wikidata:P1", [])
        assert "wikidata:P1" in cache
        assert cache.get("wikidata:P1") == []

    def test_clear_by_prefix(self, clock) -> None:
        cache = ConstraintCache(clock=clock)
        cache.set(cache_key("wikidata", "P1"), [])
        cache.set(cache_key("wikidata", "P2"), [])
        cache.set(cache_key("local", "P1"), [])

        cache.clear("wikidata:")
        assert len(cache) == 1
        assert "local:P1" in cache

        cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_eviction_is_scheduled_on_running_loop(self) -> None:
        cache = ConstraintCache(ttl=0.01)
        cache.set("wikidata:P1", [])
        await asyncio.sleep(0.05)
        assert cache._entries == {}


class TestGetPropertyConstraints:
    @pytest.mark.asyncio
    async def test_fetches_and_parses(self, service, client) -> None:
        constraints = await service.get_property_constraints("wikidata", "P1")
        assert [c.type for c in constraints] == ["format constraint"]
        assert client.calls == [("wikidata", "P1")]

    @pytest.mark.asyncio
    async def test_cached_within_ttl(self, service, client, clock) -> None:
        first = await service.get_property_constraints("wikidata", "P1")
        clock.advance(200)
        second = await service.get_property_constraints("wikidata", "P1")

        assert second is first
        assert len(client.calls) == 1

        clock.advance(100)
        third = await service.get_property_constraints("wikidata", "P1")
        assert third is not first
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_cache_is_keyed_by_instance(self, service, client) -> None:
        await service.get_property_constraints("wikidata", "P1")
        await service.get_property_constraints("local", "P1")
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_is_wrapped_and_not_cached(self, service, client) -> None:
        client.errors["P1"] = ConnectionError("timed out")

        with pytest.raises(ConstraintFetchError) as exc_info:
            await service.get_property_constraints("wikidata", "P1")
        assert exc_info.value.property_id == "P1"
        assert "P1" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

        del client.errors["P1"]
        assert await service.get_property_constraints("wikidata", "P1")
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_clear_cache(self, service, client) -> None:
        await service.get_property_constraints("wikidata", "P1")
        await service.get_property_constraints("local", "P1")

        service.clear_cache("wikidata")
        await service.get_property_constraints("wikidata", "P1")
        await service.get_property_constraints("local", "P1")
        assert len(client.calls) == 3

        service.clear_cache()
        assert len(service.cache) == 0


class TestValidateProperty:
    @pytest.mark.asyncio
    async def test_format_pass(self, service) -> None:
        result = await service.validate_property("wikidata", "P1", ["Q42"])
        assert result.is_valid
        assert result.violations == []
        assert result.suggestions == []

    @pytest.mark.asyncio
    async def test_format_violation(self, service) -> None:
        result = await service.validate_property("wikidata", "P1", ["foo"])
        assert not result.is_valid
        assert len(result.violations) == 1
        assert result.violations[0].constraint_type == "format_constraint"
        assert result.suggestions == [
            "Review property values to ensure they meet all constraint requirements"
        ]

    @pytest.mark.asyncio
    async def test_single_value_counts_the_whole_list(self, service) -> None:
        result = await service.validate_property("wikidata", "P2", ["same", "same"])
        assert len(result.violations) == 1
        assert result.violations[0].constraint_type == "single_value_constraint"

    @pytest.mark.asyncio
    async def test_unsupported_constraint_warns(self, service) -> None:
        result = await service.validate_property("wikidata", "P3", ["Q1"])
        assert result.is_valid
        assert result.violations == []
        assert len(result.warnings) == 1
        assert result.warnings[0].constraint_type == "symmetric constraint"

    @pytest.mark.asyncio
    async def test_empty_values(self, service) -> None:
        result = await service.validate_property("wikidata", "P17", [])
        assert result.is_valid

    @pytest.mark.asyncio
    async def test_fetch_failure_becomes_system_error(self, service) -> None:
        result = await service.validate_property("wikidata", "P404", ["x"])
        assert not result.is_valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.constraint_type == "system_error"
        assert violation.property_id == "P404"
        assert violation.message.startswith("Failed to validate property:")
        assert result.suggestions == ["Check network connection and instance configuration"]

    @pytest.mark.asyncio
    async def test_directly_supplied_constraints(self, service, monkeypatch) -> None:
        constraints = [
            PropertyConstraint(type="format constraint", parameters={"pattern": "^[A-Z]{2}$"}),
            PropertyConstraint(type="allowed values constraint", parameters={"allowedValues": ["Q30"]}),
            PropertyConstraint(type="single value constraint", parameters={}),
        ]

        async def fake_get(instance_id, property_id):
            return constraints

        monkeypatch.setattr(service, "get_property_constraints", fake_get)
        result = await service.validate_property("wikidata", "P1", [{"type": "string", "content": "US"}])
        assert [v.constraint_type for v in result.violations] == ["allowed_values_constraint"]


class TestValidateSchema:
    @pytest.mark.asyncio
    async def test_empty_schema(self, service) -> None:
        result = await service.validate_schema("wikidata", {})
        assert result.is_valid
        assert result.violations == []
        assert result.warnings == []
        assert result.suggestions == []

    @pytest.mark.asyncio
    async def test_aggregation(self, service) -> None:
        result = await service.validate_schema(
            "wikidata",
            {"P1": ["foo", "bar"], "P2": ["a", "b"], "P3": ["x"], "P17": ["Q30"]},
        )
        assert not result.is_valid
        assert [v.property_id for v in result.violations] == ["P1", "P1", "P2"]
        assert len(result.warnings) == 1
        assert result.suggestions == [
            "Review property values to ensure they meet all constraint requirements",
            "Consider reviewing the entire schema for consistency",
            "Some constraint types are not yet supported - manual review recommended",
        ]

    @pytest.mark.asyncio
    async def test_one_failing_property_does_not_fail_the_others(self, service, client) -> None:
        client.errors["P2"] = RuntimeError("boom")
        result = await service.validate_schema("wikidata", {"P1": ["Q1"], "P2": ["a"]})
        assert [(v.property_id, v.constraint_type) for v in result.violations] == [
            ("P2", "system_error")
        ]

    @pytest.mark.asyncio
    async def test_properties_are_fetched_concurrently(self, settings) -> None:
        in_flight = 0
        peak = 0

        class SlowClient(FakeEntityClient):
            async def get_entity(self, instance_id, entity_id):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return property_entity(entity_id, [])

        service = ConstraintValidationService(SlowClient(), settings=settings)
        await service.validate_schema("wikidata", {f"P{i}": [] for i in range(1, 6)})
        assert peak == 5

    @pytest.mark.asyncio
    async def test_aggregation_failure_becomes_system_error(self, service, monkeypatch) -> None:
        async def broken(instance_id, property_id, values):
            raise RuntimeError("gather failed")

        monkeypatch.setattr(service, "validate_property", broken)
        result = await service.validate_schema("wikidata", {"P1": ["x"]})
        assert not result.is_valid
        assert len(result.violations) == 1
        assert result.violations[0].property_id == "schema"
        assert result.violations[0].message == "Schema validation failed: gather failed"
        assert result.suggestions == ["Check network connection and try again"]


class TestPropertyReference:
    @pytest.mark.asyncio
    async def test_resolves_label_and_datatype(self, service) -> None:
        reference = await service.get_property_reference("wikidata", "P17")
        assert reference.id == "P17"
        assert reference.label == "country"
        assert reference.data_type == "string"

    @pytest.mark.asyncio
    async def test_missing_property(self, service) -> None:
        with pytest.raises(EntityNotFoundError):
            await service.get_property_reference("wikidata", "P404")
