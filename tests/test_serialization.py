"""Tests for garden record encoding and lenient decoding."""

import copy
from datetime import datetime, timedelta, timezone

import pytest

from garden.exceptions import PersistenceError
from garden.models import GrowthStage, MemoryType, Position, Rarity, Season
from garden.serialization import (
    SCHEMA_VERSION,
    decode_timestamp,
    encode_timestamp,
    state_from_record,
    state_to_record,
)


@pytest.fixture
def populated_state(store, manual_clock):
    seed = store.get_seeds()[0]
    store.plant_seed(seed.id, Position(3, 4), name="Rosie")
    manual_clock.advance(days=1)
    plant_id = store.get_status().garden.plants[0].id
    store.water_plant(plant_id)
    return store.repository.load()


@pytest.fixture
def record(populated_state):
    return state_to_record(populated_state)


class TestTimestamps:
    def test_round_trip_keeps_timezone(self):
        moment = datetime(2024, 5, 1, 8, 30, 15, 123456, tzinfo=timezone.utc)
        assert decode_timestamp(encode_timestamp(moment)) == moment

    def test_naive_values_are_utc(self):
        parsed = decode_timestamp("2024-05-01T08:30:00")
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)

    def test_trailing_z_accepted(self):
        assert decode_timestamp("2024-05-01T08:30:00Z") == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)

    def test_garbage_uses_fallback_or_raises(self):
        fallback = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert decode_timestamp("yesterday-ish", fallback) == fallback
        with pytest.raises(PersistenceError):
            decode_timestamp("yesterday-ish")


class TestRoundTrip:
    def test_record_restores_equal_state(self, populated_state, record):
        assert state_from_record(record) == populated_state

    def test_timestamps_are_strings_in_record(self, record):
        garden = record["garden"]
        assert record["version"] == SCHEMA_VERSION
        assert isinstance(garden["created_at"], str)
        assert isinstance(garden["plants"][0]["planted_at"], str)

    def test_restored_timestamps_are_datetimes(self, record):
        state = state_from_record(record)
        assert isinstance(state.plants[0].last_watered, datetime)
        assert isinstance(state.memories[0].occurred_at, datetime)

    def test_memory_types_survive(self, populated_state, record):
        state = state_from_record(record)
        assert MemoryType.PLANTING in {m.type for m in state.memories}
        assert state.seasons_seen == populated_state.seasons_seen


class TestRepairs:
    def test_inconsistent_expressed_allele_is_re_resolved(self, record):
        broken = copy.deepcopy(record)
        broken["garden"]["plants"][0]["genetics"]["color"] = {
            "dominant": "white",
            "recessive": "red",
            "expressed": "green",
        }

        color = state_from_record(broken).plants[0].genetics.color

        assert color.expressed == "red"

    def test_missing_trait_gets_weakest_homozygous_default(self, record):
        broken = copy.deepcopy(record)
        del broken["garden"]["plants"][0]["genetics"]["fragrance"]

        fragrance = state_from_record(broken).plants[0].genetics.fragrance

        assert fragrance.dominant == fragrance.recessive == fragrance.expressed

    def test_levels_are_clamped(self, record):
        broken = copy.deepcopy(record)
        broken["garden"]["plants"][0]["health"] = 250
        broken["garden"]["plants"][0]["water_level"] = -12

        plant = state_from_record(broken).plants[0]

        assert plant.health == 100.0
        assert plant.water_level == 0.0

    def test_stage_never_behind_progress(self, record):
        broken = copy.deepcopy(record)
        broken["garden"]["plants"][0]["stage"] = "seed"
        broken["garden"]["plants"][0]["growth_progress"] = 2.5

        assert state_from_record(broken).plants[0].stage == GrowthStage.SMALL

    def test_unknown_enum_values_fall_back(self, record):
        broken = copy.deepcopy(record)
        broken["garden"]["plants"][0]["rarity"] = "mythic"
        broken["garden"]["season"] = "monsoon"
        broken["garden"]["plants"][0]["stage"] = "MATURE"

        state = state_from_record(broken)

        assert state.plants[0].rarity == Rarity.COMMON
        assert state.season == Season.SPRING
        assert state.plants[0].stage == GrowthStage.MATURE


class TestRejections:
    def test_version_mismatch(self, record):
        record["version"] = "0.9"
        with pytest.raises(PersistenceError, match="Version mismatch"):
            state_from_record(record)

    def test_missing_garden_section(self):
        with pytest.raises(PersistenceError, match="missing field 'garden'"):
            state_from_record({"version": SCHEMA_VERSION})

    def test_not_a_mapping(self):
        with pytest.raises(PersistenceError):
            state_from_record(["garden"])

    def test_missing_garden_id(self, record):
        del record["garden"]["id"]
        with pytest.raises(PersistenceError):
            state_from_record(record)
