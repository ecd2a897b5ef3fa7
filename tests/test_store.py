"""Tests for the garden store: catch-up, actions and the save boundary."""

import random
from datetime import timedelta

import pytest

from garden.config import GardenConfig
from garden.events import AchievementUnlocked, EventBus, MemoryRecorded, PlantBloomed, SeasonChanged
from garden.exceptions import NotFoundError, PersistenceError, PreconditionFailedError
from garden.models import GrowthStage, MemoryType, Position, Season, Seed
from garden.storage import InMemoryRepository
from garden.store import GardenStore
from garden.util.rng import MissingRNGError


class FailingRepository(InMemoryRepository):
    """Saves normally until ``fail_saves`` is set."""

    def __init__(self):
        super().__init__()
        self.fail_saves = False

    def save(self, state):
        if self.fail_saves:
            raise PersistenceError("disk full")
        super().save(state)


@pytest.fixture
def make_store(manual_clock):
    def factory(config=None, repository=None, event_bus=None, seed=7):
        garden_store = GardenStore(
            repository or InMemoryRepository(),
            clock=manual_clock,
            rng=random.Random(seed),
            config=config or GardenConfig(),
            event_bus=event_bus,
        )
        garden_store.initialize()
        return garden_store

    return factory


def add_seeds(store, count):
    """Put extra copies of the starter seed into the saved inventory."""
    state = store.repository.load()
    starter = state.resources.seeds[0]
    for i in range(count):
        state.resources.seeds.append(
            Seed(
                id=f"seed-extra-{i}",
                species=starter.species,
                genetics=starter.genetics,
                created_at=starter.created_at,
            )
        )
    store.repository.save(state)
    return [seed.id for seed in state.resources.seeds]


def plant_mature_pair(store, manual_clock):
    seed_ids = add_seeds(store, 1)
    first = store.plant_seed(seed_ids[0], Position(0, 0), name="Ada").value
    second = store.plant_seed(seed_ids[1], Position(1, 0), name="Bea").value
    # 0.78 stages/day in spring with optimal water: mature well within ten days
    manual_clock.advance(days=10)
    return first.id, second.id


class TestInitialize:
    def test_new_garden_defaults(self, store):
        garden = store.get_status().garden

        assert garden.name == "Eternal Garden"
        assert garden.season == Season.SPRING
        assert garden.plants == []
        assert len(garden.resources.seeds) == 1
        assert garden.resources.fertilizer == 10
        assert garden.resources.water == 100.0

    def test_initialize_is_idempotent(self, store):
        first = store.repository.load()
        assert store.initialize().id == first.id

    def test_actions_need_a_garden(self, manual_clock, seeded_rng):
        empty = GardenStore(InMemoryRepository(), clock=manual_clock, rng=seeded_rng)
        with pytest.raises(NotFoundError):
            empty.get_status()

    def test_rng_is_required(self, manual_clock):
        with pytest.raises(MissingRNGError):
            GardenStore(InMemoryRepository(), clock=manual_clock)


class TestPlantSeed:
    def test_plant_consumes_seed(self, store, manual_clock):
        seed = store.get_seeds()[0]

        result = store.plant_seed(seed.id, Position(2, 3), name="Rosie")

        plant = result.value
        assert plant.name == "Rosie"
        assert plant.species == seed.species
        assert plant.genetics == seed.genetics
        assert plant.stage == GrowthStage.SEED
        assert plant.planted_at == manual_clock.now()
        assert plant.water_level == 80.0
        assert store.get_seeds() == []
        assert 3 <= result.skill_gain.xp_gained <= 6

    def test_plant_records_memory_and_first_seed(self, store):
        seed = store.get_seeds()[0]

        result = store.plant_seed(seed.id, Position(0, 0))

        types = [m.type for m in result.memories]
        assert MemoryType.PLANTING in types
        assert MemoryType.ACHIEVEMENT in types
        achievements = {a.id: a for a in store.get_status().garden.achievements}
        assert achievements["first-seed"].unlocked

    def test_unknown_seed(self, store):
        with pytest.raises(NotFoundError):
            store.plant_seed("seed-missing", Position(0, 0))

    def test_occupied_position_is_rejected_without_changes(self, store):
        seed_ids = add_seeds(store, 1)
        store.plant_seed(seed_ids[0], Position(5, 5))
        before = store.repository.load()
        saves = store.repository.save_count

        with pytest.raises(PreconditionFailedError, match="already occupied"):
            store.plant_seed(seed_ids[1], Position(5, 5, z=2))

        after = store.repository.load()
        assert store.repository.save_count == saves
        assert after.plants == before.plants
        assert after.find_seed(seed_ids[1]) is not None

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (20, 0), (0, 20)])
    def test_out_of_bounds(self, store, x, y):
        seed = store.get_seeds()[0]
        with pytest.raises(PreconditionFailedError):
            store.plant_seed(seed.id, Position(x, y))

    def test_occupied_positions_follow_plants(self, store):
        seed_ids = add_seeds(store, 1)
        store.plant_seed(seed_ids[0], Position(1, 1))
        store.plant_seed(seed_ids[1], Position(2, 1))

        garden = store.get_status().garden
        assert {p.cell for p in garden.occupied_positions} == {(1, 1), (2, 1)}


class TestCareActions:
    def test_water_after_catch_up(self, store, manual_clock):
        plant = store.plant_seed(store.get_seeds()[0].id, Position(0, 0)).value
        manual_clock.advance(days=1)

        result = store.water_plant(plant.id, amount=5)

        # 80 - 7.5 (seed, spring, one day) + 5
        assert result.value.water_level == pytest.approx(77.5)
        assert result.value.last_watered == manual_clock.now()
        assert result.value.growth_progress == pytest.approx(0.78)

    def test_water_default_amount_caps(self, store):
        plant = store.plant_seed(store.get_seeds()[0].id, Position(0, 0)).value
        assert store.water_plant(plant.id).value.water_level == 100.0

    def test_water_unknown_plant(self, store):
        with pytest.raises(NotFoundError):
            store.water_plant("plant-missing")

    def test_fertilizer_runs_out(self, store):
        plant = store.plant_seed(store.get_seeds()[0].id, Position(0, 0)).value
        state = store.repository.load()
        state.resources.fertilizer = 1
        store.repository.save(state)

        store.fertilize_plant(plant.id)
        with pytest.raises(PreconditionFailedError, match="fertilizer"):
            store.fertilize_plant(plant.id)

        assert store.get_status().garden.resources.fertilizer == 0

    def test_fertilize_boosts_health(self, store):
        plant = store.plant_seed(store.get_seeds()[0].id, Position(0, 0)).value
        state = store.repository.load()
        state.plants[0].health = 50.0
        store.repository.save(state)

        result = store.fertilize_plant(plant.id)

        assert result.value.health == pytest.approx(70.0)
        assert store.get_status().garden.resources.fertilizer == 9


class TestCrossBreedAndHarvest:
    def test_cross_requires_mature_parents(self, store):
        seed_ids = add_seeds(store, 1)
        a = store.plant_seed(seed_ids[0], Position(0, 0)).value
        b = store.plant_seed(seed_ids[1], Position(1, 0)).value

        with pytest.raises(PreconditionFailedError, match="mature"):
            store.cross_breed(a.id, b.id)

    def test_cross_rejects_same_plant(self, store, manual_clock):
        first, _second = plant_mature_pair(store, manual_clock)
        with pytest.raises(PreconditionFailedError):
            store.cross_breed(first, first)

    def test_cross_unknown_parent(self, store, manual_clock):
        first, _second = plant_mature_pair(store, manual_clock)
        with pytest.raises(NotFoundError):
            store.cross_breed(first, "plant-missing")

    def test_cross_adds_seed_to_inventory(self, store, manual_clock):
        first, second = plant_mature_pair(store, manual_clock)

        result = store.cross_breed(first, second)

        seed = result.value
        assert seed.parent_ids == (first, second)
        assert seed.created_at == manual_clock.now()
        assert store.get_seeds() == [seed]
        assert MemoryType.CROSS_BREED in {m.type for m in result.memories}
        assert 8 <= result.skill_gain.xp_gained <= 15
        for _trait_type, trait in seed.genetics.items():
            assert trait.expressed in trait.alleles

    def test_harvest_frees_the_plot(self, store, manual_clock):
        first, second = plant_mature_pair(store, manual_clock)

        result = store.harvest(first)

        garden = store.get_status().garden
        assert [p.id for p in garden.plants] == [second]
        assert result.value in garden.resources.seeds
        assert result.value.species == "Morning Star Rose"
        assert not garden.is_occupied(Position(0, 0))

    def test_harvest_requires_maturity(self, store):
        plant = store.plant_seed(store.get_seeds()[0].id, Position(0, 0)).value
        with pytest.raises(PreconditionFailedError):
            store.harvest(plant.id)


class TestCatchUp:
    def test_bloom_is_remembered_during_catch_up(self, store, manual_clock, event_bus):
        blooms = []
        event_bus.subscribe(PlantBloomed, blooms.append)
        plant = store.plant_seed(store.get_seeds()[0].id, Position(0, 0)).value
        manual_clock.advance(days=6)

        result = store.water_plant(plant.id)

        assert result.value.stage == GrowthStage.MATURE
        assert MemoryType.BLOOM in {m.type for m in result.memories}
        assert [e.plant_id for e in blooms] == [plant.id]

    def test_repeated_observation_at_same_time_changes_nothing(self, store, manual_clock):
        store.plant_seed(store.get_seeds()[0].id, Position(0, 0))
        manual_clock.advance(hours=30)

        first = store.get_status().garden.plants[0]
        second = store.get_status().garden.plants[0]

        assert second == first

    def test_clock_going_backwards_is_harmless(self, store, manual_clock):
        store.plant_seed(store.get_seeds()[0].id, Position(0, 0))
        manual_clock.advance(days=1)
        ahead = store.get_status().garden
        manual_clock.advance(days=-3)

        behind = store.get_status().garden

        assert behind.plants[0].growth_progress == ahead.plants[0].growth_progress
        assert behind.last_update == ahead.last_update

    def test_stages_only_move_forward(self, store, manual_clock):
        store.plant_seed(store.get_seeds()[0].id, Position(0, 0))
        stages = []
        for _ in range(12):
            manual_clock.advance(hours=20)
            stages.append(store.get_status().garden.plants[0].stage)
        assert stages == sorted(stages)

    def test_plants_stay_in_bounds_over_long_neglect(self, store, manual_clock):
        store.plant_seed(store.get_seeds()[0].id, Position(0, 0))
        manual_clock.advance(days=90)

        plant = store.get_status().garden.plants[0]

        assert 0.0 <= plant.water_level <= 100.0
        assert 0.0 <= plant.health <= 100.0


class TestSeasons:
    def test_multiple_seasons_caught_up(self, store, manual_clock):
        start = manual_clock.now()
        manual_clock.advance(days=12)

        garden = store.get_status().garden

        assert garden.season == Season.FALL
        assert garden.season_start == start + timedelta(days=10)
        assert garden.seasons_seen == [Season.SPRING, Season.SUMMER, Season.FALL]

    def test_single_step_policy(self, make_store, manual_clock):
        store = make_store(GardenConfig(multi_season_catch_up=False))
        manual_clock.advance(days=12)

        garden = store.get_status().garden

        assert garden.season == Season.SUMMER
        assert garden.season_start == manual_clock.now()

    def test_season_boundary_is_inclusive(self, store, manual_clock):
        manual_clock.advance(days=5)
        assert store.get_status().season == Season.SUMMER

    def test_long_absence_completes_the_cycle(self, store, manual_clock, event_bus):
        changes = []
        event_bus.subscribe(SeasonChanged, changes.append)
        manual_clock.advance(days=100)

        garden = store.get_status().garden

        # 20 whole seasons: back to spring
        assert garden.season == Season.SPRING
        assert set(garden.seasons_seen) == set(Season)
        assert len(changes) == 4
        assert changes[-1].current == Season.SPRING
        assert {a.id for a in garden.achievements if a.unlocked} >= {"full-cycle", "garden-keeper"}

    def test_long_absence_journals_only_the_last_cycle(self, store, manual_clock):
        manual_clock.advance(days=100)
        store.get_status()

        memories = store.get_memories(MemoryType.SEASON)

        assert len(memories) == 4
        assert {m.description for m in memories} == {
            "Summer arrived.",
            "Fall arrived.",
            "Winter arrived.",
            "Spring arrived.",
        }
        assert {m.occurred_at for m in memories} == {manual_clock.now()}

    def test_custom_season_length(self, make_store, manual_clock):
        store = make_store(GardenConfig(season_duration=timedelta(days=1)))
        manual_clock.advance(days=2, hours=1)
        assert store.get_status().season == Season.FALL


class TestSaveBoundary:
    def test_events_flush_after_successful_save(self, store, event_bus):
        recorded = []
        event_bus.subscribe(MemoryRecorded, recorded.append)

        store.plant_seed(store.get_seeds()[0].id, Position(0, 0))

        assert MemoryType.PLANTING in {e.memory.type for e in recorded}

    def test_failed_save_drops_events_and_state(self, make_store, manual_clock):
        repository = FailingRepository()
        bus = EventBus()
        store = make_store(repository=repository, event_bus=bus)
        heard = []
        bus.subscribe(MemoryRecorded, heard.append)
        bus.subscribe(AchievementUnlocked, heard.append)
        seed_id = store.get_seeds()[0].id

        repository.fail_saves = True
        with pytest.raises(PersistenceError):
            store.plant_seed(seed_id, Position(0, 0))

        assert heard == []
        repository.fail_saves = False
        garden = store.get_status().garden
        assert garden.plants == []
        assert garden.find_seed(seed_id) is not None

        store.plant_seed(seed_id, Position(0, 0))
        assert heard

    def test_rejected_action_publishes_nothing(self, store, manual_clock, event_bus):
        heard = []
        event_bus.subscribe(SeasonChanged, heard.append)
        manual_clock.advance(days=6)

        with pytest.raises(NotFoundError):
            store.water_plant("plant-missing")

        assert heard == []
        # The season change is still applied on the next successful observation
        assert store.get_status().season == Season.SUMMER
        assert len(heard) == 1


class TestQueries:
    def test_memories_newest_first_with_filter_and_limit(self, store, manual_clock):
        seed_ids = add_seeds(store, 2)
        for x, seed_id in enumerate(seed_ids):
            store.plant_seed(seed_id, Position(x, 0))
            manual_clock.advance(hours=1)

        plantings = store.get_memories("planting")
        assert len(plantings) == 3
        assert [m.occurred_at for m in plantings] == sorted(
            (m.occurred_at for m in plantings), reverse=True
        )
        assert len(store.get_memories(MemoryType.PLANTING, limit=2)) == 2
        assert store.get_memories(limit=0) == []

    def test_unknown_memory_type(self, store):
        with pytest.raises(PreconditionFailedError):
            store.get_memories("daydream")

    def test_plant_details(self, store, manual_clock):
        plant = store.plant_seed(store.get_seeds()[0].id, Position(0, 0)).value
        manual_clock.advance(days=3, hours=5)

        details = store.get_plant_details(plant.id)

        assert details.age_days == 3
        assert "pink blooms" in details.genetic_description
        assert details.needs_water == (details.plant.water_level < 40)
        assert details.condition in ("thriving", "healthy", "stressed", "struggling")

    def test_plant_details_unknown(self, store):
        with pytest.raises(NotFoundError):
            store.get_plant_details("plant-missing")

    def test_same_seed_same_garden(self, make_store):
        first = make_store(seed=11).repository.load()
        second = make_store(seed=11).repository.load()
        assert first == second
