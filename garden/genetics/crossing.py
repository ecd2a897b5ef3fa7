"""Genetics engine: Punnett-square crossing with skill-scaled mutation.

Each trait slot is crossed independently. For one slot the offspring takes
one allele from each parent (a uniform draw over the four pairings), the
pair is resolved by dominance rank, and then a mutation roll may replace the
dominant allele with any allele from the trait's domain.

All randomness comes from the RNG handed to ``GeneticsEngine``; the engine
never touches the module-level ``random`` functions.
"""

import logging
import random
from datetime import datetime
from typing import Dict, Optional

from garden.config.genetics import (
    HYBRID_SUFFIXES,
    MUTATION_RATE_BASE,
    MUTATION_RATE_SKILL_SPREAD,
)
from garden.genetics.traits import TRAIT_SPECS, resolve_dominance
from garden.models import GeneticTrait, Plant, PlantGenetics, Seed, SkillLedger, TraitType
from garden.skills.ledger import determine_rarity
from garden.util.ids import new_id
from garden.util.rng import require_rng_param

logger = logging.getLogger(__name__)


def mutation_rate(level: int) -> float:
    """Chance that a crossed trait mutates, 2% at level 0 rising to 10% at 100."""
    clamped = max(0, min(100, level))
    return MUTATION_RATE_BASE + (clamped / 100) * MUTATION_RATE_SKILL_SPREAD


def describe_genetics(genetics: PlantGenetics) -> str:
    """Human-readable summary of the expressed traits."""
    return ", ".join(
        [
            f"{genetics.color.expressed} blooms",
            f"{genetics.bloom_size.expressed} flowers",
            f"{genetics.height.expressed} stems",
            f"{genetics.bloom_pattern.expressed} pattern",
            f"{genetics.fragrance.expressed} fragrance",
        ]
    )


def genetic_similarity(genetics1: PlantGenetics, genetics2: PlantGenetics) -> float:
    """Fraction of matching dominant and recessive alleles across all slots (0-1)."""
    matches = 0
    total = 0
    for trait_type, trait1 in genetics1.items():
        trait2 = genetics2.get(trait_type)
        matches += int(trait1.dominant == trait2.dominant)
        matches += int(trait1.recessive == trait2.recessive)
        total += 2
    return matches / total if total else 0.0


class GeneticsEngine:
    """Crosses plants and rolls fresh genetics using an injected RNG."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = require_rng_param(rng, "GeneticsEngine.__init__")

    def cross_trait(
        self,
        parent1_trait: GeneticTrait,
        parent2_trait: GeneticTrait,
        trait_type: TraitType,
        mutation_rate: float,
    ) -> GeneticTrait:
        """Cross one trait slot from two parents.

        Args:
            parent1_trait: First parent's trait
            parent2_trait: Second parent's trait
            trait_type: Which slot is being crossed (selects the dominance table)
            mutation_rate: Probability in [0, 1] that the result mutates

        Returns:
            A new GeneticTrait whose expressed allele is one of its two alleles
        """
        pairings = (
            (parent1_trait.dominant, parent2_trait.dominant),
            (parent1_trait.dominant, parent2_trait.recessive),
            (parent1_trait.recessive, parent2_trait.dominant),
            (parent1_trait.recessive, parent2_trait.recessive),
        )
        allele1, allele2 = pairings[int(self._rng.random() * 4)]
        crossed = resolve_dominance(trait_type, allele1, allele2, self._rng)

        if self._rng.random() < mutation_rate:
            # A spontaneous novel allele supersedes Mendelian inheritance
            mutant = TRAIT_SPECS[trait_type].random_allele(self._rng)
            logger.debug("Mutation on %s: %s -> %s", trait_type.value, crossed.expressed, mutant)
            return GeneticTrait(dominant=mutant, recessive=crossed.recessive, expressed=mutant)

        return crossed

    def cross_genetics(
        self, genetics1: PlantGenetics, genetics2: PlantGenetics, mutation_rate: float
    ) -> PlantGenetics:
        """Cross every slot independently."""
        crossed: Dict[TraitType, GeneticTrait] = {}
        for trait_type, trait1 in genetics1.items():
            crossed[trait_type] = self.cross_trait(
                trait1, genetics2.get(trait_type), trait_type, mutation_rate
            )
        return PlantGenetics.from_traits(crossed)

    def cross_breed(
        self,
        parent1: Plant,
        parent2: Plant,
        skill: SkillLedger,
        now: datetime,
        mutation_override: Optional[float] = None,
    ) -> Seed:
        """Produce a seed from two plants.

        Both parents are expected to be mature; the garden store checks that
        before calling. Rarity is rolled from the skill level independently of
        the genetics.

        Args:
            parent1: First parent plant
            parent2: Second parent plant
            skill: Breeder's skill ledger (drives mutation and rarity odds)
            now: Creation timestamp for the seed
            mutation_override: Optional fixed mutation rate (e.g. 0.0 in tests)
        """
        rate = mutation_rate(skill.level) if mutation_override is None else mutation_override
        genetics = self.cross_genetics(parent1.genetics, parent2.genetics, rate)
        rarity = determine_rarity(skill.level, self._rng)

        seed = Seed(
            id=new_id("seed", self._rng),
            species=self.hybrid_name(parent1.species, parent2.species, genetics),
            genetics=genetics,
            created_at=now,
            rarity=rarity,
            parent_ids=(parent1.id, parent2.id),
        )
        logger.debug("Crossed %s x %s -> %s (%s)", parent1.id, parent2.id, seed.id, rarity.value)
        return seed

    def hybrid_name(self, species1: str, species2: str, genetics: PlantGenetics) -> str:
        base1 = species1.split(" ")[0] if species1 else "Garden"
        base2 = species2.split(" ")[0] if species2 else "Garden"

        prefixes = (
            genetics.color.expressed.capitalize(),
            genetics.bloom_pattern.expressed.capitalize(),
        )
        suffixes = (base1, base2, f"{base1}-{base2}") + HYBRID_SUFFIXES

        return f"{self._rng.choice(prefixes)} {self._rng.choice(suffixes)}"

    def random_trait(self, trait_type: TraitType) -> GeneticTrait:
        spec = TRAIT_SPECS[trait_type]
        return resolve_dominance(
            trait_type, spec.random_allele(self._rng), spec.random_allele(self._rng), self._rng
        )

    def random_genetics(self) -> PlantGenetics:
        """Roll a brand-new genome (two random alleles per slot)."""
        return PlantGenetics.from_traits(
            {trait_type: self.random_trait(trait_type) for trait_type in TraitType}
        )
