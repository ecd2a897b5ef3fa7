"""Trait model: allele domains and dominance ranks.

Each ``TraitType`` has a declarative ``TraitSpec`` describing the alleles it
may carry and how strongly each one is expressed. The table is static
configuration; nothing here holds mutable state.
"""

import random
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from garden.config.genetics import (
    BLOOM_PATTERN_DOMINANCE,
    BLOOM_SIZE_DOMINANCE,
    COLOR_DOMINANCE,
    FRAGRANCE_DOMINANCE,
    HEIGHT_DOMINANCE,
    UNKNOWN_ALLELE_RANK,
)
from garden.models import GeneticTrait, TraitType


@dataclass(frozen=True)
class TraitSpec:
    """Declarative specification for a genetic trait.

    Attributes:
        trait_type: The slot this spec describes
        dominance: Allele -> rank, in display order (higher rank wins)
    """

    trait_type: TraitType
    dominance: Mapping[str, int]

    @property
    def alleles(self) -> Tuple[str, ...]:
        return tuple(self.dominance)

    def rank(self, allele: str) -> int:
        """Dominance rank of ``allele``; unknown alleles rank lowest."""
        return self.dominance.get(allele, UNKNOWN_ALLELE_RANK)

    def random_allele(self, rng: random.Random) -> str:
        return rng.choice(self.alleles)


TRAIT_SPECS: Dict[TraitType, TraitSpec] = {
    TraitType.COLOR: TraitSpec(TraitType.COLOR, COLOR_DOMINANCE),
    TraitType.BLOOM_SIZE: TraitSpec(TraitType.BLOOM_SIZE, BLOOM_SIZE_DOMINANCE),
    TraitType.HEIGHT: TraitSpec(TraitType.HEIGHT, HEIGHT_DOMINANCE),
    TraitType.BLOOM_PATTERN: TraitSpec(TraitType.BLOOM_PATTERN, BLOOM_PATTERN_DOMINANCE),
    TraitType.FRAGRANCE: TraitSpec(TraitType.FRAGRANCE, FRAGRANCE_DOMINANCE),
}


def alleles(trait_type: TraitType) -> Tuple[str, ...]:
    """All allele values a trait may take."""
    return TRAIT_SPECS[trait_type].alleles


def dominance_rank(trait_type: TraitType, allele: str) -> int:
    """Rank of ``allele`` for ``trait_type`` (unknown values rank 1)."""
    spec = TRAIT_SPECS.get(trait_type)
    if spec is None:
        return UNKNOWN_ALLELE_RANK
    return spec.rank(allele)


def resolve_dominance(
    trait_type: TraitType, allele1: str, allele2: str, rng: random.Random
) -> GeneticTrait:
    """Build a trait from two alleles, deciding which one shows.

    The strictly higher-ranked allele becomes dominant and expressed. On a
    tie the first allele is recorded as dominant and the expressed allele is
    a coin flip between the two.
    """
    rank1 = dominance_rank(trait_type, allele1)
    rank2 = dominance_rank(trait_type, allele2)

    if rank1 > rank2:
        return GeneticTrait(dominant=allele1, recessive=allele2, expressed=allele1)
    if rank2 > rank1:
        return GeneticTrait(dominant=allele2, recessive=allele1, expressed=allele2)

    expressed = allele1 if rng.random() < 0.5 else allele2
    return GeneticTrait(dominant=allele1, recessive=allele2, expressed=expressed)


def default_trait(trait_type: TraitType) -> GeneticTrait:
    """Homozygous trait of the weakest allele, used to repair missing slots."""
    spec = TRAIT_SPECS[trait_type]
    weakest = min(spec.alleles, key=spec.rank)
    return GeneticTrait(dominant=weakest, recessive=weakest, expressed=weakest)
