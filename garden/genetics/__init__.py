"""Plant genetics: the trait model and the crossing engine.

- ``traits``: declarative allele domains and dominance ranks (``TraitSpec``)
- ``crossing``: ``GeneticsEngine`` for Punnett-square crossing and mutation
"""

from garden.genetics.crossing import (
    GeneticsEngine,
    describe_genetics,
    genetic_similarity,
    mutation_rate,
)
from garden.genetics.traits import (
    TRAIT_SPECS,
    TraitSpec,
    alleles,
    default_trait,
    dominance_rank,
    resolve_dominance,
)

__all__ = [
    "GeneticsEngine",
    "TRAIT_SPECS",
    "TraitSpec",
    "alleles",
    "default_trait",
    "describe_genetics",
    "dominance_rank",
    "genetic_similarity",
    "mutation_rate",
    "resolve_dominance",
]
