"""Domain services for naive_db.

Services implement the logic that does not belong to a single entity:
the fixed-width codecs that define the on-disk layout and the predicate
evaluator used by table scans.
"""

from naive_db.domain.services.atom_codec import AtomCodec
from naive_db.domain.services.predicate_evaluator import PredicateEvaluator
from naive_db.domain.services.row_codec import RowCodec

__all__ = [
    "AtomCodec",
    "PredicateEvaluator",
    "RowCodec",
]
