import logging

import profmerge.dto as dto
from profmerge.errors import IncompatiblePeriodType, IncompatibleSampleTypes

logger = logging.getLogger(__name__)


def equal_value_type(a: dto.ValueType | None, b: dto.ValueType | None):
    """Check whether two value types have the same type and unit."""
    if a is None or b is None:
        return a is None and b is None
    return a.type == b.type and a.unit == b.unit


def check_compatible(p: dto.Profile, other: dto.Profile):
    """Raises an `IncompatibleProfiles` error if `p` and `other` cannot be merged or compared."""
    if not equal_value_type(p.period_type, other.period_type):
        logger.warning("Period type mismatch: %s vs %s", p.period_type, other.period_type)
        raise IncompatiblePeriodType(p.period_type, other.period_type)

    if len(p.sample_type) != len(other.sample_type) or not all(
        equal_value_type(a, b) for a, b in zip(p.sample_type, other.sample_type)
    ):
        logger.warning("Sample type mismatch: %s vs %s", p.sample_type, other.sample_type)
        raise IncompatibleSampleTypes(p.sample_type, other.sample_type)
