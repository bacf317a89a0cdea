import logging

import profmerge.dto as dto
from profmerge.compat import check_compatible
from profmerge.logging_config import log_event

logger = logging.getLogger(__name__)


def sample_type_sums(p: dto.Profile):
    """Sums the values of every sample, per sample type."""
    sums = [0] * len(p.sample_type)
    for s in p.samples:
        for i, v in enumerate(s.values):
            sums[i] += v
    return sums


def normalize_ratios(p: dto.Profile, base: dto.Profile):
    """Computes, per sample type, the ratio of the sum of `base` to the sum of `p`.

    A sample type that sums to zero in `p` gets a ratio of 0.
    """
    check_compatible(p, base)

    base_sums = sample_type_sums(base)
    src_sums = sample_type_sums(p)
    return [0.0 if src == 0 else b / src for b, src in zip(base_sums, src_sums)]


def normalize(p: dto.Profile, base: dto.Profile, scale_n):
    """Scales the values of `p` so that each sample type sums up to the same total as in `base`.

    `scale_n(profile, ratios)` performs the per-sample multiplication.
    """
    ratios = normalize_ratios(p, base)
    log_event(logger, "Normalizing profile", level=logging.DEBUG, ratios=ratios)
    scale_n(p, ratios)
