import dataclasses
import logging

import profmerge.dto as dto
from profmerge.compat import check_compatible
from profmerge.errors import NoProfilesProvided
from profmerge.keys import ADDRESS_MASK, function_key, location_key, mapping_key, sample_key
from profmerge.logging_config import log_event

logger = logging.getLogger(__name__)


def merge(profiles):
    """Merges `profiles` into a new profile.

    The profiles must have identical period and sample types. The result keeps
    only the samples with non-zero values and the entities they reference; its
    period is the largest one and its duration the sum of all durations.
    """
    if not profiles:
        raise NoProfilesProvided()
    merger = ProfileMerger()
    merger.merge(profiles)
    return merger.result()


def compact(profile):
    """Returns a copy of `profile` without dead samples and unreferenced entities."""
    merger = ProfileMerger()
    merger.merge([profile])
    return merger.result()


def is_zero_sample(s: dto.Sample):
    """Check whether all the values of the sample are zero."""
    return all(v == 0 for v in s.values)


class ProfileMerger:
    """Merges compatible profiles into one resulting profile.

    The merger accumulates across calls to `merge()` until `result()` is
    called, after which it can be reused. Not safe for concurrent use.
    """

    def __init__(self):
        self._profile = None
        self._source = None
        self._seen_comments = set()

        # Valid while merging one source profile; keyed by the source IDs.
        self._locations_by_id = {}
        self._functions_by_id = {}
        self._mappings_by_id = {}  # id -> (mapping, address offset)

        # Keyed by structural keys; kept for the whole merge.
        self._samples = {}
        self._locations = {}
        self._functions = {}
        self._mappings = {}

    def merge(self, sources):
        """Merges `sources`, using any prior merged state or else the first source as the reference."""
        if not sources:
            if self._profile is None:
                raise NoProfilesProvided()
            return
        self._combine_headers(sources)
        for src in sources:
            self._merge_one(src)

    def result(self):
        """Returns the merged profile (None if nothing was merged) and resets the merger."""
        if self._profile is None:
            return None
        # Samples may have been summed to zero; merge again to drop them.
        if any(is_zero_sample(s) for s in self._profile.samples):
            self._compact()
        p = self._profile
        log_event(
            logger,
            "Merge result",
            level=logging.DEBUG,
            samples=len(p.samples),
            locations=len(p.locations),
            functions=len(p.functions),
            mappings=len(p.mappings),
        )
        self._clear()
        return p

    def _combine_headers(self, sources):
        if self._profile is not None:
            for src in sources:
                check_compatible(self._profile, src)
        else:
            first = sources[0]
            for src in sources[1:]:
                check_compatible(first, src)
            self._seen_comments.clear()
            self._profile = dto.Profile(
                sample_type=[dataclasses.replace(vt) for vt in first.sample_type],
                drop_frames=first.drop_frames,
                keep_frames=first.keep_frames,
                period_type=_copy_value_type(first.period_type),
            )

        p = self._profile
        for src in sources:
            if p.time_nanos == 0 or src.time_nanos < p.time_nanos:
                p.time_nanos = src.time_nanos
            p.duration_nanos += src.duration_nanos
            if p.period == 0 or p.period < src.period:
                p.period = src.period
            for comment in src.comments:
                if comment not in self._seen_comments:
                    p.comments.append(comment)
                    self._seen_comments.add(comment)
            if not p.default_sample_type:
                p.default_sample_type = src.default_sample_type

    def _merge_one(self, src):
        self._locations_by_id.clear()
        self._functions_by_id.clear()
        self._mappings_by_id.clear()
        self._source = _SourceIndex(src)

        if not self._mappings and src.mappings:
            # The first mapping represents the main binary; keep it first.
            self._map_mapping(src.mappings[0])

        dead = 0
        for s in src.samples:
            if is_zero_sample(s):
                dead += 1
            else:
                self._map_sample(s)
        self._source = None

        log_event(
            logger,
            "Merged source profile",
            level=logging.DEBUG,
            source_samples=len(src.samples),
            dead_samples=dead,
            merged_samples=len(self._profile.samples),
        )

    def _compact(self):
        p = self._profile
        log_event(logger, "Recompacting merged profile", level=logging.DEBUG, samples=len(p.samples))
        self._clear()
        self._combine_headers([p])
        self._merge_one(p)

    def _clear(self):
        self._profile = None
        self._seen_comments.clear()
        self._samples.clear()
        self._locations.clear()
        self._functions.clear()
        self._mappings.clear()

    def _map_sample(self, src):
        s = dto.Sample(
            location_ids=[self._map_location_id(locid) for locid in src.location_ids],
            labels={k: list(v) for k, v in src.labels.items()},
            num_labels={k: list(v) for k, v in src.num_labels.items()},
            num_units={k: list(src.num_units.get(k, [])) for k in src.num_labels},
        )
        # Keyed on the remapped locations, to account for the remapped mappings.
        k = sample_key(s)
        existing = self._samples.get(k)
        if existing is not None:
            for i, v in enumerate(src.values):
                existing.values[i] += v
            return existing
        s.values = list(src.values)
        self._samples[k] = s
        self._profile.samples.append(s)
        return s

    def _map_location_id(self, locid):
        loc = self._map_location(self._source.location(locid))
        return loc.id if loc is not None else 0

    def _map_location(self, src):
        if src is None:
            return None
        loc = self._locations_by_id.get(src.id)
        if loc is not None:
            return loc

        m, offset = self._map_mapping(self._source.mapping(src.mapping_id))
        loc = dto.Location(
            id=len(self._profile.locations) + 1,
            mapping_id=m.id if m is not None else 0,
            address=(src.address + offset) & ADDRESS_MASK,
            lines=[self._map_line(ln) for ln in src.lines],
            is_folded=src.is_folded,
        )
        # Keyed on the remapped location, to account for the remapped mapping ID.
        k = location_key(loc, m)
        existing = self._locations.get(k)
        if existing is not None:
            self._locations_by_id[src.id] = existing
            return existing
        self._locations_by_id[src.id] = loc
        self._locations[k] = loc
        self._profile.locations.append(loc)
        return loc

    def _map_mapping(self, src):
        """Returns the merged mapping for `src` and the offset to add to its addresses."""
        if src is None:
            return None, 0
        info = self._mappings_by_id.get(src.id)
        if info is not None:
            return info

        k = mapping_key(src)
        m = self._mappings.get(k)
        if m is not None:
            info = (m, m.start - src.start)
            self._mappings_by_id[src.id] = info
            return info

        m = dataclasses.replace(src, id=len(self._profile.mappings) + 1)
        self._profile.mappings.append(m)
        self._mappings[k] = m
        info = (m, 0)
        self._mappings_by_id[src.id] = info
        return info

    def _map_line(self, src):
        f = self._map_function(self._source.function(src.function_id))
        return dto.Line(function_id=f.id if f is not None else 0, line=src.line)

    def _map_function(self, src):
        if src is None:
            return None
        f = self._functions_by_id.get(src.id)
        if f is not None:
            return f

        k = function_key(src)
        f = self._functions.get(k)
        if f is None:
            f = dataclasses.replace(src, id=len(self._profile.functions) + 1)
            self._functions[k] = f
            self._profile.functions.append(f)
        self._functions_by_id[src.id] = f
        return f


class _SourceIndex:
    """Resolves the IDs used inside one source profile to its entities."""

    def __init__(self, profile):
        self._mappings = {m.id: m for m in profile.mappings}
        self._locations = {loc.id: loc for loc in profile.locations}
        self._functions = {f.id: f for f in profile.functions}

    def mapping(self, mapping_id):
        return _lookup(self._mappings, mapping_id, "mapping")

    def location(self, location_id):
        return _lookup(self._locations, location_id, "location")

    def function(self, function_id):
        return _lookup(self._functions, function_id, "function")


def _lookup(entities, entity_id, kind):
    if not entity_id:
        return None
    entity = entities.get(entity_id)
    if entity is None:
        logger.debug("Dangling %s reference %d treated as absent", kind, entity_id)
    return entity


def _copy_value_type(vt):
    if vt is None:
        return None
    return dataclasses.replace(vt)
