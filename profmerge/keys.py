import json

import profmerge.dto as dto

MAPPING_SIZE_ROUNDING = 0x1000

ADDRESS_MASK = (1 << 64) - 1


def mapping_key(m: dto.Mapping):
    """Returns a key identifying `m` independently of the address it was loaded at."""
    size = _round_up_to_page_size((m.limit - m.start) & ADDRESS_MASK) & ADDRESS_MASK
    # Mappings with neither a build id nor a file are fake; they all share one key.
    build_id_or_file = m.build_id or m.file or ""
    return (size, m.offset, build_id_or_file)


def function_key(f: dto.Function):
    """Returns a key identifying `f` by its symbol information."""
    return (f.start_line, f.name, f.system_name, f.filename)


def location_key(loc: dto.Location, mapping: dto.Mapping | None):
    """Returns a key identifying `loc`; `mapping` is the mapping `loc.mapping_id` refers to."""
    address = loc.address
    mapping_id = 0
    if mapping is not None:
        # Relative to the mapping start, to handle address space randomization.
        address = (address - mapping.start) & ADDRESS_MASK
        mapping_id = mapping.id
    lines = "|".join(_line_key(ln) for ln in loc.lines)
    return (address, mapping_id, lines, loc.is_folded)


def sample_key(s: dto.Sample):
    """Returns a key identifying `s` by its stack and labels, but not its values."""
    ids = "|".join(_hex(locid) for locid in s.location_ids)
    labels = sorted(
        json.dumps(k, ensure_ascii=False) + json.dumps(v, ensure_ascii=False)
        for k, v in s.labels.items()
    )
    num_labels = sorted(
        json.dumps(k, ensure_ascii=False)
        + _hex_list(_hex(v) for v in values)
        + _hex_list(u.encode("utf-8").hex() for u in s.num_units.get(k, []))
        for k, values in s.num_labels.items()
    )
    return (ids, "".join(labels), "".join(num_labels))


def _line_key(ln):
    function_id = _hex(ln.function_id) if ln.function_id else ""
    return function_id + ":" + _hex(ln.line)


def _hex(value):
    return format(value, "x")


def _hex_list(items):
    return "[" + " ".join(items) + "]"


def _round_up_to_page_size(x):
    return (x + MAPPING_SIZE_ROUNDING - 1) & ~(MAPPING_SIZE_ROUNDING - 1)
