from dataclasses import dataclass, field


@dataclass
class ValueType:
    """Describes one measurement dimension of a profile, e.g. cpu/nanoseconds."""

    type: str
    unit: str


@dataclass
class Mapping:
    """Describes a binary image loaded in the address space of the profiled program."""

    id: int
    start: int = 0
    limit: int = 0
    offset: int = 0
    file: str = ""
    build_id: str = ""
    has_functions: bool = False
    has_filenames: bool = False
    has_line_numbers: bool = False
    has_inline_frames: bool = False


@dataclass
class Function:
    """Describes a function symbol."""

    id: int
    name: str = ""
    system_name: str = ""
    filename: str = ""
    start_line: int = 0


@dataclass
class Line:
    """Describes a source line inside a location; `function_id` is 0 when unresolved."""

    function_id: int = 0
    line: int = 0


@dataclass
class Location:
    """Describes a stack frame: an address with its (possibly inlined) lines."""

    id: int
    mapping_id: int = 0
    address: int = 0
    lines: list[Line] = field(default_factory=list)
    is_folded: bool = False


@dataclass
class Sample:
    """Describes a recorded call stack (leaf first) and its measured values."""

    location_ids: list[int] = field(default_factory=list)
    values: list[int] = field(default_factory=list)
    labels: dict[str, list[str]] = field(default_factory=dict)
    num_labels: dict[str, list[int]] = field(default_factory=dict)
    num_units: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class Profile:
    """Describes a profile: a header plus the samples and the entities they reference."""

    sample_type: list[ValueType] = field(default_factory=list)
    samples: list[Sample] = field(default_factory=list)
    mappings: list[Mapping] = field(default_factory=list)
    locations: list[Location] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    drop_frames: str = ""
    keep_frames: str = ""
    time_nanos: int = 0
    duration_nanos: int = 0
    period_type: ValueType | None = None
    period: int = 0
    comments: list[str] = field(default_factory=list)
    default_sample_type: str = ""
