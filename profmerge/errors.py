class ProfileMergeError(Exception):
    """Base error for profiles that cannot be merged or compared."""

    code = "profile_merge_error"

    def __init__(self, message: str, *, code: str | None = None, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.context = dict(context or {})

    def as_log_fields(self):
        """Returns the error as fields for a structured log event."""
        return {
            "error_code": self.code,
            "error_message": self.message,
            "error_context": self.context,
        }


class NoProfilesProvided(ProfileMergeError):
    code = "no_profiles"

    def __init__(self, message: str = "no profiles to merge"):
        super().__init__(message)


class IncompatibleProfiles(ProfileMergeError):
    code = "incompatible_profiles"


class IncompatiblePeriodType(IncompatibleProfiles):
    code = "incompatible_period_type"

    def __init__(self, left, right):
        self.left = left
        self.right = right
        super().__init__(
            f"incompatible period types {_describe(left)} and {_describe(right)}",
            context={"left": _describe(left), "right": _describe(right)},
        )


class IncompatibleSampleTypes(IncompatibleProfiles):
    code = "incompatible_sample_types"

    def __init__(self, left: list, right: list):
        self.left = list(left)
        self.right = list(right)
        super().__init__(
            f"incompatible sample types {_describe_list(left)} and {_describe_list(right)}",
            context={
                "left": [_describe(vt) for vt in left],
                "right": [_describe(vt) for vt in right],
            },
        )


def _describe(value_type):
    if value_type is None:
        return "<nil>"
    return f"{value_type.type}/{value_type.unit}"


def _describe_list(value_types):
    return "[" + " ".join(_describe(vt) for vt in value_types) + "]"
