"""RFC 9457 Problem Details exception hierarchy.

All API errors extend ProblemDetailError and are converted to
application/problem+json responses by the exception handler middleware.
"""


class ProblemDetailError(Exception):
    def __init__(
        self,
        type_uri: str,
        title: str,
        status: int,
        detail: str,
        violations: list[dict] | None = None,
    ):
        self.type_uri = type_uri
        self.title = title
        self.status = status
        self.detail = detail
        self.violations = violations
        super().__init__(detail)


class ValidationError(ProblemDetailError):
    def __init__(self, violations: list[dict]):
        super().__init__(
            type_uri="https://api.thermal.sleep/problems/validation-error",
            title="Validation Error",
            status=422,
            detail=f"Request body contains {len(violations)} validation error(s)",
            violations=violations,
        )


class InvalidTimeFormatError(ProblemDetailError):
    def __init__(self, field: str, value: str):
        super().__init__(
            type_uri="https://api.thermal.sleep/problems/invalid-time-format",
            title="Invalid Time Format",
            status=422,
            detail=f"Field '{field}' value '{value}' must be in HH:MM format",
            violations=[
                {
                    "field": field,
                    "message": "Must be in HH:MM format",
                    "constraint": "invalid_format",
                }
            ],
        )


class InvalidScheduleError(ProblemDetailError):
    def __init__(self, reason: str):
        super().__init__(
            type_uri="https://api.thermal.sleep/problems/invalid-schedule",
            title="Invalid Sleep Schedule",
            status=422,
            detail=reason,
        )


class UnknownSleepLevelError(ProblemDetailError):
    def __init__(self, level: str, allowed: tuple[str, ...]):
        super().__init__(
            type_uri="https://api.thermal.sleep/problems/unknown-sleep-level",
            title="Unknown Sleep Level",
            status=404,
            detail=f"Sleep level '{level}' is not supported. Must be one of: {', '.join(allowed)}",
        )


class OperationInFlightError(ProblemDetailError):
    def __init__(self, operation: str):
        super().__init__(
            type_uri="https://api.thermal.sleep/problems/operation-in-flight",
            title="Request In Flight",
            status=409,
            detail=f"A profile {operation} is already in progress for this session.",
        )


class ProfileStoreUnavailableError(ProblemDetailError):
    def __init__(self, operation: str, reason: str):
        super().__init__(
            type_uri="https://api.thermal.sleep/problems/profile-store-unavailable",
            title="Profile Store Unavailable",
            status=502,
            detail=f"Error during profile {operation}. Please try again. {reason}".strip(),
        )
