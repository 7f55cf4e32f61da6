"""Error types shared by the data layer, services and surfaces."""


class MoheroError(Exception):
    """Base class for all mohero-admin errors."""


class BackendError(MoheroError):
    """A backend request failed (connection, malformed query, constraint)."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


class NotFoundError(MoheroError):
    """A requested row does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class IncompleteDaysError(BackendError):
    """Missing days could not be created.

    Carries the days that already existed so callers can still render them.
    """

    def __init__(self, program_id: str, existing_days: list, cause: Exception):
        super().__init__(
            f"Could not create missing days for program {program_id}: {cause}",
            table="days",
        )
        self.program_id = program_id
        self.existing_days = existing_days
        self.cause = cause


class FeatureDisabledError(MoheroError):
    """The requested manager affordance is turned off."""

    def __init__(self, feature: str):
        super().__init__(f"Feature '{feature}' is disabled")
        self.feature = feature
