class PlanningError(Exception):
    pass


class InvalidInputError(PlanningError):
    pass


class ZeroPowerError(PlanningError, ZeroDivisionError):
    """A station with no charging power reached the energy model."""
