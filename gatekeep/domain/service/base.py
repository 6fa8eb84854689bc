"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold logic that spans aggregates or talks to more than
    one repository or adapter.
    """

    pass
