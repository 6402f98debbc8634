"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the comment engine's rules: anything that spans
    more than one comment, or a comment and its post.
    """

    pass
