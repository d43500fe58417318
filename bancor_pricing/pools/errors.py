"""Reserve-resolution error classes."""


class PoolResolutionError(Exception):
    """Base error for mapping a pool reference to engine inputs."""

    pass


class InvalidPairId(PoolResolutionError):
    """Pair id string is not a converter account or a multi-converter symbol."""

    pass


class PoolNotFound(PoolResolutionError):
    """No converter matches the pool reference."""

    pass


class ReserveNotFound(PoolResolutionError):
    """Converter exists but has no balance or weight for the requested symbol."""

    pass
