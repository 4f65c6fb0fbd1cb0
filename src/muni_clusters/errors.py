"""Error types raised by the clustering pipeline."""


class MuniClusterError(Exception):
    """Base class for all pipeline errors."""


class InvalidClusterCount(MuniClusterError):
    """Requested cluster count is zero, negative, or larger than the input."""

    def __init__(self, k: int, n: int) -> None:
        self.k = k
        self.n = n
        super().__init__(f"invalid cluster count k={k} for {n} record(s); need 1 <= k <= {n}")


class EmptyInput(MuniClusterError):
    """An operation that needs at least one record was given none."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} requires at least one record")


class DataFormatError(MuniClusterError):
    """A dataset file could not be decoded into municipality records."""

    def __init__(self, path: object, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}")
