# ABOUTME: Exception hierarchy for graph assembly, merging and scoring failures
# ABOUTME: Everything raised by graphweave on purpose derives from GraphweaveError


class GraphweaveError(Exception):
    """Base exception for graphweave errors."""

    pass


class GraphMergeError(GraphweaveError):
    """Raised when a set of knowledge graphs cannot be merged."""

    pass


class EmptyInputError(GraphMergeError):
    """Raised when a merge is requested with zero graphs."""

    pass


class DomainMismatchError(GraphMergeError):
    """Raised when graphs from different domains are merged into one domain graph."""

    pass


class EmptyGraphError(GraphweaveError, ValueError):
    """Raised when a metric is undefined because the graph has no entities."""

    pass


class GraphLoadError(GraphweaveError):
    """Raised when a serialized graph or citation file cannot be loaded."""

    pass
