# pca_pipeline/errors.py


class PCAPipelineError(Exception):
    """Base class for every error raised by the pipeline."""


class ParseError(PCAPipelineError, ValueError):
    """Input table is malformed: ragged rows, non-numeric or missing cells."""


class DimensionalityError(PCAPipelineError, ValueError):
    """Too few samples/features, or a constant feature under scaling."""


class MissingCentroidError(PCAPipelineError, LookupError):
    """A sample's group label has no entry in the centroid table."""


class ConfigError(PCAPipelineError, ValueError):
    """Invalid analysis or presentation settings."""
