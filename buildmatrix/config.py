"""Configuration classes for buildmatrix expansion."""

from dataclasses import dataclass


@dataclass
class ExpansionConfig:
    """Settings that control how a matrix document is expanded."""

    # Largest Cartesian product a single merge may produce
    max_combinations: int = 100_000

    # Check the document against the packaged JSON schema before flattening
    validate_schema: bool = True

    # Stringify non-string mapping keys (e.g. YAML `true:` keys)
    normalize_keys: bool = True


# Global configuration instance
DEFAULT_CONFIG = ExpansionConfig()
