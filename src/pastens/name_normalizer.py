"""
ENS name normalization.

Canonical search terms are trimmed, lower-cased and carry the fixed
top-level suffix. Normalization is idempotent.
"""

DEFAULT_SUFFIX = ".eth"


class NameNormalizer:
    """
    Normalizes user-entered ENS names.

    Handles:
    - Stripping surrounding whitespace
    - Conversion to lowercase
    - Appending the top-level suffix when missing
    """

    def __init__(self, suffix: str = DEFAULT_SUFFIX) -> None:
        """
        Initialize normalizer with the top-level suffix.

        Args:
            suffix: Suffix every canonical name ends with (e.g., '.eth')
        """
        suffix = suffix.strip().lower()
        if not suffix:
            raise ValueError("Name suffix cannot be empty")
        if not suffix.startswith("."):
            suffix = "." + suffix
        self._suffix = suffix

    @property
    def suffix(self) -> str:
        return self._suffix

    def normalize(self, raw_name: str) -> str:
        """
        Convert a raw name to its canonical search term.

        Args:
            raw_name: The name as typed, clicked or read from the route

        Returns:
            Canonical term, or an empty string for blank input
        """
        if not raw_name:
            return ""

        name = raw_name.strip().lower()
        if not name:
            return ""

        if not name.endswith(self._suffix):
            name = name + self._suffix
        return name

    def is_normalized(self, name: str) -> bool:
        """Check whether ``name`` is already in canonical form."""
        return bool(name) and self.normalize(name) == name


def same_name(left: str, right: str) -> bool:
    """Case-insensitive comparison used for history de-duplication."""
    return left.lower() == right.lower()


_default_normalizer = NameNormalizer()


def normalize_name(raw_name: str) -> str:
    """Normalize with the default '.eth' suffix."""
    return _default_normalizer.normalize(raw_name)
