"""Translation models for i18n system.

Defines the closed set of dictionary entry shapes and the value objects
passed through the resolution pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Union

from infrastructure.i18n.exceptions import MalformedEntryError


class PluralCategory(str, Enum):
    """CLDR plural category tags."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"

    @classmethod
    def values(cls) -> FrozenSet[str]:
        return frozenset(member.value for member in cls)

    @classmethod
    def coerce(cls, tag: object) -> "PluralCategory":
        """Map a provider answer onto the closed tag set.

        Anything outside the set is treated as ``other``.
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return cls.OTHER


PLURAL_TAGS = PluralCategory.values()


@dataclass(frozen=True)
class Literal:
    """A terminal entry holding a plain or template string."""

    text: str


@dataclass(frozen=True)
class PluralGroup:
    """A terminal entry holding one template per plural category.

    Attributes:
        variants: Mapping of category tag (e.g. "one") to template string.
            The "other" variant is mandatory.
    """

    variants: Mapping[str, str]

    def __post_init__(self):
        normalized = {}
        for tag, text in self.variants.items():
            tag_value = tag.value if isinstance(tag, PluralCategory) else tag
            if tag_value not in PLURAL_TAGS:
                raise MalformedEntryError(f"Unknown plural category: {tag_value}")
            if not isinstance(text, str):
                raise MalformedEntryError(
                    f"Plural variant '{tag_value}' must be a string, got {type(text).__name__}"
                )
            normalized[tag_value] = text

        if PluralCategory.OTHER.value not in normalized:
            raise MalformedEntryError("Plural group is missing the 'other' variant")

        object.__setattr__(self, "variants", MappingProxyType(normalized))

    def get(self, tag: Union[str, PluralCategory]) -> Optional[str]:
        tag_value = tag.value if isinstance(tag, PluralCategory) else tag
        return self.variants.get(tag_value)


@dataclass(frozen=True)
class Namespace:
    """A non-terminal entry grouping child entries by key segment."""

    children: Mapping[str, "TranslationEntry"] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def get(self, segment: str) -> Optional["TranslationEntry"]:
        return self.children.get(segment)


TranslationEntry = Union[Literal, PluralGroup, Namespace]


@dataclass(frozen=True)
class ResolvedOutput:
    """Result of one resolution.

    Attributes:
        text: Final display string.
        consumed: Names of the params that were substituted into the text.
        missing: True when the key had no translation and fallback text was used.
    """

    text: str
    consumed: FrozenSet[str] = frozenset()
    missing: bool = False

    def __str__(self) -> str:
        return self.text


@dataclass
class TranslationCatalog:
    """A parsed dictionary for one locale, ready to be installed in a store.

    Attributes:
        locale: Locale identifier the catalog was loaded for.
        root: Top-level namespace of valid entries.
        errors: Full dotted path -> error for entries that could not be built.
        loaded_at: Timestamp (ISO 8601) when the catalog was built.
    """

    locale: str
    root: Namespace = field(default_factory=Namespace)
    errors: Dict[str, MalformedEntryError] = field(default_factory=dict)
    loaded_at: Optional[str] = None
