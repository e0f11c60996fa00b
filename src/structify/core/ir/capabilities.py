"""
Capability vocabulary for structify IR.

Capabilities are the derived behaviors a declaration may request through
its derive attribute. The vocabulary is closed.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Capability(StrEnum):
    """Derived behaviors the synthesized wrapper can provide."""

    EQ = "equality-comparison"
    ORD = "ordering-comparison"
    HASH = "hashing"
    COPY = "copy-semantics"
    CLONE = "clone-semantics"
    DEBUG = "debug-formatting"
    DEFAULT = "default-value"

    @classmethod
    def lookup(cls, token: str) -> Capability | None:
        """Return the capability for a derive name or canonical name."""
        if token in CAPABILITY_ALIASES:
            return CAPABILITY_ALIASES[token]
        try:
            return cls(token)
        except ValueError:
            return None


# Derive names accepted in declaration source
CAPABILITY_ALIASES: dict[str, Capability] = {
    "PartialEq": Capability.EQ,
    "Eq": Capability.EQ,
    "PartialOrd": Capability.ORD,
    "Ord": Capability.ORD,
    "Hash": Capability.HASH,
    "Copy": Capability.COPY,
    "Clone": Capability.CLONE,
    "Debug": Capability.DEBUG,
    "Default": Capability.DEFAULT,
}

# Capabilities realized as members of the wrapper class itself
WRAPPER_CAPABILITIES = (
    Capability.EQ,
    Capability.ORD,
    Capability.HASH,
    Capability.COPY,
    Capability.CLONE,
)


class CapabilitySet(BaseModel):
    """
    Capabilities requested by a declaration.

    Attributes:
        derives: Requested wrapper capabilities (eq, ord, hash, copy, clone)
        debug: Debug formatting requested
        default: Default value requested
    """

    derives: frozenset[Capability] = frozenset()
    debug: bool = False
    default: bool = False

    model_config = ConfigDict(frozen=True)

    def __contains__(self, capability: object) -> bool:
        if capability == Capability.DEBUG:
            return self.debug
        if capability == Capability.DEFAULT:
            return self.default
        return capability in self.derives

    def with_capability(self, capability: Capability) -> CapabilitySet:
        """Return a copy with one more capability requested."""
        if capability == Capability.DEBUG:
            return self.model_copy(update={"debug": True})
        if capability == Capability.DEFAULT:
            return self.model_copy(update={"default": True})
        return self.model_copy(update={"derives": self.derives | {capability}})

    @property
    def wrapper_capabilities(self) -> tuple[Capability, ...]:
        """Capabilities the wrapper class implements, in a stable order.

        Equality is always included so constants compare by value.
        """
        return tuple(
            c for c in WRAPPER_CAPABILITIES if c == Capability.EQ or c in self.derives
        )

    def names(self) -> list[str]:
        """Canonical names of everything the wrapper will provide."""
        names = [c.value for c in self.wrapper_capabilities]
        if self.debug:
            names.append(Capability.DEBUG.value)
        if self.default:
            names.append(Capability.DEFAULT.value)
        return names
