from __future__ import annotations


class ConfigurationError(ValueError):
    """A biome, noise or color table failed to load or validate.

    Raised only while building the diagram or the sampler; nothing is ever
    partially constructed.
    """
