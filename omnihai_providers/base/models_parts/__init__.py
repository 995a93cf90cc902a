"""One-class-per-file model implementations behind :mod:`omnihai_providers.base.models`."""
