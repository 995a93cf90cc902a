"""One-class-per-file implementations behind :mod:`omnihai_providers.base.errors`."""
