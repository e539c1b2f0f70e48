"""Infrastructure adapters for the tenancy package.

Holds storage-backed repositories, cache stores, runtime configuration,
the built-in context tasks, settings and logging setup.
"""
