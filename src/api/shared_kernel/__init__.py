"""Shared Kernel module.

Components every layer may depend on without pulling in a bounded
context. Today that is only the observation context carried by the
domain probes.
"""
