"""Kernel: domain models, ports, configuration and the topology reconciler.

The kernel never touches a concrete storage backend; drivers implementing
the ports live in :mod:`rootarchive.drivers`.
"""
