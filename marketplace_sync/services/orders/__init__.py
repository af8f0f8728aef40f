"""
Order services package for marketplace order synchronization.

This package contains the services that decide which orders need to be
pulled from or pushed to the marketplace, and that perform the
acknowledgement/ticket handshakes with its API.
"""
