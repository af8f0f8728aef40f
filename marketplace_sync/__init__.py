"""
Marketplace Order Sync.

Reconciles order state between the commerce backend and the marketplace
order API (acknowledgements, cancellations and shipments).
"""

__version__ = "0.1.0"
