"""
Domain layer: marketplace orders, tickets, logs and remote API resources.
"""
