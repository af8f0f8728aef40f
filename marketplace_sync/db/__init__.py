"""
Data access: commerce database repositories and marketplace API clients.
"""
