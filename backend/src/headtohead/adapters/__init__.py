"""
Adapters connecting the domain to external statistics providers.
"""
