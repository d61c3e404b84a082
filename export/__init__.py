"""
Export feature.

Turns a paginated contract or the signature annotations of an open document
into PDF bytes and hands them to a save target.
"""
