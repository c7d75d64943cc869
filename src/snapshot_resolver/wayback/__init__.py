"""Wayback Machine snapshot resolution.

Resolves a URL, optionally constrained to a date range, to the closest
archived snapshot via the Internet Archive's Availability API.

No credentials are required. The Internet Archive's infrastructure can be
fragile; failures surface as ``RequestFailed`` results and are never retried.
"""
