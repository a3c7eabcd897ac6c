"""
txdecoder — Solana transaction instruction decoder.

Fetches a transaction from the upstream aggregation service, resolves account
keys through address lookup tables, and decodes each instruction of the
allow-listed programs with their Anchor IDLs. Served over HTTP by api_server.
"""

__version__ = "0.1.0"
