"""
API server package — HTTP interface to the transaction decoder.
"""
