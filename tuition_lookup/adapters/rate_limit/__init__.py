"""Rate limiting adapters.

An in-memory limiter today; the abstract interface keeps the HTTP layer
unchanged if the table moves to a shared store.
"""
