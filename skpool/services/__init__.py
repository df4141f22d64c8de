"""External services used by the pool manager: the KV store and the issuer."""
