"""Request services: fan out provider calls, derive metrics, assemble responses."""
