"""Application services: auth lifecycle components and their ports."""
