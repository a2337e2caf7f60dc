"""Game domain services: registry, matchmaking, liveness and request handling.

Everything here is transport-free so the HTTP routes and the socket handlers
share one implementation of the rules.
"""
