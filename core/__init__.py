"""
Core module shared by the license and prompt apps.

Holds the domain exceptions and events, the event bus, webhook signature
checks, metrics, middleware and health views.
"""
