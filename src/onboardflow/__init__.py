"""
Onboardflow - Durable employee onboarding on Temporal

This package contains:
- workflows: the onboarding state machine, its Temporal workflow binding,
  activities, client helpers and worker entry point
- integrations: email delivery and the HR follow-up task tracker
- platform: cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
