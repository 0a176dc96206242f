"""
Service layer.

Business rules live here, one service per workflow, built per request around
a ``SqlRepoBundle`` (see ``deps``):

- intake: public submissions (bookings, chef and farmer applications, stories, partners)
- bookings: the admin booking workflow
- payouts: idempotent chef, farmer and ingredient payouts
- chef_tier / chef_optimizer: chef tiering and recommendations
- matching: chef ingredient needs and farmer matching
- onboarding: approving chefs and farmers, payout account onboarding
- impact: impact events and member scores
- invites: role-scoped invites
- notifications: SMS and email
- webhooks: signed payments events
"""
