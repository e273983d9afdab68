"""Business logic services.

Services contain the board rules (validation, voting, ranking, moderation)
and are used by every store backend. They accept dependencies explicitly.
"""
