"""Business logic services.

Services own queries and rules (ranking, search, vote ledger, sign-in);
routers stay thin and stores stay free of business logic.
"""
