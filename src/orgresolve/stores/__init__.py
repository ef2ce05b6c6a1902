"""
Local organization stores for orgresolve.

Each store implements the OrgStore Protocol (core/interfaces.py):
- InMemoryOrgStore  (list-backed; loads JSON / JSON Lines)
- SqliteOrgStore    (SQLite table, LIKE-based substring match)

Add new stores by creating a module and wiring it in factory.make_store().
"""
