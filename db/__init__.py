"""
db/ - Database Layer
====================
Entity mapping, statement building, the scoped SQL Server session and the
data context that ties them together.
"""
