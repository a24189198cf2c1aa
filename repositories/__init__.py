"""
repositories/ - Data Access Layer
==================================
Each repository is the queryable collection for one mapped entity.
Repositories receive raw rows from the database and return domain model objects.
"""
