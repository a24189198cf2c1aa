"""
services/ - Application Layer
=============================
Orchestrates repository calls. No SQL lives here.
"""
