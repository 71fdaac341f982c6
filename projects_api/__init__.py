"""
Projects API: registration, login and CRUD over users and projects.
"""
