"""
Application package initializer.

This package contains the user-account API of the meals finder
application: login, registration, profile settings and user tags.
The HTTP routes live under ``api/v1``, business logic under
``services`` and the single-statement SQL accessors under
``repositories``.  The application object itself is built by
``main.create_app``.
"""
