"""
Service layer abstraction.

Each service encapsulates the business logic for a domain.  Handlers
depend on the abstract ``UserService`` interface; the concrete
implementation is chosen when the application is composed.
"""
