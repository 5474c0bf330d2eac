"""
Version 1 of the API.

This subpackage bundles the user endpoints for the first public
version of the Meals Finder API.
"""
