"""auth/ -- Credential store, password hashing and bearer tokens.

Layer rule: auth/ imports only core/, stdlib and third-party libraries.
It does NOT import from api/ or employees/.
api/ imports from auth/, not the other way around.
"""
