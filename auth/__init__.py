"""auth/ -- Authentication package for the auction backend.

Layer rule: auth/ imports only core/, stdlib and third-party libraries.
It does NOT import from api/ or auction/.
api/ imports from auth/, not the other way around.
"""
