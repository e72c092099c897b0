"""auth/ -- Authentication and authorization package for the job board.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or jobs/.
api/ and jobs/ import from auth/, not the other way around.
"""
