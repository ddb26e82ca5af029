"""
Domain Layer

Business logic for file records, temporary links, access policy and
the error taxonomy. Independent of the database and the blob store.
"""
