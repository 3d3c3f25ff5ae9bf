"""
Thin presentation clients of the GraphQL API: listing with client-side
filter/search, detail lookups, and the create/edit forms with their
field-level validation gate.
"""
