"""Matrix document language.

`expansion` turns a nested document into partial records; `schema` checks a
document's shape against the packaged JSON schema.
"""
