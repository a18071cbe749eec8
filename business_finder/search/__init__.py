"""
Business search.

Responsibilities:
- Validate the category and location inputs of a search.
- Invoke the business lookup collaborator.
- Deduplicate returned businesses by place id.
- Distinguish an empty result set from a failed lookup.
"""
