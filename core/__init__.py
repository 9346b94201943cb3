# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic subscription logic:
# - models/: Pydantic schemas for requests and stored records
# - services/: The flat-file subscriber store and its single writer
# - exceptions.py: Error taxonomy, each error tagged with its HTTP status
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
