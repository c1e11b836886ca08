# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - utils.py: Shared utilities (date parsing, UUID normalization)
#
# Import from the submodules directly; importing lib.utils must not pull in
# settings or the Supabase client.
# =============================================================================
