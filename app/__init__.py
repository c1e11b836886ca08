# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - dependencies.py: Injected services and the admin key guard
# - routers/: API endpoint definitions organized by feature
#
# The app layer handles HTTP concerns and delegates champion logic to
# the core/ package.
# =============================================================================
