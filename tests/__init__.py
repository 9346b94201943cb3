# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the landing page server:
# - test_models.py: Subscription request and record validation
# - test_subscriber_store.py: Flat-file store behaviour
# - test_subscription_writer.py: Serialized writes under concurrency
# - test_subscribe_api.py: POST /subscribe end to end
# - test_site.py: Static files and the /alpha redirect
# - test_config_and_health.py: Settings and health endpoints
#
# Run tests with: pytest
# =============================================================================
