# This module defines targeting and send defaults as module-level constants.
# These values are used when a dataset has no content for a subscriber, when
# content rows omit optional metadata, and to name the Supabase tables and
# views the send pipeline reads and writes.

APP_NAME = "Your Friend Fido"

# Fallback message when no content row matches a subscriber.
DEFAULT_SUBJECT = f"Update from {APP_NAME}"
DEFAULT_BODY_HTML = "<p>Thanks for staying engaged.</p>"

# Content rows without a numeric metadata.priority sort after every row that has one.
PRIORITY_SENTINEL = 9999

# Default cap on recipients per send run (overridden by MAX_SEND_PER_RUN).
DEFAULT_MAX_PER_RUN = 100

# Canonical division path prefix for US locations.
OCD_PREFIX = "ocd-division/"
OCD_COUNTRY_US = "ocd-division/country:us"

# Supabase tables and views.
PROFILES_TABLE = "profiles"
SUBSCRIBER_GEO_VIEW = "v_subscriber_geo"
GEO_METRICS_TABLE = "geo_metrics"
CONTENT_ITEMS_TABLE = "v2_content_items"
SEND_JOBS_TABLE = "send_jobs"
DELIVERY_HISTORY_TABLE = "delivery_history"

# Geography keys written to geo_metrics.
GEO_METRIC_KEYS = ["state", "county_fips", "place"]
