"""Constants for gar-apt-method."""

# Outbound status codes
CAPABILITIES = 100
LOG = 101
URI_START = 200
URI_DONE = 201
URI_FAILURE = 400
GENERAL_FAILURE = 401

# Inbound command codes
URI_ACQUIRE = 600
CONFIGURATION = 601

# Configuration keys (Config-Item "Key=Value")
CONFIG_SERVICE_ACCOUNT_JSON = "Acquire::gar::Service-Account-JSON"
CONFIG_SERVICE_ACCOUNT_EMAIL = "Acquire::gar::Service-Account-Email"
CONFIG_DEBUG = "Debug::Acquire::gar"

# apt routes "ar+https" URIs to this method; the transport is plain HTTPS
PSEUDO_SCHEME = "ar+https"
REAL_SCHEME = "https"

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

PROTOCOL_VERSION = "1.0"

# Version
METHOD_VERSION = "0.1.0"
