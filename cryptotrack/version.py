# cryptotrack/version.py

SERVICE_NAME = "cryptotrack-api"
SERVICE_VERSION = "0.3.0"


def service_version_payload() -> dict:
    """Used by the /api/version endpoint."""
    return {
        "service": f"{SERVICE_NAME}:{SERVICE_VERSION}",
        "version": SERVICE_VERSION,
    }
