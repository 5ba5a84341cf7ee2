"""Configuration settings for the geochild capture tool."""

import os


def get_redis_host_and_port():
    """Get Redis connection details from environment variables."""
    host = os.environ.get("REDIS_HOST", "localhost")
    port = int(os.environ.get("REDIS_PORT", "6379"))
    return dict(host=host, port=port)


def get_records_key():
    """Name of the key holding the whole record collection."""
    return os.environ.get("RECORDS_KEY", "geochild_records")


def get_text_generation_config():
    """Get text-generation service settings from environment variables."""
    api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY", "")
    model = os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview")
    base_url = os.environ.get(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    timeout = float(os.environ.get("TEXT_GENERATION_TIMEOUT", "30"))

    return dict(
        api_key=api_key,
        model=model,
        base_url=base_url,
        timeout=timeout,
    )


def get_location_timeout_seconds():
    """Upper bound for a one-shot device position request."""
    return float(os.environ.get("LOCATION_TIMEOUT_SECONDS", "30"))


def get_map_config():
    """Map view defaults: Maputo city centre."""
    return dict(
        center=(-25.9692, 32.5732),
        zoom=int(os.environ.get("MAP_ZOOM", "12")),
        tile_url=os.environ.get(
            "MAP_TILE_URL", "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
        ),
    )


def get_api_url():
    """Get API URL from environment variables."""
    host = os.environ.get("API_HOST", "localhost")
    port = int(os.environ.get("API_PORT", "8000"))
    return f"http://{host}:{port}"
