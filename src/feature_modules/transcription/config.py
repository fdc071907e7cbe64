# Deepgram model used when the form carries no `model` field.
# Options: nova-3, nova-2, nova, enhanced, base
DEFAULT_MODEL: str = "nova-3"

# Upload without a declared content type
FALLBACK_MIMETYPE: str = "application/octet-stream"
