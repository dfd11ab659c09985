"""Supported webhook platforms and their signature framing."""

from enum import Enum


class WebhookPlatform(Enum):
    ZID = "zid"
    SALLA = "salla"
    CALENDLY = "calendly"
    GENERIC = "generic"


# Header names are matched case-insensitively by HTTP frameworks but must
# otherwise match exactly.
SIGNATURE_HEADERS: dict[WebhookPlatform, str] = {
    WebhookPlatform.ZID: "x-zid-signature",
    WebhookPlatform.SALLA: "x-salla-signature",
    WebhookPlatform.CALENDLY: "calendly-webhook-signature",
    WebhookPlatform.GENERIC: "x-webhook-signature",
}

# Prefix carried in front of the hex digest, stripped before comparison.
SIGNATURE_PREFIXES: dict[WebhookPlatform, str] = {
    WebhookPlatform.ZID: "",
    WebhookPlatform.SALLA: "",
    WebhookPlatform.CALENDLY: "sha256=",
    WebhookPlatform.GENERIC: "",
}


def parse_platform(value) -> WebhookPlatform:
    """Raises ValueError for unknown platforms."""
    if isinstance(value, WebhookPlatform):
        return value
    return WebhookPlatform(str(value).lower())


def signature_header_name(platform) -> str:
    return SIGNATURE_HEADERS[parse_platform(platform)]
