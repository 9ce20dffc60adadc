"""Transport layers: inbound webhooks and outbound callbacks."""
