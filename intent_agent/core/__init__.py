"""Intent pipeline core: chain access, wallet session, intents."""
