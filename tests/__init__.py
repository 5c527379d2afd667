"""
Test suite for the MTCaptcha server-side SDK

- Unit tests for the result and wire models
- Client tests against httpx.MockTransport (no real HTTP calls)
- Settings and logging helper tests
"""
