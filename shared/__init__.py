"""
Shared utilities for the Storefront Gateway.

This package aggregates common building blocks consumed by the gateway:

- config: Gateway configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and the envelope error block
- base_service: FastAPI application scaffolding

Do not import from service_gateway into shared/.
"""
