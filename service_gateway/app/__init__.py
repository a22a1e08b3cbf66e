"""
API Gateway Service package for the Storefront.

The gateway is the single public entry point in front of four backends:
- PostgREST: database REST API, also the default route
- Backend API: business logic, fronted in part by façade endpoints
- MCP service and worker service: proxied under their own prefixes

Every request passes CORS, access logging and API-key authentication before
being routed.

Structure:
- app.main: FastAPI app and service wiring.
- app.domain: Middleware chain, its stages and the response envelope.
- app.routing: Path-prefix router.
- app.facade: Façade endpoint table, validation and response shaping.
- app.adapters: Outbound HTTP forwarder.
"""
