"""
Puff Backend: Middleware Package
================================

Cross-cutting concerns applied to every request.

Execution order (outermost first):
    RequestID → Logging → RateLimit → GZip → CORS → route

The request ID is set before anything else reads it, so rejected (429)
requests are logged and tagged like every other response.
"""
