"""
Puff Backend: Services Layer
============================

What:  Business logic between the routes (HTTP) and the database.
How:   Stateless service classes exposed as module-level singletons. Each
       method receives the request's AsyncSession and the caller's user id.

Service Inventory:
    - auth_service:           signup, login, password hashing, access tokens
    - strain_service:         strain CRUD and cursor pagination
    - session_service:        consumption session CRUD
    - recommendation_service: vibe-based strain scoring
    - insights_service:       stats, home and profile aggregates
    - medical_service:        symptom logs, relief insights, doctor report
    - tolerance_service:      tolerance break day counter

The scoring and aggregation passes are plain functions (score_strains,
compute_stats, compute_relief_insights, build_doctor_report,
compute_break_status) so they can be tested without a database.
"""
