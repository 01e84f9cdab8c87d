"""
Puff Backend: API Routes Package
================================

Route Inventory:
    - auth.py:            /api/auth/signup, /api/auth/login, /api/auth/me
    - catalog.py:         /api/catalog
    - strains.py:         /api/strains, /api/strains/{id}
    - sessions.py:        /api/sessions, /api/sessions/{id}
    - recommendations.py: /api/recommendations/vibes, /api/recommendations/{vibe_id}
    - insights.py:        /api/insights/stats, /home, /profile
    - medical.py:         /api/medical/logs, /insights, /report
    - tolerance.py:       /api/tolerance-break, /api/tolerance-break/guide
    - health.py:          /health

Routes stay thin: read the request, call a service, set status and headers.
"""
